from route_scaffold.generator.bootstrap import patch_bootstrap
from route_scaffold.generator.templates import TEMPLATES_DIR

BOOTSTRAP = """\
import express from 'express';

const app = express();

initializeApiVersions();

export default app;

function initializeApiVersions() {
}
"""


class TestPatchBootstrap:
    def test_registers_version(self):
        patched = patch_bootstrap(BOOTSTRAP, "v2")
        assert patched == (
            "import express from 'express';\n"
            "import v2 from './api/v2';\n"
            "\n"
            "const app = express();\n"
            "\n"
            "initializeApiVersions();\n"
            "\n"
            "export default app;\n"
            "\n"
            "function initializeApiVersions() {\n"
            "    v2(app);\n"
            "}\n"
        )

    def test_idempotent(self):
        patched = patch_bootstrap(BOOTSTRAP, "v2")
        assert patch_bootstrap(patched, "v2") is None

    def test_second_version(self):
        patched = patch_bootstrap(patch_bootstrap(BOOTSTRAP, "v1"), "v2")
        assert patched.startswith(
            "import express from 'express';\nimport v2 from './api/v2';\nimport v1 from './api/v1';\n\nconst app"
        )
        assert "    v1(app);\n    v2(app);\n" in patched

    def test_existing_import_not_duplicated(self):
        text = BOOTSTRAP.replace("import express from 'express';\n", "import express from 'express';\nimport v2 from './api/v2';\n")
        patched = patch_bootstrap(text, "v2")
        assert patched.count("import v2 from './api/v2';") == 1
        assert "    v2(app);\n" in patched

    def test_header_comment_is_skipped(self):
        patched = patch_bootstrap("// header\n\n" + BOOTSTRAP, "v1")
        assert patched.startswith(
            "// header\n\nimport express from 'express';\nimport v1 from './api/v1';\n\nconst app"
        )

    def test_custom_hook_and_app(self):
        text = "const server = create();\n\nfunction registerApis() {\n}\n"
        patched = patch_bootstrap(text, "v1", hook="registerApis", app="server")
        assert "    v1(server);\n" in patched

    def test_missing_hook_changes_nothing(self, caplog):
        assert patch_bootstrap("const app = 1;\n", "v1") is None
        assert "initializeApiVersions" in caplog.text

    def test_template_bootstrap(self):
        text = (TEMPLATES_DIR / "src" / "index.js").read_text(encoding="utf-8")
        patched = patch_bootstrap(text, "v1")
        assert patched.startswith("import express from 'express';\nimport v1 from './api/v1';\n")
        assert "function initializeApiVersions() {\n    v1(app);\n}\n" in patched
        assert "console.log('Server is running in development mode');" in patched
        assert patch_bootstrap(patched, "v1") is None
