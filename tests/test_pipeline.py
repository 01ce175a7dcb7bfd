import os
from pathlib import Path

import yaml

from route_scaffold.config import GeneratorConfig
from route_scaffold.errors import InvalidSpecification, UnsupportedParameterLocation
from route_scaffold.fileio import read_text, write_text_atomic
from route_scaffold.generator.pipeline import generate
from route_scaffold.parser.swagger import load_apidoc, parse_apidoc

FIXTURES = Path(__file__).parent / "fixtures"

MIXED = {
    "info": {"version": "1.0.0"},
    "paths": {
        "/good": {"get": {"summary": "fine"}},
        "/bad": {"get": {"parameters": [{"name": "sid", "in": "cookie"}]}},
    },
}


class TestGenerate:
    def test_petstore(self, tmp_path):
        report = generate(load_apidoc(FIXTURES / "petstore.yaml"), GeneratorConfig(target=tmp_path))

        assert report.ok
        assert report.tag == "v2"
        assert report.staged == ["src/api/v2/index.js", "src/index.js"]
        api = tmp_path / "src/api/v2"
        assert (api / "paths/pets.js").exists()
        assert "petId: req.params.petId" in (api / "paths/pets/{petId}.js").read_text()
        assert "photo: req.body.photo" in (api / "paths/pets/{petId}/photo.js").read_text()
        assert "import v2 from './api/v2';" in (tmp_path / "src/index.js").read_text()
        assert "src/index.js" in report.written
        assert report.manifest_updated
        assert (tmp_path / "package.json").exists()

    def test_base_document(self, tmp_path):
        generate(load_apidoc(FIXTURES / "petstore.yaml"), GeneratorConfig(target=tmp_path))
        base = yaml.safe_load((tmp_path / "src/api/v2/base-api-doc.yml").read_text())
        assert base["paths"] == {}
        assert base["info"]["version"] == "2.3.1"
        assert list(base) == ["swagger", "info", "basePath", "schemes", "paths"]

    def test_second_run_changes_nothing(self, tmp_path):
        apidoc = load_apidoc(FIXTURES / "petstore.yaml")
        config = GeneratorConfig(target=tmp_path)
        generate(apidoc, config)
        before = {p: p.read_text() for p in tmp_path.rglob("*") if p.is_file()}

        report = generate(apidoc, config)
        assert report.ok
        assert report.staged == []
        assert report.bootstrap is None
        assert report.written == []
        assert not report.manifest_updated
        assert {p: p.read_text() for p in tmp_path.rglob("*") if p.is_file()} == before

    def test_all_or_nothing_writes_no_route_module(self, tmp_path):
        report = generate(parse_apidoc(MIXED), GeneratorConfig(target=tmp_path))

        assert not report.ok
        [failure] = report.failures
        assert failure.endpoint == "/bad"
        assert isinstance(failure.error, UnsupportedParameterLocation)
        assert not (tmp_path / "src/api/v1/paths/good.js").exists()
        assert not (tmp_path / "package.json").exists()

    def test_keep_going_writes_successful_endpoints(self, tmp_path):
        config = GeneratorConfig(target=tmp_path, write_policy="keep-going")
        report = generate(parse_apidoc(MIXED), config)

        assert len(report.failures) == 1
        assert (tmp_path / "src/api/v1/paths/good.js").exists()
        assert not (tmp_path / "src/api/v1/paths/bad.js").exists()
        assert "src/api/v1/paths/good.js" in report.written

    def test_malformed_route_module_is_left_alone(self, tmp_path):
        bad = tmp_path / "src/api/v1/paths/bad.js"
        bad.parent.mkdir(parents=True)
        bad.write_text("export default function (")
        data = {"info": {"version": "1"}, "paths": {"/bad": {"get": {}}, "/good": {"get": {}}}}

        report = generate(parse_apidoc(data), GeneratorConfig(target=tmp_path, write_policy="keep-going"))

        [failure] = report.failures
        assert "bad.js:1" in str(failure.error)
        assert bad.read_text() == "export default function ("
        assert (tmp_path / "src/api/v1/paths/good.js").exists()

    def test_dry_run(self, tmp_path):
        report = generate(parse_apidoc({"paths": {"/a": {"get": {}}}}), GeneratorConfig(target=tmp_path), dry_run=True)

        assert list(tmp_path.iterdir()) == []
        assert report.written == []
        assert report.staged == ["src/api/v1/index.js", "src/index.js"]
        diffs = "".join(f.diff() for f in report.changed_files())
        assert "+++ b/src/api/v1/paths/a.js" in diffs
        assert "+export default function endpoint() {" in diffs
        assert "--- /dev/null" in diffs

    def test_bootstrap_without_hook(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src/index.js").write_text("const app = 1;\n")
        report = generate(parse_apidoc({"paths": {}}), GeneratorConfig(target=tmp_path))
        assert report.bootstrap is None
        assert (tmp_path / "src/index.js").read_text() == "const app = 1;\n"

    def test_dry_run_on_fresh_target_shows_registration(self, tmp_path):
        report = generate(parse_apidoc({"paths": {"/a": {"get": {}}}}), GeneratorConfig(target=tmp_path), dry_run=True)

        assert list(tmp_path.iterdir()) == []
        assert report.bootstrap is not None
        assert report.bootstrap.previous is None
        diff = report.bootstrap.diff()
        assert "+import v1 from './api/v1';" in diff
        assert "+    v1(app);" in diff

    def test_dot_segment_endpoint_fails_alone(self, tmp_path):
        data = {"info": {"version": "1"}, "paths": {"/../../escape": {"get": {}}, "/good": {"get": {}}}}

        report = generate(parse_apidoc(data), GeneratorConfig(target=tmp_path, write_policy="keep-going"))

        [failure] = report.failures
        assert failure.endpoint == "/../../escape"
        assert failure.rel is None
        assert isinstance(failure.error, InvalidSpecification)
        assert (tmp_path / "src/api/v1/paths/good.js").exists()
        assert not (tmp_path / "src/escape.js").exists()
        assert not (tmp_path / "src/api/escape.js").exists()

    def test_bad_string_escape_fails_alone(self, tmp_path):
        bad = tmp_path / "src/api/v1/paths/bad.js"
        bad.parent.mkdir(parents=True)
        bad.write_text("export default function endpoint() {\n    const s = '\\u{110000}';\n}\n")
        data = {"info": {"version": "1"}, "paths": {"/bad": {"get": {}}, "/good": {"get": {}}}}

        report = generate(parse_apidoc(data), GeneratorConfig(target=tmp_path, write_policy="keep-going"))

        [failure] = report.failures
        assert "bad.js:2" in str(failure.error)
        assert (tmp_path / "src/api/v1/paths/good.js").exists()


class TestWriteTextAtomic:
    def test_creates_parents(self, tmp_path):
        path = tmp_path / "a/b/c.js"
        write_text_atomic(path, "x\n")
        assert read_text(path) == "x\n"

    def test_keeps_mode_and_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "c.js"
        path.write_text("old")
        os.chmod(path, 0o600)
        write_text_atomic(path, "new")
        assert path.read_text() == "new"
        assert path.stat().st_mode & 0o777 == 0o600
        assert [p.name for p in tmp_path.iterdir()] == ["c.js"]

    def test_read_missing(self, tmp_path):
        assert read_text(tmp_path / "nope") is None
