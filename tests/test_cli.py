from pathlib import Path

from click.testing import CliRunner

from route_scaffold.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_petstore(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate",
            "-a", str(FIXTURES / "petstore.yaml"),
            "-t", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        assert "Found 3 endpoints." in result.output
        assert "/pets -> src/api/v2/paths/pets.js (changed)" in result.output
        assert "Done!" in result.output
        assert (tmp_path / "src/api/v2/paths/pets.js").exists()

    def test_second_run_reports_unchanged(self, tmp_path):
        runner = CliRunner()
        args = ["generate", "-a", str(FIXTURES / "petstore.yaml"), "-t", str(tmp_path)]
        runner.invoke(main, args)
        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert "(unchanged)" in result.output
        assert "Wrote" not in result.output

    def test_dry_run_prints_diff(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "-a", str(FIXTURES / "petstore.yaml"), "-t", str(tmp_path), "--dry-run",
        ])
        assert result.exit_code == 0
        assert "+++ b/src/api/v2/paths/pets.js" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_failed_endpoint_exits_non_zero(self, tmp_path):
        doc = tmp_path / "api.yaml"
        doc.write_text("paths:\n  /a:\n    get:\n      parameters:\n        - name: sid\n          in: cookie\n")
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "-a", str(doc), "-t", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "FAILED" in result.output
        assert "1 endpoint(s) failed" in result.output

    def test_missing_document(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "-a", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_url_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "-a", "https://example.com/api.yaml"])
        assert result.exit_code == 1
        assert "URL" in result.output

    def test_options_from_environment(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["generate", "-a", str(FIXTURES / "petstore.yaml")],
            env={"ROUTE_SCAFFOLD_GENERATE_TARGET_FOLDER": str(tmp_path)},
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "src/api/v2/paths/pets.js").exists()

    def test_verbose_logs_steps(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "-v", "generate", "-a", str(FIXTURES / "petstore.yaml"), "-t", str(tmp_path),
        ])
        assert result.exit_code == 0
        assert 'INFO: Processing "GET /pets" List all pets' in result.output

    def test_invalid_write_policy(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "-a", str(FIXTURES / "petstore.yaml"), "--write-policy", "sometimes",
        ])
        assert result.exit_code == 2
