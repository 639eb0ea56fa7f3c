import tempfile
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from authoring_docs.cli import main
from authoring_docs.errors import GeneratorError

FIXTURES = Path(__file__).parent / "fixtures"
APP = FIXTURES / "app"


class TestCliBuild:
    @patch("authoring_docs.cli.generate_apiref")
    def test_build_writes_manual_and_rest(self, mock_apiref, tmp_path):
        out = tmp_path / "docs"
        runner = CliRunner()
        result = runner.invoke(main, ["build", "--rootDir", str(APP), "--outputDir", str(out)])

        assert result.exit_code == 0, result.output
        assert "Generating documentation for adapt-authoring@1.0.0" in result.output
        assert f"Documentation build complete. Output in {out.resolve()}" in result.output
        assert (out / "manual" / "_sidebar.md").exists()
        assert (out / "rest" / "api.json").exists()
        mock_apiref.assert_called_once()

    @patch("authoring_docs.cli.generate_apiref")
    def test_generators_run_in_order(self, mock_apiref, tmp_path):
        calls = []
        mock_apiref.side_effect = lambda *a: calls.append("apiref")
        with patch("authoring_docs.cli.generate_manual", side_effect=lambda *a: calls.append("manual")), patch(
            "authoring_docs.cli.generate_swagger", side_effect=lambda *a: calls.append("swagger")
        ):
            result = CliRunner().invoke(main, ["build", "--rootDir", str(APP), "--outputDir", str(tmp_path / "o")])
        assert result.exit_code == 0, result.output
        assert calls == ["apiref", "manual", "swagger"]

    @patch("authoring_docs.cli.generate_apiref")
    def test_output_dir_emptied_first(self, mock_apiref, tmp_path):
        out = tmp_path / "docs"
        out.mkdir()
        (out / "stale.txt").write_text("old")
        result = CliRunner().invoke(main, ["build", "--root-dir", str(APP), "--output-dir", str(out)])
        assert result.exit_code == 0, result.output
        assert not (out / "stale.txt").exists()

    @patch("authoring_docs.cli.generate_apiref")
    def test_output_dir_from_env(self, mock_apiref, tmp_path):
        out = tmp_path / "from-env"
        result = CliRunner().invoke(
            main, ["build"], env={"DOCS_ROOT_DIR": str(APP), "DOCS_OUTPUT_DIR": str(out)}
        )
        assert result.exit_code == 0, result.output
        assert (out / "rest" / "api.yaml").exists()

    @patch("authoring_docs.cli.generate_apiref", side_effect=GeneratorError("jsdoc", "exited with code 1"))
    def test_generator_failure_exits_non_zero(self, mock_apiref, tmp_path):
        result = CliRunner().invoke(main, ["build", "--rootDir", str(APP), "--outputDir", str(tmp_path / "o")])
        assert result.exit_code == 1
        assert "jsdoc: exited with code 1" in result.output

    def test_refuses_to_clear_app(self, tmp_path):
        result = CliRunner().invoke(main, ["build", "--rootDir", str(APP), "--outputDir", str(APP)])
        assert result.exit_code == 1
        assert "Refusing to clear" in result.output
        assert (APP / "package.json").exists()

    def test_missing_app_descriptor(self, tmp_path):
        result = CliRunner().invoke(main, ["build", "--rootDir", str(tmp_path), "--outputDir", str(tmp_path / "o")])
        assert result.exit_code == 1
        assert "Cannot load application descriptor" in result.output

    def test_no_output_dir_configured(self, tmp_path):
        (tmp_path / "package.json").write_text('{"name": "bare", "version": "0.1.0"}')
        (tmp_path / "adapt-authoring.json").write_text("{}")
        result = CliRunner().invoke(main, ["build", "--rootDir", str(tmp_path)])
        assert result.exit_code == 1
        assert "No output directory given" in result.output


class TestCliServe:
    @patch("authoring_docs.cli.serve_docs")
    def test_serve_configured_output_dir(self, mock_serve):
        result = CliRunner().invoke(main, ["serve", "--rootDir", str(APP)])
        assert result.exit_code == 0, result.output
        expected = (Path(tempfile.gettempdir()) / "docs-build").resolve()
        mock_serve.assert_called_once_with(expected, 9000, False)
        assert "Docs hosted at http://localhost:9000" in result.output

    @patch("authoring_docs.cli.serve_docs")
    def test_serve_options(self, mock_serve, tmp_path):
        result = CliRunner().invoke(
            main, ["serve", "--rootDir", str(APP), "--outputDir", str(tmp_path), "--port", "8123", "--open"]
        )
        assert result.exit_code == 0, result.output
        mock_serve.assert_called_once_with(tmp_path.resolve(), 8123, True)

    @patch("authoring_docs.cli.serve_docs")
    def test_port_from_env(self, mock_serve, tmp_path):
        result = CliRunner().invoke(
            main, ["serve", "--rootDir", str(APP), "--outputDir", str(tmp_path)], env={"DOCS_PORT": "9100"}
        )
        assert result.exit_code == 0, result.output
        assert mock_serve.call_args[0][1] == 9100
