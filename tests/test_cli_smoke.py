from typer.testing import CliRunner

from mdblog.cli.cli import app


def test_cli_smoke():
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("lint", "extract", "commit", "export", "build", "terms", "history", "diff", "init"):
        assert name in result.output
