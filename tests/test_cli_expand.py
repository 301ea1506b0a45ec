from pathlib import Path

from typer.testing import CliRunner

from enforcer.cli import app

runner = CliRunner()


def test_cli_expand_stdin():
    r = runner.invoke(app, ["expand", "--tab-width", "4"], input="foo\tbar\tbaz\n")
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout == "foo-bar-baz\n"


def test_cli_expand_default_width_and_fill(tmp_path: Path):
    p = tmp_path / "in.txt"
    p.write_text("\tx\n", encoding="utf-8")
    r = runner.invoke(app, ["expand", str(p)])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert r.stdout == "--------x\n"

    r2 = runner.invoke(app, ["expand", str(p), "--tab-width", "2", "--fill", " "])
    assert r2.stdout == "  x\n"


def test_cli_expand_invalid_width():
    r = runner.invoke(app, ["expand", "--tab-width", "0"], input="\t\n")
    assert r.exit_code == 2
    assert "E_INVALID_TAB_WIDTH" in r.stderr


def test_cli_expand_invalid_fill():
    r = runner.invoke(app, ["expand", "--fill", "ab"], input="\t\n")
    assert r.exit_code == 2
    assert "E_INVALID_FILL" in r.stderr


def test_cli_expand_missing_file(tmp_path: Path):
    r = runner.invoke(app, ["expand", str(tmp_path / "nope.txt")])
    assert r.exit_code == 1
    assert "E_FILE_NOT_FOUND" in r.stderr
