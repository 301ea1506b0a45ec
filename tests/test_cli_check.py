import shutil
from pathlib import Path

from typer.testing import CliRunner

from enforcer.cli import app

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

runner = CliRunner()


def _copy_tree(tmp_path: Path) -> Path:
    dst = tmp_path / "tree"
    shutil.copytree(EXAMPLES / "tree", dst)
    return dst


def test_cli_check_reports_findings(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root)])
    assert r.exit_code == 2
    assert "C_HAS_TABS" in r.stderr
    assert "C_TRAILING_WHITESPACE" in r.stderr
    assert "FAIL: 4 files checked, 9 findings" in r.stdout


def test_cli_check_clean_fixes_tree(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "--clean"])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert "cleaned:" in r.stdout
    assert "OK: 4 files checked, 0 findings, 2 cleaned" in r.stdout
    assert "\t" not in (root / "src" / "mixed.cpp").read_text(encoding="utf-8")

    r2 = runner.invoke(app, ["check", str(root)])
    assert r2.exit_code == 0


def test_cli_check_with_config_file(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(
        app, ["check", str(root), "-f", str(EXAMPLES / "build-ignore.enforcer.yaml")]
    )
    assert r.exit_code == 2
    assert "gen.cpp" not in r.stderr
    assert "3 files checked, 7 findings" in r.stdout


def test_cli_check_discovers_config_in_tree(tmp_path: Path):
    root = _copy_tree(tmp_path)
    (root / ".enforcer").write_text("endings: ['.h']\n", encoding="utf-8")
    r = runner.invoke(app, ["check", str(root)])
    assert r.exit_code == 0, r.stdout + r.stderr
    assert "OK: 1 files checked" in r.stdout


def test_cli_check_allow_tabs(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "-t"])
    assert r.exit_code == 2
    assert "C_HAS_TABS" not in r.stderr
    assert "2 findings" in r.stdout


def test_cli_check_endings_and_length(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "-g", ".h", "-l", "10"])
    assert r.exit_code == 2
    assert "C_LINE_TOO_LONG" in r.stderr
    assert "clean.h:line:2" in r.stderr

    r2 = runner.invoke(app, ["check", str(root), "-g", ".h,.c"])
    assert r2.exit_code == 0, r2.stdout + r2.stderr


def test_cli_check_quiet_counts(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "-q"])
    assert r.exit_code == 2
    assert "C_HAS_TABS: 7" in r.stdout
    assert "C_TRAILING_WHITESPACE: 2" in r.stdout
    assert "line:" not in r.stdout + r.stderr


def test_cli_check_color_and_threads(tmp_path: Path):
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "-a", "-j", "1", "-v"])
    assert r.exit_code == 2
    assert "C_HAS_TABS" in r.stderr


def test_cli_check_missing_path(tmp_path: Path):
    r = runner.invoke(app, ["check", str(tmp_path / "nope")])
    assert r.exit_code == 1
    assert "E_PATH_NOT_FOUND" in r.stderr


def test_cli_check_missing_config_file(tmp_path: Path):
    r = runner.invoke(app, ["check", str(tmp_path), "-f", str(tmp_path / "none.yaml")])
    assert r.exit_code == 1
    assert "E_FILE_NOT_FOUND" in r.stderr


def test_cli_check_invalid_tab_width(tmp_path: Path):
    r = runner.invoke(app, ["check", str(tmp_path), "--tab-width", "0"])
    assert r.exit_code == 2
    assert "E_INVALID_TAB_WIDTH" in r.stderr


def test_cli_check_unknown_format(tmp_path: Path):
    r = runner.invoke(app, ["check", str(tmp_path), "--format", "xml"])
    assert r.exit_code == 2
    assert "E_CHECK_UNKNOWN_FORMAT" in r.stderr


def test_cli_check_color_forces_ansi_when_piped(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")
    root = _copy_tree(tmp_path)
    r = runner.invoke(app, ["check", str(root), "-a"])
    assert r.exit_code == 2
    assert "\x1b[" in r.stdout
    assert "\x1b[" in r.stderr

    plain = runner.invoke(app, ["check", str(root)])
    assert "\x1b[" not in plain.stdout + plain.stderr
