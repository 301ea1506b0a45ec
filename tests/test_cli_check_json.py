import json
import shutil
from pathlib import Path

from typer.testing import CliRunner

from enforcer.cli import app

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"

runner = CliRunner()


def test_cli_check_json_failure_contains_codes(tmp_path: Path):
    root = tmp_path / "tree"
    shutil.copytree(EXAMPLES / "tree", root)
    r = runner.invoke(app, ["check", str(root), "--format", "json"])
    assert r.exit_code == 2
    payload = json.loads(r.stdout)
    assert payload["tool"] == "enforcer"
    assert payload["command"] == "check"
    assert payload["ok"] is False
    assert payload["file_count"] == 4
    assert payload["error_count"] == 9
    codes = {e["code"] for e in payload["errors"]}
    assert codes == {"C_HAS_TABS", "C_TRAILING_WHITESPACE"}
    assert {e["source"] for e in payload["errors"]} == {"check"}
    assert payload["cleaned"] == []

    mixed = [e for e in payload["errors"] if e["file"].endswith("mixed.cpp")]
    assert [e["path"] for e in mixed][:3] == ["line:3", "line:4", "line:5"]


def test_cli_check_json_clean_success(tmp_path: Path):
    root = tmp_path / "tree"
    shutil.copytree(EXAMPLES / "tree", root)
    r = runner.invoke(app, ["check", str(root), "--format", "json", "--clean"])
    assert r.exit_code == 0, r.stdout + r.stderr
    payload = json.loads(r.stdout)
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["errors"] == []
    assert len(payload["cleaned"]) == 2


def test_cli_check_json_load_error(tmp_path: Path):
    r = runner.invoke(app, ["check", str(tmp_path / "nope"), "--format", "json"])
    assert r.exit_code == 1
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert payload["file_count"] == 0
    assert payload["errors"][0]["code"] == "E_PATH_NOT_FOUND"
    assert payload["errors"][0]["source"] == "load"
