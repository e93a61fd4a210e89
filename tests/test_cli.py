import json
from pathlib import Path
import textwrap

from typer.testing import CliRunner

from routelint.cli import app

runner = CliRunner()


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


def _controller(tmp_path: Path, name: str, path: str) -> None:
    write(
        tmp_path / f"{name.lower()}.py",
        f"""
        from routelint.markers import PostMapping, RestController

        @RestController
        class {name}:
            @PostMapping("{path}")
            def create(self):
                return {{}}
        """,
    )


def test_ping():
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "pong" in result.stdout


def test_check_clean_repo_exits_zero(tmp_path: Path):
    _controller(tmp_path, "Orders", "/orders")

    result = runner.invoke(app, ["check", str(tmp_path)])

    assert result.exit_code == 0
    assert "0 error(s), 0 warning(s)" in result.stdout


def test_check_duplicates_exit_one_with_json_report(tmp_path: Path):
    _controller(tmp_path, "Orders", "/orders")
    _controller(tmp_path, "Legacy", "/orders")

    result = runner.invoke(app, ["check", str(tmp_path), "--format", "json"])

    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert report["files_scanned"] == 2
    assert [d["message"] for d in report["diagnostics"]] == ["Duplicate path: POST /orders"] * 2
    assert {d["declaration"] for d in report["diagnostics"]} == {"Orders.create", "Legacy.create"}


def test_routes_lists_composed_routes(tmp_path: Path):
    _controller(tmp_path, "Orders", "/orders")
    _controller(tmp_path, "Users", "/users")

    result = runner.invoke(app, ["routes", str(tmp_path), "--format", "json", "--path-contains", "user"])

    assert result.exit_code == 0
    rows = json.loads(result.stdout)
    assert [(r["verb"], r["path"], r["handler_name"]) for r in rows] == [("POST", "/users", "Users.create")]


def test_check_rejects_missing_path(tmp_path: Path):
    result = runner.invoke(app, ["check", str(tmp_path / "nope")])
    assert result.exit_code != 0


def test_check_rejects_unknown_format(tmp_path: Path):
    result = runner.invoke(app, ["check", str(tmp_path), "--format", "xml"])
    assert result.exit_code != 0
