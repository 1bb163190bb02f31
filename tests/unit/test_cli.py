"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from blueprint_notation.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def test_project(tmp_path: Path, user_auth_source: str):
    """Create a temporary project with a manifest and two spec files."""
    specs = tmp_path / "specs"
    specs.mkdir()
    (specs / "auth.bp").write_text(user_auth_source)
    (specs / "orders.bp").write_text(
        """\
Service Orders {
  statuses: [open, closed],
  place(order: Order) -> OrderId
}
"""
    )

    manifest = tmp_path / "blueprint.toml"
    manifest.write_text(
        """
[project]
name = "shop"
version = "0.1.0"

[modules]
paths = ["specs/"]
"""
    )

    return tmp_path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.bp"
    path.write_text("Service Broken {\n  x: 1\n")
    return path


def test_version(cli_runner: CliRunner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "BluePrint Notation version" in result.output


# =============================================================================
# parse
# =============================================================================


def test_parse_tree(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["parse", str(test_project / "specs" / "auth.bp")])
    assert result.exit_code == 0
    assert "Service UserAuth" in result.output
    assert "DataStructure LinkedList<T>" in result.output


def test_parse_json(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(
        app, ["parse", str(test_project / "specs" / "orders.bp"), "--format", "json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    block = data["declarations"][0]
    assert (block["type"], block["identifier"]) == ("Service", "Orders")
    assert block["properties"][0] == {"key": "statuses", "value": ["open", "closed"]}


def test_parse_error(cli_runner: CliRunner, broken_file: Path):
    result = cli_runner.invoke(app, ["parse", str(broken_file)])
    assert result.exit_code == 1
    assert "Parse error" in result.output
    assert "Missing closing '}'" in result.output


def test_parse_missing_file(cli_runner: CliRunner, tmp_path: Path):
    result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.bp")])
    assert result.exit_code != 0


# =============================================================================
# validate / lint
# =============================================================================


def test_validate_project(cli_runner: CliRunner, test_project: Path):
    """The free-form behaviour in auth.bp is reported as info, not an error."""
    result = cli_runner.invoke(app, ["validate", "--manifest", str(test_project / "blueprint.toml")])
    assert result.exit_code == 0
    assert "INFO:" in result.output
    assert "[BP004]" in result.output
    assert "ERROR" not in result.output


def test_validate_project_from_cwd(
    cli_runner: CliRunner, test_project: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(test_project)
    result = cli_runner.invoke(app, ["validate"])
    assert result.exit_code == 0


def test_validate_without_manifest(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(app, ["validate"])
    assert result.exit_code == 1
    assert "No blueprint.toml found" in result.output


def test_validate_files_ok(cli_runner: CliRunner, tmp_path: Path):
    path = tmp_path / "ok.bp"
    path.write_text("Service A {\n  x: 1\n}\n")
    result = cli_runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 0
    assert "OK: 1 file(s) valid." in result.output


def test_validate_errors(cli_runner: CliRunner, tmp_path: Path):
    path = tmp_path / "dup.bp"
    path.write_text("Service A {\n  x: 1,\n  x: 2\n}\n")
    result = cli_runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "Validation failed" in result.output
    assert "ERROR:" in result.output
    assert "Duplicate property 'x'" in result.output


def test_validate_duplicates_across_files(cli_runner: CliRunner, tmp_path: Path):
    first = tmp_path / "a.bp"
    second = tmp_path / "b.bp"
    first.write_text("Service Shared {\n  x: 1\n}\n")
    second.write_text("Service Shared {\n  y: 1\n}\n")
    result = cli_runner.invoke(app, ["validate", str(first), str(second)])
    assert result.exit_code == 1
    assert "[BP002]" in result.output


def test_validate_vscode_format(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "dup.bp").write_text("Service A {\n  x: 1,\n  x: 2\n}\n")
    result = cli_runner.invoke(app, ["validate", "dup.bp", "--format", "vscode"])
    assert result.exit_code == 1
    assert "dup.bp:3:3: error: Duplicate property 'x'" in result.output
    assert "[BP001]" in result.output


def test_validate_vscode_success(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "ok.bp").write_text("Service A {\n  x: 1\n}\n")
    result = cli_runner.invoke(app, ["validate", "ok.bp", "-f", "vscode"])
    assert result.exit_code == 0
    assert "::notice: Validation successful" in result.output


def test_validate_vscode_parse_error(
    cli_runner: CliRunner, broken_file: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(broken_file.parent)
    result = cli_runner.invoke(app, ["validate", "broken.bp", "--format", "vscode"])
    assert result.exit_code == 1
    assert "broken.bp:1:16: error: Missing closing '}'" in result.output


def test_validate_parse_error(cli_runner: CliRunner, broken_file: Path):
    result = cli_runner.invoke(app, ["validate", str(broken_file)])
    assert result.exit_code == 1
    assert "Parse error" in result.output


def test_lint_adds_extended_rules(cli_runner: CliRunner, tmp_path: Path):
    path = tmp_path / "style.bp"
    path.write_text("service A {\n  tags: [x, x]\n}\n")

    validated = cli_runner.invoke(app, ["validate", str(path)])
    linted = cli_runner.invoke(app, ["lint", str(path)])

    assert validated.exit_code == 0
    assert "OK: 1 file(s) valid." in validated.output
    assert linted.exit_code == 0
    assert "[BP101]" in linted.output
    assert "[BP102]" in linted.output


def test_lint_respects_disabled_codes(cli_runner: CliRunner, test_project: Path):
    manifest = test_project / "blueprint.toml"
    manifest.write_text(manifest.read_text() + '\n[lint]\ndisable = ["BP004"]\n')
    result = cli_runner.invoke(app, ["lint", "--manifest", str(manifest)])
    assert result.exit_code == 0
    assert "OK: 2 file(s) valid." in result.output


# =============================================================================
# fmt
# =============================================================================


def test_fmt_check_reports_changes(cli_runner: CliRunner, tmp_path: Path):
    path = tmp_path / "messy.bp"
    path.write_text("Service A { x: 1, y: [a,b] }")
    result = cli_runner.invoke(app, ["fmt", "--check", str(path)])
    assert result.exit_code == 1
    assert "Would reformat" in result.output
    assert path.read_text() == "Service A { x: 1, y: [a,b] }"


def test_fmt_rewrites(cli_runner: CliRunner, tmp_path: Path):
    path = tmp_path / "messy.bp"
    path.write_text("Service A { x: 1, y: [a,b] }")

    result = cli_runner.invoke(app, ["fmt", str(path)])
    assert result.exit_code == 0
    assert "Formatted" in result.output
    assert path.read_text() == "Service A {\n  x: 1,\n  y: [a, b]\n}\n"

    again = cli_runner.invoke(app, ["fmt", "--check", str(path)])
    assert again.exit_code == 0
    assert "1 file(s) already formatted." in again.output


def test_fmt_parse_error(cli_runner: CliRunner, broken_file: Path):
    result = cli_runner.invoke(app, ["fmt", str(broken_file)])
    assert result.exit_code == 1
    assert broken_file.read_text() == "Service Broken {\n  x: 1\n"


# =============================================================================
# refs
# =============================================================================


def test_refs(cli_runner: CliRunner, tmp_path: Path):
    (tmp_path / "models").mkdir()
    (tmp_path / "models" / "user.bp").write_text("DataStructure User {\n  id: UUID\n}\n")
    main = tmp_path / "main.bp"
    main.write_text("DataStructure User found in `models/user.bp`\n")

    result = cli_runner.invoke(app, ["refs", str(main)])

    assert result.exit_code == 0
    assert "User -> models/user.bp (1 declarations)" in result.output


def test_refs_none(cli_runner: CliRunner, test_project: Path):
    result = cli_runner.invoke(app, ["refs", str(test_project / "specs" / "auth.bp")])
    assert result.exit_code == 0
    assert "No file references." in result.output


def test_refs_missing_target(cli_runner: CliRunner, tmp_path: Path):
    main = tmp_path / "main.bp"
    main.write_text("User found in `missing.bp`\n")
    result = cli_runner.invoke(app, ["refs", str(main)])
    assert result.exit_code == 1
    assert "File reference 'User' not found" in result.output


def test_refs_base_dir(cli_runner: CliRunner, tmp_path: Path):
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "user.bp").write_text("DataStructure User {\n  id: UUID\n}\n")
    specs = tmp_path / "specs"
    specs.mkdir()
    main = specs / "main.bp"
    main.write_text("User found in `user.bp`\n")

    result = cli_runner.invoke(app, ["refs", str(main), "--base-dir", str(shared)])

    assert result.exit_code == 0
    assert "User -> user.bp" in result.output


# =============================================================================
# [parser] settings of blueprint.toml
# =============================================================================


@pytest.fixture
def module_project(tmp_path: Path) -> Path:
    """A project that allows anonymous ``Module`` blocks."""
    (tmp_path / "blueprint.toml").write_text('[parser]\nanonymous_blocks = ["Module"]\n')
    (tmp_path / "core.bp").write_text("Module {\n  x: 1\n}\n")
    return tmp_path


def test_parse_uses_manifest_from_cwd(
    cli_runner: CliRunner, module_project: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(module_project)
    result = cli_runner.invoke(app, ["parse", "core.bp", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["declarations"][0]["type"] == "Module"


def test_parse_without_manifest_rejects_anonymous_block(
    cli_runner: CliRunner, module_project: Path
):
    result = cli_runner.invoke(app, ["parse", str(module_project / "core.bp")])
    assert result.exit_code == 1
    assert "Block 'Module' requires an identifier" in result.output


def test_fmt_uses_explicit_manifest(cli_runner: CliRunner, module_project: Path):
    result = cli_runner.invoke(
        app,
        [
            "fmt",
            "--check",
            str(module_project / "core.bp"),
            "--manifest",
            str(module_project / "blueprint.toml"),
        ],
    )
    assert result.exit_code == 0
    assert "1 file(s) already formatted." in result.output


def test_validate_and_fmt_agree(
    cli_runner: CliRunner, module_project: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(module_project)
    validated = cli_runner.invoke(app, ["validate"])
    formatted = cli_runner.invoke(app, ["fmt", "--check", "core.bp"])
    assert validated.exit_code == 0
    assert formatted.exit_code == 0


def test_refs_uses_manifest_parser_settings(
    cli_runner: CliRunner, module_project: Path, monkeypatch: pytest.MonkeyPatch
):
    (module_project / "main.bp").write_text("Core found in `core.bp`\n")
    monkeypatch.chdir(module_project)
    result = cli_runner.invoke(app, ["refs", "main.bp"])
    assert result.exit_code == 0
    assert "Core -> core.bp (1 declarations)" in result.output
