import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .options import (
    DEFAULT_ANONYMOUS_BLOCK_TYPES,
    DEFAULT_SCENARIO_KEYS,
    LintOptions,
    ParserOptions,
)

MANIFEST_NAME = "blueprint.toml"


@dataclass
class ProjectManifest:
    """
    Project manifest loaded from blueprint.toml.

    Contains project metadata, the directories holding BluePrint files,
    and parser and lint settings.
    """

    name: str
    version: str
    module_paths: list[str]
    parser: ParserOptions = field(default_factory=ParserOptions)
    lint: LintOptions = field(default_factory=LintOptions)


def default_manifest(name: str = "unnamed") -> ProjectManifest:
    """Manifest used when a project has no blueprint.toml."""
    return ProjectManifest(name=name, version="0.0.0", module_paths=["."])


def load_manifest(path: Path) -> ProjectManifest:
    data = tomllib.loads(path.read_text(encoding="utf-8"))

    project = data.get("project", {})
    modules = data.get("modules", {})
    parser_data = data.get("parser", {})
    lint_data = data.get("lint", {})

    parser_options = ParserOptions(
        anonymous_block_types=frozenset(
            parser_data.get("anonymous_blocks", DEFAULT_ANONYMOUS_BLOCK_TYPES)
        ),
        scenario_keys=frozenset(parser_data.get("scenario_keys", DEFAULT_SCENARIO_KEYS)),
    )

    lint_options = LintOptions(
        extended=lint_data.get("extended", False),
        disabled=frozenset(code.upper() for code in lint_data.get("disable", [])),
    )

    return ProjectManifest(
        name=project.get("name", "unnamed"),
        version=project.get("version", "0.0.0"),
        module_paths=modules.get("paths", ["."]),
        parser=parser_options,
        lint=lint_options,
    )
