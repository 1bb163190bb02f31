"""
Parser and lint options.

Defaults match how BluePrint is written in practice; projects override them
through the ``[parser]`` and ``[lint]`` tables of ``blueprint.toml``.
"""

from dataclasses import dataclass, field

DEFAULT_ANONYMOUS_BLOCK_TYPES = frozenset(
    {"TestScenarios", "Tests", "Requirements", "Configuration", "Summary"}
)
DEFAULT_SCENARIO_KEYS = frozenset({"behaviors", "scenarios"})


@dataclass(frozen=True)
class ParserOptions:
    """
    Options that change how BluePrint text is parsed.

    Attributes:
        anonymous_block_types: Root-level block types allowed without an identifier
        scenario_keys: Property keys (case-insensitive) whose values become Scenarios
    """

    anonymous_block_types: frozenset[str] = field(
        default_factory=lambda: DEFAULT_ANONYMOUS_BLOCK_TYPES
    )
    scenario_keys: frozenset[str] = field(default_factory=lambda: DEFAULT_SCENARIO_KEYS)

    def is_scenario_key(self, key: str) -> bool:
        return key.lower() in {k.lower() for k in self.scenario_keys}


@dataclass(frozen=True)
class LintOptions:
    """
    Options for validation.

    Attributes:
        extended: Also run naming and duplicate-item rules
        disabled: Rule codes to skip (``BP101``)
    """

    extended: bool = False
    disabled: frozenset[str] = frozenset()
