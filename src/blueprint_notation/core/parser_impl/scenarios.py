"""
Scenario recognition for BluePrint notation.

Values under scenario keys (``behaviors`` by default) describe behaviour as
natural language. Three shapes are recognised:

    behaviors: [
      "Given an empty list, when an item is added, then size is 1",
      { given: "a full cache", when: "a key is inserted", then: "the oldest key is evicted" },
      "Items are returned in insertion order"
    ]

The first is a sentence scenario, the second a structured one, the third is
kept as free-form text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .. import ir

_SENTENCE = re.compile(
    r"^\s*(?:given\s+(?P<given>.+?)\s*[,;]?\s+)?"
    r"when\s+(?P<when>.+?)\s*[,;]?\s+"
    r"then\s+(?P<then>.+?)\s*[.!]?\s*$",
    re.IGNORECASE | re.DOTALL,
)

SCENARIO_PARTS = ("given", "when", "then")


def parse_scenario_text(
    text: str, location: ir.SourceLocation | None = None
) -> ir.Scenario:
    """
    Build a Scenario from a sentence.

    ``Given X, when Y, then Z`` (``Given`` optional, punctuation optional)
    becomes a sentence scenario; anything else is free-form.
    """
    text = text.strip()
    match = _SENTENCE.match(text)
    if match is None:
        return ir.Scenario(style=ir.ScenarioStyle.FREEFORM, text=text, location=location)
    return ir.Scenario(
        style=ir.ScenarioStyle.SENTENCE,
        text=text,
        given=match.group("given"),
        when=match.group("when"),
        then=match.group("then"),
        location=location,
    )


def compose_scenario_text(given: str | None, when: str | None, then: str | None) -> str:
    """Compose ``Given X, when Y, then Z`` from the parts that are present."""
    parts = [
        f"{label} {text}"
        for label, text in zip(SCENARIO_PARTS, (given, when, then), strict=True)
        if text
    ]
    sentence = ", ".join(parts)
    return sentence[:1].upper() + sentence[1:]


def is_structured_scenario(block: ir.Block) -> bool:
    """An anonymous, non-empty block whose keys are all given/when/then with text values."""
    if block.type_name or block.identifier or not block.properties:
        return False
    for prop in block.properties:
        if prop.key.lower() not in SCENARIO_PARTS:
            return False
        if not _is_text(prop.value):
            return False
    return True


def _is_text(value: ir.Value) -> bool:
    return isinstance(value, ir.Scalar) and value.kind in (
        ir.ScalarKind.STRING,
        ir.ScalarKind.BARE,
    )


class ScenarioParserMixin:
    """Parser mixin turning scenario-key values into Scenario nodes."""

    if TYPE_CHECKING:
        options: Any

    def to_scenarios(self, value: ir.Value) -> ir.Value:
        """
        Convert a value found under a scenario key.

        Text becomes a Scenario, arrays and blocks of named scenarios are
        converted item by item, anything else is returned unchanged.
        """
        if isinstance(value, ir.Scalar):
            if _is_text(value):
                return parse_scenario_text(str(value.value), value.location)
            return value

        if isinstance(value, ir.ArrayValue):
            return ir.ArrayValue(
                items=[self.to_scenarios(item) for item in value.items],
                location=value.location,
            )

        if isinstance(value, ir.Block):
            if is_structured_scenario(value):
                return self._structured_scenario(value)
            return ir.Block(
                type_name=value.type_name,
                identifier=value.identifier,
                properties=[
                    ir.Property(
                        key=prop.key,
                        value=self.to_scenarios(prop.value),
                        location=prop.location,
                    )
                    for prop in value.properties
                ],
                location=value.location,
            )

        return value

    def _structured_scenario(self, block: ir.Block) -> ir.Scenario:
        parts: dict[str, str] = {}
        for prop in block.properties:
            assert isinstance(prop.value, ir.Scalar)
            parts[prop.key.lower()] = str(prop.value.value).strip()
        given, when, then = (parts.get(name) for name in SCENARIO_PARTS)
        return ir.Scenario(
            style=ir.ScenarioStyle.STRUCTURED,
            text=compose_scenario_text(given, when, then),
            given=given,
            when=when,
            then=then,
            location=block.location,
        )
