"""Tests for the BluePrint serializer."""

from pathlib import Path

import pytest

from blueprint_notation.core import ir
from blueprint_notation.core.parser import parse
from blueprint_notation.core.serializer import dumps, format_key, quote

ROUND_TRIP_SOURCES = {
    "generic_block": "DataStructure LinkedList<T> { properties: { head: Node<T> = null } }",
    "scalars": (
        "Config App {\n"
        '  name: "shop",\n'
        "  retries: 3,\n"
        "  ratio: -0.25,\n"
        "  big: 1e6,\n"
        "  enabled: true,\n"
        "  owner: null,\n"
        "  kind: plain bare words,\n"
        "  url: https://example.com/api\n"
        "}"
    ),
    "keys": 'API Http {\n  "Content-Type": json,\n  404: "Not found",\n  db.pool: 5\n}',
    "methods": (
        "Service Users {\n"
        "  register(email: string, password: string): User,\n"
        "  find(id: UUID) -> User?,\n"
        "  reset() {},\n"
        "  merge(a: Map<K, V>) -> Map<K, V> {\n"
        '    complexity: "O(n)"\n'
        "  },\n"
        "  handler: process(event) -> Result\n"
        "}"
    ),
    "scenarios": (
        "Service Cache {\n"
        "  behaviors: [\n"
        '    "Given a full cache, when a key is inserted, then the oldest key is evicted",\n'
        '    { when: "a key is read", then: "it becomes the newest" },\n'
        '    "Keys are strings"\n'
        "  ]\n"
        "}"
    ),
    "references": (
        "DataStructure User found in `models/user.bp`\n"
        "System Shop {\n"
        "  payments: Payments found in `payments.bp`,\n"
        '  storage: Database Primary { engine: "postgres" }\n'
        "}"
    ),
    "record_results": (
        "Service A {\n"
        "  check(x) -> { valid: bool },\n"
        "  verify(y) -> {\n"
        "    ok: bool\n"
        "  } {\n"
        "    cost: low\n"
        "  }\n"
        "}"
    ),
    "globs_and_symbols": "Config C {\n  sources: src/**/*.py,\n  area: 5²\n}",
    "escapes": 'Service A {\n  text: "a \\"quoted\\" word\\nand a\\\\backslash"\n}',
    "long_array": (
        "Service A {\n  steps: ["
        + ", ".join(f'"step number {i} of the process"' for i in range(8))
        + "]\n}"
    ),
}


class TestRoundTrip:
    @pytest.mark.parametrize(
        "source", list(ROUND_TRIP_SOURCES.values()), ids=list(ROUND_TRIP_SOURCES)
    )
    def test_reparse_is_equivalent(self, source: str) -> None:
        original = parse(source)
        reparsed = parse(dumps(original))
        assert reparsed.equivalent(original)
        assert reparsed.to_data() == original.to_data()

    @pytest.mark.parametrize(
        "source", list(ROUND_TRIP_SOURCES.values()), ids=list(ROUND_TRIP_SOURCES)
    )
    def test_output_is_stable(self, source: str) -> None:
        once = dumps(parse(source))
        assert dumps(parse(once)) == once

    def test_fixture_document(self, user_auth: ir.Document) -> None:
        reparsed = parse(dumps(user_auth), Path("auth.bp"))
        assert reparsed.equivalent(user_auth)

    def test_property_order_preserved(self) -> None:
        original = parse("Service A { z: 1, a: 2, m: 3 }")
        assert parse(dumps(original)).blocks[0].keys() == ["z", "a", "m"]


class TestCanonicalForm:
    def test_block_layout(self) -> None:
        text = dumps(parse("Service A { x: 1, y: [a, b], }"))
        assert text == "Service A {\n  x: 1,\n  y: [a, b]\n}\n"

    def test_nested_block_indent(self) -> None:
        text = dumps(parse("Service A { cfg: { retries: 3 } }"))
        assert text == "Service A {\n  cfg: {\n    retries: 3\n  }\n}\n"

    def test_custom_indent(self) -> None:
        text = dumps(parse("Service A { x: 1 }"), indent=4)
        assert text == "Service A {\n    x: 1\n}\n"

    def test_empty_block(self) -> None:
        assert dumps(parse("Service A {}")) == "Service A {}\n"

    def test_empty_document(self) -> None:
        assert dumps(parse("")) == ""

    def test_blocks_separated_by_blank_line(self) -> None:
        text = dumps(parse("Service A {}\nService B {}"))
        assert text == "Service A {}\n\nService B {}\n"

    def test_method_form(self) -> None:
        text = dumps(parse("Service A {\n  get(id: UUID): User\n}"))
        assert "  get(id: UUID) -> User\n" in text

    def test_record_result(self) -> None:
        text = dumps(parse("Service A {\n  verify(y) -> {\n    ok: bool\n  }\n}"))
        assert "  verify(y) -> { ok: bool }\n" in text

    def test_call_value_keeps_key(self) -> None:
        text = dumps(parse("Service A {\n  handler: process(event)\n}"))
        assert "  handler: process(event)\n" in text

    def test_reference(self) -> None:
        text = dumps(parse('User found in "models/user.bp"'))
        assert text == "User found in `models/user.bp`\n"

    def test_long_array_is_split(self) -> None:
        text = dumps(parse(ROUND_TRIP_SOURCES["long_array"]))
        assert '  steps: [\n    "step number 0 of the process",\n' in text

    def test_structured_scenario_written_as_block(self) -> None:
        text = dumps(parse('Service A {\n  behaviors: [{ when: "x", then: "y" }]\n}'))
        assert '{\n      when: "x",\n      then: "y"\n    }' in text

    def test_comments_are_not_written(self) -> None:
        text = dumps(parse("// header\nService A {\n  x: 1 // note\n}"))
        assert "//" not in text


class TestHelpers:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("name", "name"),
            ("db.pool-size", "db.pool-size"),
            ("Content Type", '"Content Type"'),
            ("404", '"404"'),
            ("", '""'),
        ],
    )
    def test_format_key(self, key: str, expected: str) -> None:
        assert format_key(key) == expected

    def test_quote_escapes(self) -> None:
        assert quote('say "hi"\n') == '"say \\"hi\\"\\n"'

    def test_serializes_constructed_tree(self) -> None:
        document = ir.Document(
            declarations=[
                ir.Block(
                    type_name="Service",
                    identifier="Built",
                    properties=[
                        ir.Property(
                            key="size",
                            value=ir.Scalar(kind=ir.ScalarKind.NUMBER, value=3, raw="3"),
                        ),
                        ir.Property(
                            key="tags",
                            value=ir.ArrayValue(
                                items=[ir.Scalar(kind=ir.ScalarKind.STRING, value="a", raw="a")]
                            ),
                        ),
                    ],
                )
            ]
        )
        assert dumps(document) == 'Service Built {\n  size: 3,\n  tags: ["a"]\n}\n'
