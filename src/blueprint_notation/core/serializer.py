"""
Serializer for BluePrint notation.

Writes a Document back as canonical BluePrint text:

- one property per line, commas between properties, no trailing comma
- strings double-quoted with backslash escapes; numbers and bare words verbatim
- arrays on one line when every item fits, otherwise one item per line
- structured scenarios as ``{ given: ..., when: ..., then: ... }`` blocks
- calls in method form when the property key is the call name

Parsing the output yields a tree equivalent to the input
(``Document.equivalent``), with property and item order preserved.
"""

import re

from . import ir

INLINE_ARRAY_WIDTH = 80

_BARE_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:[.-](?:[A-Za-z_][A-Za-z0-9_]*|[0-9]+))*$")


def quote(text: str) -> str:
    """Double-quote ``text`` with the escapes the lexer understands."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def format_key(key: str) -> str:
    """Write a property key bare when it reads back as the same key, quoted otherwise."""
    if _BARE_KEY.match(key):
        return key
    return quote(key)


class Serializer:
    """Renders tree nodes as BluePrint text."""

    def __init__(self, indent: int = 2):
        self.indent = " " * indent

    def document(self, document: ir.Document) -> str:
        chunks = [self.declaration(decl) for decl in document.declarations]
        if not chunks:
            return ""
        return "\n\n".join(chunks) + "\n"

    def declaration(self, declaration: ir.Block | ir.FileReference) -> str:
        if isinstance(declaration, ir.FileReference):
            return self.reference(declaration)
        return self.block(declaration, 0)

    def block(self, block: ir.Block, level: int) -> str:
        header = block.header()
        opening = f"{header} {{" if header else "{"
        if not block.properties:
            return opening + "}"

        pad = self.indent * (level + 1)
        lines = [opening]
        for i, prop in enumerate(block.properties):
            comma = "," if i < len(block.properties) - 1 else ""
            lines.append(f"{pad}{self.property(prop, level + 1)}{comma}")
        lines.append(f"{self.indent * level}}}")
        return "\n".join(lines)

    def property(self, prop: ir.Property, level: int) -> str:
        value = prop.value
        if isinstance(value, ir.CallExpr) and value.name == prop.key:
            return self.call(value, level)
        return f"{format_key(prop.key)}: {self.value(value, level)}"

    def value(self, value: ir.Value, level: int) -> str:
        if isinstance(value, ir.Scalar):
            return self.scalar(value)
        if isinstance(value, ir.ArrayValue):
            return self.array(value, level)
        if isinstance(value, ir.Block):
            return self.block(value, level)
        if isinstance(value, ir.CallExpr):
            return self.call(value, level)
        if isinstance(value, ir.FileReference):
            return self.reference(value)
        if isinstance(value, ir.Scenario):
            return self.scenario(value, level)
        raise TypeError(f"Cannot serialize {type(value).__name__}")

    def scalar(self, scalar: ir.Scalar) -> str:
        if scalar.kind == ir.ScalarKind.STRING:
            return quote(str(scalar.value))
        if scalar.kind == ir.ScalarKind.NUMBER:
            return scalar.raw or repr(scalar.value)
        if scalar.kind == ir.ScalarKind.BOOLEAN:
            return "true" if scalar.value else "false"
        if scalar.kind == ir.ScalarKind.NULL:
            return "null"
        return scalar.raw

    def array(self, array: ir.ArrayValue, level: int) -> str:
        if not array.items:
            return "[]"

        items = [self.value(item, level + 1) for item in array.items]
        inline = "[" + ", ".join(items) + "]"
        if "\n" not in inline and len(inline) <= INLINE_ARRAY_WIDTH:
            return inline

        pad = self.indent * (level + 1)
        lines = ["["]
        for i, item in enumerate(items):
            comma = "," if i < len(items) - 1 else ""
            lines.append(f"{pad}{item}{comma}")
        lines.append(f"{self.indent * level}]")
        return "\n".join(lines)

    def call(self, call: ir.CallExpr, level: int) -> str:
        text = call.signature()
        if call.body is not None:
            text += " " + self.block(call.body, level)
        return text

    def reference(self, reference: ir.FileReference) -> str:
        path = reference.path
        path_text = quote(path) if "`" in path else f"`{path}`"
        header = " ".join(part for part in (reference.type_name, reference.name) if part)
        return f"{header} found in {path_text}"

    def scenario(self, scenario: ir.Scenario, level: int) -> str:
        if scenario.style != ir.ScenarioStyle.STRUCTURED:
            return quote(scenario.text)

        parts = [
            (name, text)
            for name, text in (
                ("given", scenario.given),
                ("when", scenario.when),
                ("then", scenario.then),
            )
            if text is not None
        ]
        pad = self.indent * (level + 1)
        lines = ["{"]
        for i, (name, text) in enumerate(parts):
            comma = "," if i < len(parts) - 1 else ""
            lines.append(f"{pad}{name}: {quote(text)}{comma}")
        lines.append(f"{self.indent * level}}}")
        return "\n".join(lines)


def dumps(document: ir.Document, indent: int = 2) -> str:
    """
    Serialize a Document as canonical BluePrint text.

    Args:
        document: Parsed (or constructed) document
        indent: Spaces per nesting level

    Returns:
        BluePrint text ending with a newline (empty for an empty document)
    """
    return Serializer(indent=indent).document(document)
