"""
Tree node types for BluePrint notation.

A parse call produces one Document whose declarations are Blocks and
FileReferences. Blocks hold ordered Properties; a property value is a
Scalar, ArrayValue, nested Block, CallExpr, FileReference, or Scenario.

All nodes are frozen: a tree is built once by the parser and never mutated.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .location import SourceLocation


class ScalarKind(StrEnum):
    """Kinds of scalar values."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    BARE = "bare"  # unquoted words, e.g. `Node<T> = null`


class ScenarioStyle(StrEnum):
    """How a scenario was written."""

    SENTENCE = "sentence"  # "Given ..., when ..., then ..."
    STRUCTURED = "structured"  # { given: ..., when: ..., then: ... }
    FREEFORM = "freeform"  # any other natural-language sentence


class DocumentKind(StrEnum):
    """Document flavours, chosen by file extension."""

    BLUEPRINT = "blueprint"
    SUMMARY = "summary"  # .bps: API summary without implementation


class Scalar(BaseModel):
    """
    A single scalar value.

    Attributes:
        kind: Scalar kind
        value: Python value (str, int, float, bool or None)
        raw: Text as written (unquoted for strings, normalized for bare words)
    """

    node: Literal["scalar"] = "scalar"
    kind: ScalarKind
    value: str | int | float | bool | None = None
    raw: str = ""
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def to_data(self) -> Any:
        if self.kind == ScalarKind.BARE:
            return self.raw
        return self.value


class ArrayValue(BaseModel):
    """An ordered list of values."""

    node: Literal["array"] = "array"
    items: list[Value] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def to_data(self) -> list[Any]:
        return [item.to_data() for item in self.items]


class CallExpr(BaseModel):
    """
    A function-call-like expression: ``name(args) -> result { body }``.

    Used both as a value (``login: authenticate(email, password) -> Session``)
    and as a method declaration inside a block.

    Attributes:
        name: Called name, may be dotted (``repo.save``)
        args: Argument texts, normalized (``email: string``)
        returns: Result text after ``->``, if any
        body: Optional block following the signature
    """

    node: Literal["call"] = "call"
    name: str
    args: list[str] = Field(default_factory=list)
    returns: str | None = None
    body: Block | None = None
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def parameter_names(self) -> list[str]:
        """Names of ``name: type`` style arguments (plain arguments are kept whole)."""
        return [arg.split(":", 1)[0].strip() for arg in self.args]

    def signature(self) -> str:
        text = f"{self.name}({', '.join(self.args)})"
        if self.returns:
            text += f" -> {self.returns}"
        return text

    def to_data(self) -> dict[str, Any]:
        return {
            "call": self.name,
            "args": list(self.args),
            "returns": self.returns,
            "body": self.body.to_data() if self.body else None,
        }


class FileReference(BaseModel):
    """
    An external component declared as ``[Type] Name found in `path```.

    The referenced file is loaded lazily by ``references.ReferenceResolver``.
    """

    node: Literal["reference"] = "reference"
    name: str
    path: str
    type_name: str | None = None
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def to_data(self) -> dict[str, Any]:
        return {"reference": self.name, "type": self.type_name, "path": self.path}


class Scenario(BaseModel):
    """
    A behaviour scenario attached to a ``behaviors`` property.

    Attributes:
        style: How the scenario was written
        text: The full sentence (composed for structured scenarios)
        given: Precondition, if recognised
        when: Trigger, if recognised
        then: Expected outcome, if recognised
    """

    node: Literal["scenario"] = "scenario"
    style: ScenarioStyle
    text: str
    given: str | None = None
    when: str | None = None
    then: str | None = None
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_complete(self) -> bool:
        """True when both the trigger and the outcome are known."""
        return bool(self.when and self.then)

    def to_data(self) -> dict[str, Any]:
        return {
            "scenario": self.text,
            "given": self.given,
            "when": self.when,
            "then": self.then,
        }


class Property(BaseModel):
    """A key/value pair inside a block."""

    key: str
    value: Value
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def to_data(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value.to_data()}


class Block(BaseModel):
    """
    A typed, named structural unit such as ``Service UserAuth { ... }``.

    Anonymous ``{ ... }`` values are Blocks with neither type nor identifier.

    Attributes:
        type_name: Block type (``Service``, ``DataStructure``), if written
        identifier: Block name, may carry generics (``LinkedList<T>``)
        properties: Properties in source order
    """

    node: Literal["block"] = "block"
    type_name: str | None = None
    identifier: str | None = None
    properties: list[Property] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str | None:
        """Identifier without generic parameters (``LinkedList<T>`` -> ``LinkedList``)."""
        if self.identifier is None:
            return None
        return self.identifier.split("<", 1)[0].strip()

    def keys(self) -> list[str]:
        return [prop.key for prop in self.properties]

    def get(self, key: str, default: Value | None = None) -> Value | None:
        """Value of the first property named ``key``."""
        for prop in self.properties:
            if prop.key == key:
                return prop.value
        return default

    def header(self) -> str:
        return " ".join(part for part in (self.type_name, self.identifier) if part)

    def to_data(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "identifier": self.identifier,
            "properties": [prop.to_data() for prop in self.properties],
        }


Value = Annotated[
    Union[Scalar, ArrayValue, Block, CallExpr, FileReference, Scenario],
    Field(discriminator="node"),
]

Declaration = Annotated[Union[Block, FileReference], Field(discriminator="node")]


class Document(BaseModel):
    """
    Root of a parsed BluePrint file.

    Attributes:
        file: Source path (``<string>`` for in-memory text)
        kind: Blueprint or summary (``.bps``) document
        declarations: Root-level blocks and file references in source order
    """

    file: str = "<string>"
    kind: DocumentKind = DocumentKind.BLUEPRINT
    declarations: list[Declaration] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def blocks(self) -> list[Block]:
        return [decl for decl in self.declarations if isinstance(decl, Block)]

    @property
    def references(self) -> list[FileReference]:
        """Root-level file references (see ``iter_references`` for nested ones)."""
        return [decl for decl in self.declarations if isinstance(decl, FileReference)]

    def get(self, name: str) -> Block | FileReference | None:
        """Find a root declaration by identifier (generics ignored) or reference name."""
        for decl in self.declarations:
            if isinstance(decl, Block) and name in (decl.identifier, decl.name):
                return decl
            if isinstance(decl, FileReference) and decl.name == name:
                return decl
        return None

    def to_data(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "kind": self.kind.value,
            "declarations": [decl.to_data() for decl in self.declarations],
        }

    def equivalent(self, other: Document) -> bool:
        """
        Structural equality ignoring source locations and file name.

        Distinguishes quoted strings from bare words, unlike ``to_data``.
        """
        return _strip_locations(self.model_dump(mode="json")["declarations"]) == _strip_locations(
            other.model_dump(mode="json")["declarations"]
        )


def _strip_locations(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _strip_locations(v) for k, v in data.items() if k != "location"}
    if isinstance(data, list):
        return [_strip_locations(item) for item in data]
    return data


ArrayValue.model_rebuild()
CallExpr.model_rebuild()
Property.model_rebuild()
Block.model_rebuild()
Document.model_rebuild()


def iter_blocks(node: Any):
    """Yield every Block reachable from ``node`` (depth-first, source order)."""
    if isinstance(node, Document):
        for decl in node.declarations:
            yield from iter_blocks(decl)
    elif isinstance(node, Block):
        yield node
        for prop in node.properties:
            yield from iter_blocks(prop.value)
    elif isinstance(node, ArrayValue):
        for item in node.items:
            yield from iter_blocks(item)
    elif isinstance(node, CallExpr) and node.body is not None:
        yield from iter_blocks(node.body)


def iter_values(node: Any):
    """Yield every value node reachable from ``node``, including nested ones."""
    if isinstance(node, Document):
        for decl in node.declarations:
            yield from iter_values(decl)
        return
    yield node
    if isinstance(node, Block):
        for prop in node.properties:
            yield from iter_values(prop.value)
    elif isinstance(node, ArrayValue):
        for item in node.items:
            yield from iter_values(item)
    elif isinstance(node, CallExpr) and node.body is not None:
        yield from iter_values(node.body)


def iter_references(node: Any):
    """Yield every FileReference in the tree, root-level and nested."""
    for value in iter_values(node):
        if isinstance(value, FileReference):
            yield value
