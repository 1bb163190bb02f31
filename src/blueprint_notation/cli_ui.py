"""
Rich UI components for the BluePrint CLI.

Provides the shared console and a tree view of parsed documents.
"""

from rich.console import Console
from rich.style import Style
from rich.text import Text
from rich.tree import Tree

from blueprint_notation.core import ir
from blueprint_notation.core.serializer import Serializer

console = Console()

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "block": Style(color="bright_cyan", bold=True),
    "key": Style(color="yellow"),
    "reference": Style(color="magenta"),
    "scenario": Style(color="green"),
    "muted": Style(color="bright_black"),
}

_serializer = Serializer()


def render_document(document: ir.Document) -> Tree:
    """Build a rich Tree showing every declaration of ``document``."""
    title = Text(document.file, style=STYLES["title"])
    if document.kind == ir.DocumentKind.SUMMARY:
        title.append(" (summary)", style=STYLES["muted"])
    tree = Tree(title)
    for declaration in document.declarations:
        if isinstance(declaration, ir.FileReference):
            tree.add(_reference_label(declaration))
        else:
            _add_block(tree, declaration)
    return tree


def _block_label(block: ir.Block) -> Text:
    return Text(block.header() or "{ }", style=STYLES["block"])


def _reference_label(reference: ir.FileReference) -> Text:
    label = Text(" ".join(p for p in (reference.type_name, reference.name) if p))
    label.append(f" -> {reference.path}", style=STYLES["reference"])
    return label


def _add_block(parent: Tree, block: ir.Block) -> None:
    branch = parent.add(_block_label(block))
    for prop in block.properties:
        _add_property(branch, prop)


def _add_property(parent: Tree, prop: ir.Property) -> None:
    value = prop.value
    label = Text(prop.key, style=STYLES["key"])

    if isinstance(value, ir.Block):
        label.append(": ")
        label.append(_block_label(value))
        branch = parent.add(label)
        for child in value.properties:
            _add_property(branch, child)
        return

    if isinstance(value, ir.CallExpr):
        label.append(": ")
        label.append(value.signature())
        branch = parent.add(label)
        if value.body is not None:
            for child in value.body.properties:
                _add_property(branch, child)
        return

    if isinstance(value, ir.ArrayValue) and not _is_flat(value):
        branch = parent.add(label)
        for item in value.items:
            _add_item(branch, item)
        return

    label.append(": ")
    label.append(_inline(value))
    parent.add(label)


def _add_item(parent: Tree, item: ir.Value) -> None:
    if isinstance(item, ir.Block):
        _add_block(parent, item)
    elif isinstance(item, ir.Scenario):
        parent.add(Text(item.text, style=STYLES["scenario"]))
    else:
        parent.add(_inline(item))


def _is_flat(array: ir.ArrayValue) -> bool:
    return all(isinstance(item, ir.Scalar) for item in array.items)


def _inline(value: ir.Value) -> Text:
    if isinstance(value, ir.Scenario):
        return Text(value.text, style=STYLES["scenario"])
    if isinstance(value, ir.FileReference):
        return _reference_label(value)
    return Text(_serializer.value(value, 0))
