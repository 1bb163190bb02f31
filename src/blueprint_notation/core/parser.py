import logging
from pathlib import Path

from . import ir
from .options import ParserOptions
from .parser_impl import parse_blueprint

logger = logging.getLogger(__name__)

STRING_SOURCE = Path("<string>")


def parse(
    text: str,
    file: Path | str | None = None,
    options: ParserOptions | None = None,
) -> ir.Document:
    """
    Parse BluePrint text into an immutable Document tree.

    Args:
        text: BluePrint source text
        file: Optional path used for locations and error messages
        options: Parser options

    Returns:
        Document with root-level blocks and file references

    Raises:
        ParseError: On unbalanced braces, missing values, or a root block
            without a required identifier
    """
    source = Path(file) if file is not None else STRING_SOURCE
    return parse_blueprint(text, source, options)


def parse_file(path: Path, options: ParserOptions | None = None) -> ir.Document:
    """
    Parse a BluePrint file.

    ``.bps`` files produce summary documents; everything else is a blueprint.
    """
    logger.debug("Parsing %s", path)
    text = path.read_text(encoding="utf-8")
    return parse_blueprint(text, path, options)


def parse_files(files: list[Path], options: ParserOptions | None = None) -> list[ir.Document]:
    """
    Parse BluePrint files in order.

    Args:
        files: Paths to .bp / .bps files
        options: Parser options shared by every file

    Returns:
        One Document per file
    """
    return [parse_file(f, options) for f in files]
