"""
BluePrint Notation Parser Package.

This package provides a modular recursive-descent parser for BluePrint
notation. The parser is built using mixins to separate parsing logic by
construct type, making it easier to maintain and extend.

The main exports are:
- Parser: The complete parser class
- parse_blueprint: Convenience function to parse BluePrint text

Usage:
    from blueprint_notation.core.parser_impl import parse_blueprint

    document = parse_blueprint(text, Path("auth.bp"))
"""

import logging
from pathlib import Path

from .. import ir
from ..lexer import tokenize
from ..options import ParserOptions
from .base import BaseParser
from .blocks import BlockParserMixin
from .scenarios import ScenarioParserMixin, parse_scenario_text
from .values import ValueParserMixin

logger = logging.getLogger(__name__)

SUMMARY_SUFFIXES = (".bps",)


class Parser(
    BaseParser,
    BlockParserMixin,
    ValueParserMixin,
    ScenarioParserMixin,
):
    """
    Complete BluePrint notation parser.

    This class composes all parser mixins to provide full parsing capability:

    - BlockParserMixin: Documents, block headers, block bodies, properties
    - ValueParserMixin: Scalars, arrays, nested/typed blocks, calls, file references
    - ScenarioParserMixin: Given/When/Then scenarios under scenario keys
    """

    def parse(self) -> ir.Document:
        """
        Parse the whole token stream.

        Returns:
            Document with all root-level declarations
        """
        declarations = self.parse_document_declarations()
        kind = (
            ir.DocumentKind.SUMMARY
            if self.file.suffix.lower() in SUMMARY_SUFFIXES
            else ir.DocumentKind.BLUEPRINT
        )
        return ir.Document(file=str(self.file), kind=kind, declarations=declarations)


def parse_blueprint(
    text: str,
    file: Path,
    options: ParserOptions | None = None,
) -> ir.Document:
    """
    Parse BluePrint text into a Document.

    Args:
        text: BluePrint source text
        file: Source file path (for locations, errors and document kind)
        options: Parser options

    Returns:
        Parsed Document

    Raises:
        ParseError: If the text is not valid BluePrint notation, or nests
            deeper than the interpreter's recursion limit allows
    """
    tokens = tokenize(text, file)
    logger.debug("Tokenized %s: %d tokens", file, len(tokens))
    parser = Parser(tokens, file, source=text, options=options)
    try:
        return parser.parse()
    except RecursionError:
        raise parser.error(
            "Nesting too deep to parse; flatten some of the nested blocks or arrays",
            parser.current_token(),
        ) from None


__all__ = [
    "Parser",
    "parse_blueprint",
    "parse_scenario_text",
]
