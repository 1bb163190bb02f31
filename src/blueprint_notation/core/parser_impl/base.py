"""
Base parser class for BluePrint notation.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..errors import ParseError, make_parse_error
from ..ir import SourceLocation
from ..lexer import Token, TokenType
from ..options import ParserOptions

if TYPE_CHECKING:
    from .. import ir


# Tokens that end a value inside a block or array
VALUE_TERMINATORS = frozenset(
    {
        TokenType.COMMA,
        TokenType.NEWLINE,
        TokenType.RBRACE,
        TokenType.RBRACKET,
        TokenType.EOF,
    }
)

CLOSERS = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LPAREN: TokenType.RPAREN,
}

NAME_JOINERS = (".", "-")


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    This allows mypy to understand that mixins will have access to
    BaseParser methods when combined in the final Parser class.
    """

    tokens: list[Token]
    file: Path
    source: str
    options: ParserOptions
    pos: int

    def current_token(self) -> Token: ...
    def peek_token(self, offset: int = 1) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType, context: str = "") -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def skip_newlines(self) -> None: ...
    def skip_separators(self) -> None: ...
    def error(self, message: str, token: Token) -> ParseError: ...
    def unclosed(self, opener: Token) -> ParseError: ...
    def mismatched(self, opener: Token, closer: Token) -> ParseError: ...
    def location(self, token: Token) -> SourceLocation: ...
    def join_tokens(self, tokens: list[Token]) -> str: ...
    def describe(self, token: Token) -> str: ...
    def parse_dotted_name(self) -> tuple[str, Token]: ...
    def parse_identifier(self, strict: bool) -> str | None: ...
    def at_found_in(self) -> bool: ...

    # Methods from other mixins that may be called cross-mixin
    def parse_value(self) -> "ir.Value": ...
    def parse_block_body(self, opener: Token) -> list["ir.Property"]: ...
    def parse_call(self, name: str, name_token: Token, method_form: bool) -> "ir.CallExpr": ...
    def parse_reference_tail(
        self, name: str, type_name: str | None, start: Token
    ) -> "ir.FileReference": ...
    def try_parse_reference_tail(
        self, name: str, type_name: str | None, start: Token
    ) -> "ir.FileReference | None": ...
    def scan_value_tokens(self, stop_at_brace: bool = False) -> list[Token]: ...
    def to_scenarios(self, value: "ir.Value") -> "ir.Value": ...


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(
        self,
        tokens: list[Token],
        file: Path,
        source: str = "",
        options: ParserOptions | None = None,
    ):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            source: Original text (for snippets and bare-word text)
            options: Parser options, defaults when omitted
        """
        self.tokens = tokens
        self.file = file
        self.source = source
        self.options = options or ParserOptions()
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def expect(self, token_type: TokenType, context: str = "") -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            message = f"Expected '{token_type.value}', got {self.describe(token)}"
            if context:
                message += f" {context}"
            raise self.error(message, token)
        return self.advance()

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def skip_newlines(self) -> None:
        """Skip NEWLINE tokens."""
        while self.match(TokenType.NEWLINE):
            self.advance()

    def skip_separators(self) -> None:
        """Skip NEWLINE and COMMA tokens (repeated and trailing commas are allowed)."""
        while self.match(TokenType.NEWLINE, TokenType.COMMA):
            self.advance()

    # ------------------------------------------------------------------
    # Errors and locations
    # ------------------------------------------------------------------

    def error(self, message: str, token: Token) -> ParseError:
        """Build a ParseError pointing at ``token``."""
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            source=self.source,
        )

    def unclosed(self, opener: Token) -> ParseError:
        """Error for an opener that reached end of input without its closer."""
        closer = CLOSERS.get(opener.type)
        expected = closer.value if closer else ">"
        return self.error(
            f"Missing closing '{expected}' for '{opener.value}' opened at line {opener.line}",
            opener,
        )

    def mismatched(self, opener: Token, closer: Token) -> ParseError:
        """Error for a closer that does not match the innermost opener."""
        expected = CLOSERS[opener.type].value
        return self.error(
            f"Expected '{expected}' to close '{opener.value}' opened at line {opener.line}, "
            f"got '{closer.value}'",
            closer,
        )

    def location(self, token: Token) -> SourceLocation:
        return SourceLocation(file=str(self.file), line=token.line, column=token.column)

    def describe(self, token: Token) -> str:
        """Human-readable token description for error messages."""
        if token.type == TokenType.EOF:
            return "end of input"
        if token.type == TokenType.NEWLINE:
            return "end of line"
        if token.type == TokenType.STRING:
            return f'string "{token.value}"'
        return f"'{token.value}'"

    def join_tokens(self, tokens: list[Token]) -> str:
        """
        Rebuild source text for a run of tokens.

        Adjacent tokens stay glued; any gap (whitespace, newline, comment)
        becomes a single space.
        """
        parts: list[str] = []
        previous: Token | None = None
        for token in tokens:
            if previous is not None and token.start > previous.end:
                parts.append(" ")
            parts.append(self.source[token.start : token.end])
            previous = token
        return "".join(parts)

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def parse_dotted_name(self) -> tuple[str, Token]:
        """
        Parse ``name``, ``auth.UserService`` or ``user-service``.

        Joiners must touch both neighbours; ``a . b`` is not one name.
        """
        first = self.expect(TokenType.IDENTIFIER)
        parts = [first]
        while True:
            joiner = self.current_token()
            after = self.peek_token()
            if (
                joiner.type == TokenType.SYMBOL
                and joiner.value in NAME_JOINERS
                and joiner.start == parts[-1].end
                and after.type in (TokenType.IDENTIFIER, TokenType.NUMBER)
                and after.start == joiner.end
            ):
                parts.append(self.advance())
                parts.append(self.advance())
            else:
                break
        return self.join_tokens(parts), first

    def parse_identifier(self, strict: bool) -> str | None:
        """
        Parse a block identifier: dotted name plus optional generic parameters.

        Args:
            strict: Raise on an unclosed ``<``; otherwise return None so the
                caller can backtrack.
        """
        name, first = self.parse_dotted_name()
        if not self.match(TokenType.LESS_THAN):
            return name

        start_pos = self.pos
        opener = self.current_token()
        tokens = [self.advance()]
        depth = 1
        while depth:
            token = self.current_token()
            if token.type in (TokenType.NEWLINE, TokenType.EOF, TokenType.LBRACE):
                if strict:
                    raise self.error(
                        f"Missing closing '>' for '<' opened at line {opener.line}", opener
                    )
                self.pos = start_pos
                return None
            if token.type == TokenType.LESS_THAN:
                depth += 1
            elif token.type == TokenType.GREATER_THAN:
                depth -= 1
            tokens.append(self.advance())

        generic = self.join_tokens(tokens)
        glue = "" if opener.start == self.tokens[start_pos - 1].end else " "
        return f"{name}{glue}{generic}"

    def at_found_in(self) -> bool:
        """Check for the ``found in`` keywords of a file reference."""
        token = self.current_token()
        following = self.peek_token()
        return (
            token.type == TokenType.IDENTIFIER
            and token.value == "found"
            and following.type == TokenType.IDENTIFIER
            and following.value == "in"
        )
