"""
Value parsing for BluePrint notation.

Values are tried from most to least structured:

    { ... }                              anonymous block
    [ ... ]                              array
    Type Name { ... } / Type { ... }     typed block
    Name found in `path`                 file reference
    name(args) -> Result { ... }         call expression
    "text", 42, -1.5, true, null         simple scalar
    anything else up to , or new line    bare words

Structured forms are parsed speculatively; when the tokens after them do not
end the value, the parser backtracks and reads bare words instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import Token, TokenType
from .base import VALUE_TERMINATORS

PATH_TOKENS = (TokenType.BACKTICK, TokenType.STRING)

LITERAL_WORDS: dict[str, tuple[ir.ScalarKind, bool | None]] = {
    "true": (ir.ScalarKind.BOOLEAN, True),
    "false": (ir.ScalarKind.BOOLEAN, False),
    "null": (ir.ScalarKind.NULL, None),
}


class ValueParserMixin:
    """Parser mixin for property values."""

    if TYPE_CHECKING:
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        skip_separators: Any
        error: Any
        unclosed: Any
        mismatched: Any
        location: Any
        describe: Any
        join_tokens: Any
        parse_dotted_name: Any
        parse_identifier: Any
        at_found_in: Any
        parse_block_body: Any
        tokens: Any
        pos: int

    def parse_value(self) -> ir.Value:
        """Parse a single value at the current position."""
        token = self.current_token()

        if token.type == TokenType.LBRACE:
            opener = self.advance()
            properties = self.parse_block_body(opener)
            return ir.Block(properties=properties, location=self.location(opener))

        if token.type == TokenType.LBRACKET:
            return self.parse_array()

        if token.type == TokenType.IDENTIFIER:
            structured = self.try_parse_structured_value()
            if structured is not None:
                return structured

        return self.parse_simple_or_bare()

    def parse_array(self) -> ir.ArrayValue:
        """Parse ``[item, item, ...]``; items may span lines, trailing commas allowed."""
        opener = self.advance()
        items: list[ir.Value] = []

        while True:
            self.skip_separators()
            token = self.current_token()

            if token.type == TokenType.RBRACKET:
                self.advance()
                break

            if token.type == TokenType.EOF:
                raise self.unclosed(opener)

            if token.type in (TokenType.RBRACE, TokenType.RPAREN):
                raise self.mismatched(opener, token)

            items.append(self.parse_value())

            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.unclosed(opener)
            if token.type not in (TokenType.COMMA, TokenType.NEWLINE, TokenType.RBRACKET):
                if token.type == TokenType.RBRACE:
                    raise self.mismatched(opener, token)
                raise self.error(
                    f"Expected ',' or ']' after array item, got {self.describe(token)}",
                    token,
                )

        return ir.ArrayValue(items=items, location=self.location(opener))

    # ------------------------------------------------------------------
    # Structured values
    # ------------------------------------------------------------------

    def try_parse_structured_value(self) -> ir.Value | None:
        """
        Try typed block, file reference, or call expression.

        Returns:
            The parsed value, or None (with position restored) for bare words
        """
        start_pos = self.pos
        name, name_token = self.parse_dotted_name()
        name_end = self.tokens[self.pos - 1].end

        # A call needs its "(" glued to the name: `Returns (cached)` is prose
        if self.match(TokenType.LPAREN) and self.current_token().start == name_end:
            call = self._try(lambda: self.parse_call(name, name_token, method_form=False))
            if call is not None:
                return call

        elif self.match(TokenType.LBRACE):
            opener = self.advance()
            properties = self.parse_block_body(opener)
            if self.match(*VALUE_TERMINATORS):
                return ir.Block(
                    type_name=name,
                    properties=properties,
                    location=self.location(name_token),
                )

        elif self.at_found_in():
            reference = self.try_parse_reference_tail(name, None, name_token)
            if reference is not None:
                return reference

        elif self.match(TokenType.IDENTIFIER):
            identifier = self.parse_identifier(strict=False)
            if identifier is not None:
                if self.match(TokenType.LBRACE):
                    opener = self.advance()
                    properties = self.parse_block_body(opener)
                    if self.match(*VALUE_TERMINATORS):
                        return ir.Block(
                            type_name=name,
                            identifier=identifier,
                            properties=properties,
                            location=self.location(name_token),
                        )
                elif self.at_found_in():
                    reference = self.try_parse_reference_tail(identifier, name, name_token)
                    if reference is not None:
                        return reference

        self.pos = start_pos
        return None

    def _try(self, parse: Any) -> Any:
        """Run ``parse`` and keep the result only if it ends the value."""
        start_pos = self.pos
        result = parse()
        if result is not None and self.match(*VALUE_TERMINATORS):
            return result
        self.pos = start_pos
        return None

    def parse_reference_tail(
        self,
        name: str,
        type_name: str | None,
        start: Token,
    ) -> ir.FileReference:
        """
        Parse ``found in `path``` after a root-level reference name.

        Args:
            name: Referenced component name
            type_name: Optional component type written before the name
            start: First token of the declaration (for the location)

        Raises:
            ParseError: If no path follows ``found in``
        """
        self.advance()  # found
        self.advance()  # in

        path_token = self.current_token()
        if path_token.type not in PATH_TOKENS:
            raise self.error(
                f"Expected a `path` after 'found in', got {self.describe(path_token)}",
                path_token,
            )
        self.advance()
        return self._file_reference(name, type_name, start, path_token)

    def try_parse_reference_tail(
        self,
        name: str,
        type_name: str | None,
        start: Token,
    ) -> ir.FileReference | None:
        """Parse a reference inside a value; backtrack unless it ends the value."""
        start_pos = self.pos
        self.advance()  # found
        self.advance()  # in

        path_token = self.current_token()
        if path_token.type in PATH_TOKENS:
            self.advance()
            if self.match(*VALUE_TERMINATORS):
                return self._file_reference(name, type_name, start, path_token)

        self.pos = start_pos
        return None

    def _file_reference(
        self, name: str, type_name: str | None, start: Token, path_token: Token
    ) -> ir.FileReference:
        path = path_token.value.strip()
        if not path:
            raise self.error(f"Empty path in file reference '{name}'", path_token)
        return ir.FileReference(
            name=name,
            type_name=type_name,
            path=path,
            location=self.location(start),
        )

    def parse_call(self, name: str, name_token: Token, method_form: bool) -> ir.CallExpr:
        """
        Parse ``(args) [-> Result] [{ body }]`` after a call name.

        In method form (a property like ``register(email: string): User``) the
        result may also follow a colon.
        """
        opener = self.advance()
        args = self._parse_call_args(opener)

        returns: str | None = None
        result_markers = (
            (TokenType.ARROW, TokenType.COLON) if method_form else (TokenType.ARROW,)
        )
        if self.match(*result_markers):
            marker = self.advance()
            if self.match(TokenType.LBRACE):
                returns = self._parse_record_result()
            else:
                result_tokens = self.scan_value_tokens(stop_at_brace=True)
                if not result_tokens:
                    raise self.error(f"Missing result type after '{marker.value}'", marker)
                returns = self.join_tokens(result_tokens)

        body: ir.Block | None = None
        if self.match(TokenType.LBRACE):
            brace = self.advance()
            body = ir.Block(properties=self.parse_block_body(brace), location=self.location(brace))

        return ir.CallExpr(
            name=name,
            args=args,
            returns=returns,
            body=body,
            location=self.location(name_token),
        )

    def _parse_record_result(self) -> str:
        """
        Read an inline record result (``-> { valid: bool }``) as text.

        The braces may nest and span lines; a second ``{`` after the record
        opens the call body.
        """
        tokens: list[Token] = []
        openers: list[Token] = []

        while True:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.unclosed(openers[-1])
            if token.type == TokenType.NEWLINE:
                self.advance()
                continue

            if token.type in (TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE):
                openers.append(token)
            elif token.type in (TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE):
                if _closer_for(openers[-1]) != token.type:
                    raise self.mismatched(openers[-1], token)
                openers.pop()

            tokens.append(self.advance())
            if not openers:
                return self.join_tokens(tokens)

    def _parse_call_args(self, opener: Token) -> list[str]:
        """Split the argument list at top-level commas; the ``(`` is consumed."""
        args: list[str] = []
        current: list[Token] = []
        openers: list[Token] = []
        generic_depth = 0

        while True:
            token = self.current_token()

            if token.type == TokenType.EOF:
                raise self.unclosed(openers[-1] if openers else opener)

            if token.type == TokenType.NEWLINE:
                self.advance()
                continue

            if not openers and token.type == TokenType.RPAREN:
                self.advance()
                break

            if not openers and generic_depth == 0 and token.type == TokenType.COMMA:
                self.advance()
                if current:
                    args.append(self.join_tokens(current))
                current = []
                continue

            if token.type in (TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE):
                openers.append(token)
            elif token.type in (TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE):
                innermost = openers[-1] if openers else opener
                if _closer_for(innermost) != token.type:
                    raise self.mismatched(innermost, token)
                openers.pop()
            elif token.type == TokenType.LESS_THAN and _is_generic_open(current, token):
                generic_depth += 1
            elif token.type == TokenType.GREATER_THAN and generic_depth:
                generic_depth -= 1

            current.append(self.advance())

        if current:
            args.append(self.join_tokens(current))
        return args

    # ------------------------------------------------------------------
    # Scalars and bare words
    # ------------------------------------------------------------------

    def parse_simple_or_bare(self) -> ir.Scalar:
        """Parse a string, number, boolean or null; fall back to bare words."""
        start_pos = self.pos
        scalar = self._parse_simple_scalar()
        if scalar is not None and self.match(*VALUE_TERMINATORS):
            return scalar

        self.pos = start_pos
        return self.parse_bare_words()

    def _parse_simple_scalar(self) -> ir.Scalar | None:
        token = self.current_token()
        location = self.location(token)

        if token.type in (TokenType.STRING, TokenType.BACKTICK):
            self.advance()
            return ir.Scalar(
                kind=ir.ScalarKind.STRING, value=token.value, raw=token.value, location=location
            )

        if token.type == TokenType.NUMBER:
            self.advance()
            return _number(token.value, location)

        if token.type == TokenType.SYMBOL and token.value in ("-", "+"):
            number = self.peek_token()
            if number.type == TokenType.NUMBER and number.start == token.end:
                self.advance()
                self.advance()
                return _number(token.value + number.value, location)
            return None

        if token.type == TokenType.IDENTIFIER and token.value in LITERAL_WORDS:
            self.advance()
            kind, value = LITERAL_WORDS[token.value]
            return ir.Scalar(kind=kind, value=value, raw=token.value, location=location)

        return None

    def parse_bare_words(self) -> ir.Scalar:
        """Read unquoted words up to the end of the value."""
        first = self.current_token()
        tokens = self.scan_value_tokens()
        if not tokens:
            raise self.error(f"Expected a value, got {self.describe(first)}", first)
        text = self.join_tokens(tokens)
        return ir.Scalar(
            kind=ir.ScalarKind.BARE, value=text, raw=text, location=self.location(first)
        )

    def scan_value_tokens(self, stop_at_brace: bool = False) -> list[Token]:
        """
        Consume tokens up to a top-level ``,``, new line, ``}``, ``]`` or EOF.

        Parentheses and brackets must balance and may span lines. A ``<``
        glued to the previous word opens a generic, which keeps commas inside
        it (``Map<K, V>``).

        Args:
            stop_at_brace: Stop before a top-level ``{`` (call result types)
        """
        tokens: list[Token] = []
        openers: list[Token] = []
        generic_depth = 0

        while True:
            token = self.current_token()

            if not openers:
                if token.type in (
                    TokenType.NEWLINE,
                    TokenType.RBRACE,
                    TokenType.RBRACKET,
                    TokenType.EOF,
                ):
                    break
                if token.type == TokenType.COMMA and generic_depth == 0:
                    break
                if token.type == TokenType.LBRACE:
                    if stop_at_brace:
                        break
                    raise self.error(
                        "Unexpected '{' inside a value; a block must start the value", token
                    )
                if token.type == TokenType.RPAREN:
                    raise self.error("Unexpected ')' with no matching '('", token)
            else:
                if token.type == TokenType.EOF:
                    raise self.unclosed(openers[-1])
                if token.type == TokenType.NEWLINE:
                    self.advance()
                    continue

            if token.type in (TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE):
                openers.append(token)
            elif token.type in (TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE):
                if _closer_for(openers[-1]) != token.type:
                    raise self.mismatched(openers[-1], token)
                openers.pop()
            elif token.type == TokenType.LESS_THAN and _is_generic_open(tokens, token):
                generic_depth += 1
            elif token.type == TokenType.GREATER_THAN and generic_depth:
                generic_depth -= 1

            tokens.append(self.advance())

        return tokens


def _closer_for(opener: Token) -> TokenType:
    return {
        TokenType.LPAREN: TokenType.RPAREN,
        TokenType.LBRACKET: TokenType.RBRACKET,
        TokenType.LBRACE: TokenType.RBRACE,
    }[opener.type]


def _is_generic_open(previous: list[Token], token: Token) -> bool:
    """A ``<`` directly after a word (``List<T>``) opens generic parameters."""
    return bool(
        previous
        and previous[-1].type == TokenType.IDENTIFIER
        and previous[-1].end == token.start
    )


def _number(text: str, location: ir.SourceLocation) -> ir.Scalar:
    value: int | float
    try:
        value = int(text)
    except ValueError:
        value = float(text)
    return ir.Scalar(kind=ir.ScalarKind.NUMBER, value=value, raw=text, location=location)
