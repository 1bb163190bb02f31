"""
Block and property parsing for BluePrint notation.

Handles the document root, block headers (``Service UserAuth {``),
block bodies and property keys.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import Token, TokenType


class BlockParserMixin:
    """Parser mixin for documents, blocks and properties."""

    if TYPE_CHECKING:
        options: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        skip_newlines: Any
        skip_separators: Any
        error: Any
        unclosed: Any
        mismatched: Any
        location: Any
        describe: Any
        parse_dotted_name: Any
        parse_identifier: Any
        at_found_in: Any
        parse_value: Any
        parse_call: Any
        parse_reference_tail: Any
        to_scenarios: Any

    def parse_document_declarations(self) -> list[ir.Block | ir.FileReference]:
        """
        Parse root-level declarations until end of input.

        Returns:
            Blocks and file references in source order
        """
        declarations: list[ir.Block | ir.FileReference] = []

        while True:
            self.skip_newlines()
            token = self.current_token()

            if token.type == TokenType.EOF:
                break

            if token.type in (TokenType.RBRACE, TokenType.RBRACKET, TokenType.RPAREN):
                raise self.error(
                    f"Unexpected '{token.value}' with no matching opening bracket", token
                )

            if token.type != TokenType.IDENTIFIER:
                raise self.error(
                    f"Expected a block declaration (e.g. 'Service Name {{ ... }}'), "
                    f"got {self.describe(token)}",
                    token,
                )

            declarations.append(self.parse_declaration())

            # Allow a trailing comma after a root block
            if self.match(TokenType.COMMA):
                self.advance()
            token = self.current_token()
            if token.type not in (TokenType.NEWLINE, TokenType.EOF):
                raise self.error(
                    f"Expected a new line after declaration, got {self.describe(token)}",
                    token,
                )

        return declarations

    def parse_declaration(self) -> ir.Block | ir.FileReference:
        """
        Parse a root-level declaration.

        Forms:
            Type Identifier { ... }
            Type { ... }                      (anonymous block types only)
            Name found in `path`
            Type Name found in `path`
        """
        type_name, type_token = self.parse_dotted_name()

        if self.at_found_in():
            return self.parse_reference_tail(type_name, None, type_token)

        identifier: str | None = None
        if self.match(TokenType.IDENTIFIER):
            identifier = self.parse_identifier(strict=True)
            if self.at_found_in():
                return self.parse_reference_tail(identifier, type_name, type_token)

        # Allow the opening brace on the next line
        if self.match(TokenType.NEWLINE) and self._brace_after_newlines():
            self.skip_newlines()

        header = " ".join(part for part in (type_name, identifier) if part)
        token = self.current_token()
        if token.type != TokenType.LBRACE:
            raise self.error(
                f"Expected '{{' to open block '{header}', got {self.describe(token)}",
                token,
            )

        if identifier is None and type_name not in self.options.anonymous_block_types:
            raise self.error(
                f"Block '{type_name}' requires an identifier "
                f"(e.g. '{type_name} My{type_name} {{ ... }}')",
                type_token,
            )

        opener = self.advance()
        properties = self.parse_block_body(opener)
        return ir.Block(
            type_name=type_name,
            identifier=identifier,
            properties=properties,
            location=self.location(type_token),
        )

    def _brace_after_newlines(self) -> bool:
        offset = 0
        while self.peek_token(offset).type == TokenType.NEWLINE:
            offset += 1
        return self.peek_token(offset).type == TokenType.LBRACE

    def parse_block_body(self, opener: Token) -> list[ir.Property]:
        """
        Parse properties up to the ``}`` matching ``opener``.

        The opening brace has already been consumed.
        """
        properties: list[ir.Property] = []

        while True:
            self.skip_separators()
            token = self.current_token()

            if token.type == TokenType.RBRACE:
                self.advance()
                return properties

            if token.type == TokenType.EOF:
                raise self.unclosed(opener)

            if token.type in (TokenType.RBRACKET, TokenType.RPAREN):
                raise self.mismatched(opener, token)

            prop = self.parse_property()
            properties.append(prop)

            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.unclosed(opener)
            if token.type not in (TokenType.COMMA, TokenType.NEWLINE, TokenType.RBRACE):
                if token.type in (TokenType.RBRACKET, TokenType.RPAREN):
                    raise self.mismatched(opener, token)
                raise self.error(
                    f"Expected ',' or a new line after property '{prop.key}', "
                    f"got {self.describe(token)}",
                    token,
                )

    def parse_property(self) -> ir.Property:
        """
        Parse one property.

        Forms:
            key: value
            "quoted key": value
            404: value
            method(args) -> Result { ... }
        """
        token = self.current_token()

        if token.type == TokenType.IDENTIFIER:
            key, key_token = self.parse_dotted_name()
            if self.match(TokenType.LPAREN):
                call = self.parse_call(key, key_token, method_form=True)
                return ir.Property(key=key, value=call, location=self.location(key_token))
        elif token.type in (TokenType.STRING, TokenType.NUMBER):
            key_token = self.advance()
            key = key_token.value
        else:
            raise self.error(f"Expected a property name, got {self.describe(token)}", token)

        token = self.current_token()
        if token.type != TokenType.COLON:
            if token.type in (
                TokenType.COMMA,
                TokenType.NEWLINE,
                TokenType.RBRACE,
                TokenType.EOF,
            ):
                raise self.error(f"Property '{key}' is missing a value", key_token)
            raise self.error(
                f"Expected ':' after property name '{key}', got {self.describe(token)}",
                token,
            )
        self.advance()

        if self.current_token().type in (
            TokenType.COMMA,
            TokenType.NEWLINE,
            TokenType.RBRACE,
            TokenType.RBRACKET,
            TokenType.EOF,
        ):
            raise self.error(f"Property '{key}' is missing a value", key_token)

        value = self.parse_value()
        if self.options.is_scenario_key(key):
            value = self.to_scenarios(value)

        return ir.Property(key=key, value=value, location=self.location(key_token))
