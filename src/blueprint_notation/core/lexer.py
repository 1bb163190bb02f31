"""
Lexer/Tokenizer for BluePrint notation.

Converts raw BluePrint text into a stream of tokens with source location tracking.
Newlines are significant (they separate properties and end bare-word values),
so they are emitted as NEWLINE tokens; comments are dropped here and never
reach the parser.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in BluePrint notation."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    BACKTICK = "BACKTICK"
    NUMBER = "NUMBER"

    # Structure
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COLON = ":"
    COMMA = ","

    # Operators used by signatures and generics
    ARROW = "->"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    EQUALS = "="

    # Any other printable character (only meaningful inside bare words)
    SYMBOL = "SYMBOL"

    # Special
    NEWLINE = "NEWLINE"
    EOF = "EOF"


SINGLE_CHAR_TOKENS = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "=": TokenType.EQUALS,
}

# Characters after which "/*" opens a comment; glued to anything else
# ("src/**/*.py") it is part of the value.
COMMENT_LEADERS = frozenset(" \t\r\n\ufeff{}[](),:")


def is_digit(ch: str | None) -> bool:
    """ASCII digits only; ``²`` and ``①`` are not numbers."""
    return ch is not None and "0" <= ch <= "9"


@dataclass
class Token:
    """
    A single token of BluePrint text.

    Attributes:
        type: Type of token
        value: String value of the token (unescaped for strings)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        start: Offset of the first character in the source
        end: Offset one past the last character in the source
    """

    type: TokenType
    value: str
    line: int
    column: int
    start: int = 0
    end: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for BluePrint notation.

    Converts source text into a stream of tokens.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int, column: int):
        """Build a ParseError pointing at line/column."""
        return make_parse_error(
            message,
            self.file,
            line,
            column,
            source=self.text,
        )

    def skip_whitespace(self) -> None:
        """Skip whitespace characters (but not newlines)."""
        while self.current_char() in (" ", "\t", "\r", "\ufeff"):
            self.advance()

    def at_line_comment(self) -> bool:
        """
        Check for a ``//`` comment at the current position.

        ``//`` directly after a colon is part of a URL (``https://...``).
        """
        if self.current_char() != "/" or self.peek_char() != "/":
            return False
        return not (self.pos > 0 and self.text[self.pos - 1] == ":")

    def at_block_comment(self) -> bool:
        """
        Check for a ``/* ... */`` comment at the current position.

        Only after whitespace or a bracket, comma or colon; a glob such as
        ``src/**/*.py`` keeps its ``/*``.
        """
        if self.current_char() != "/" or self.peek_char() != "*":
            return False
        return self.pos == 0 or self.text[self.pos - 1] in COMMENT_LEADERS

    def after_word_char(self) -> bool:
        """Check whether the previous character belongs to a word."""
        if self.pos == 0:
            return False
        previous = self.text[self.pos - 1]
        return previous.isalnum() or previous == "_"

    def skip_line_comment(self) -> None:
        """Skip comment (from // to end of line)."""
        while self.current_char() and self.current_char() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        """Skip a /* ... */ comment, which may span lines."""
        start_line = self.line
        start_col = self.column
        self.advance()
        self.advance()
        while self.current_char() is not None:
            if self.current_char() == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                return
            self.advance()
        raise self.error("Unterminated block comment", start_line, start_col)

    def read_string(self) -> str:
        """Read a quoted string."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()  # " or '
        self.advance()

        chars = []
        while True:
            current = self.current_char()
            if not current or current == quote:
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char == "r":
                    chars.append("\r")
                elif escape_char == "\\":
                    chars.append("\\")
                elif escape_char:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise self.error("Unterminated string literal", start_line, start_col)

        self.advance()
        return "".join(chars)

    def read_backtick(self) -> str:
        """Read a `backtick` literal (used for file paths and inline code)."""
        start_line = self.line
        start_col = self.column
        self.advance()

        chars = []
        while self.current_char() not in (None, "`", "\n"):
            chars.append(self.current_char())
            self.advance()

        if self.current_char() != "`":
            raise self.error("Unterminated backtick literal", start_line, start_col)

        self.advance()
        return "".join(chars)

    def read_number(self) -> str:
        """Read an integer, decimal, or exponent number."""
        chars = []
        current = self.current_char()
        while is_digit(current):
            chars.append(current)
            self.advance()
            current = self.current_char()

        next_char = self.peek_char()
        if current == "." and is_digit(next_char):
            chars.append(current)
            self.advance()
            current = self.current_char()
            while is_digit(current):
                chars.append(current)
                self.advance()
                current = self.current_char()

        if current in ("e", "E"):
            after = self.peek_char()
            sign = after in ("+", "-")
            digit = self.peek_char(2) if sign else after
            if is_digit(digit):
                chars.append(current)
                self.advance()
                if sign:
                    chars.append(self.current_char())
                    self.advance()
                current = self.current_char()
                while is_digit(current):
                    chars.append(current)
                    self.advance()
                    current = self.current_char()

        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier (letters, digits, underscores)."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def add(self, token_type: TokenType, value: str, line: int, column: int, start: int) -> None:
        self.tokens.append(Token(token_type, value, line, column, start, self.pos))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If a string, backtick literal or block comment is unterminated
        """
        while self.pos < len(self.text):
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column
            start = self.pos

            # Comments
            if self.at_line_comment():
                self.skip_line_comment()
                continue

            if self.at_block_comment():
                self.skip_block_comment()
                continue

            # Newlines
            if ch == "\n":
                self.advance()
                self.add(TokenType.NEWLINE, "\\n", token_line, token_col, start)

            # Strings (an apostrophe inside a word is not a quote)
            elif ch == '"' or (ch == "'" and not self.after_word_char()):
                value = self.read_string()
                self.add(TokenType.STRING, value, token_line, token_col, start)

            elif ch == "`":
                value = self.read_backtick()
                self.add(TokenType.BACKTICK, value, token_line, token_col, start)

            # Numbers
            elif is_digit(ch):
                value = self.read_number()
                self.add(TokenType.NUMBER, value, token_line, token_col, start)

            # Identifiers
            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                self.add(TokenType.IDENTIFIER, value, token_line, token_col, start)

            elif ch == "-" and self.peek_char() == ">":
                self.advance()
                self.advance()
                self.add(TokenType.ARROW, "->", token_line, token_col, start)

            elif ch in SINGLE_CHAR_TOKENS:
                self.advance()
                self.add(SINGLE_CHAR_TOKENS[ch], ch, token_line, token_col, start)

            else:
                self.advance()
                self.add(TokenType.SYMBOL, ch, token_line, token_col, start)

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, self.pos, self.pos))

        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize BluePrint text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
