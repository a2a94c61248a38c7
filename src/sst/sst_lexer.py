"""
Lexical analyzer for the Java-SST language.

This module turns raw source text into the classified tokens the parser pulls
one at a time:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable token with type, value, and source location.
    TokenStream: Protocol for anything that hands out tokens on demand.
    Lexer: Converts a CharacterStream into a stream of tokens.
    TokenList: Serves a prepared token sequence through the TokenStream protocol.

Features:
    - Skips whitespace, `//` line comments and `/* ... */` block comments
    - Longest-match recognition of operators (`==` before `=`, `<=` before `<`)
    - Recognizes identifiers, reserved words and decimal integer literals
    - Emits an `EOF` token on every call once the input is exhausted

Raises:
    LexicalError: If a block comment is never closed.

Example:
    >>> lexer = Lexer(CharacterStream("class A { }"))
    >>> lexer.next_token()
    Token(CLASS, class)
"""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple, Protocol

from sst.sst_constants import OPERATORS, token_hashmap
from sst.sst_errors import LexicalError

MAX_OPERATOR_LENGTH = max(len(op) for op in OPERATORS)


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token(NamedTuple):
    """A single lexical token.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOF').
        value (str): The lexeme; identifier text for IDENT, digits for NUMBER.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    type: str
    value: str
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class TokenStream(Protocol):
    """Pull-based token source consumed by the parser."""

    def next_token(self) -> Token: ...  # pragma: no cover


class Lexer:
    """Lexical analyzer for Java-SST.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips whitespace and both comment forms."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "/" and self.peek(1) == "/":
                self.skip_line_comment()
            elif self.peek() == "/" and self.peek(1) == "*":
                self.skip_block_comment()
            else:
                break

    def skip_line_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        line, col = self.stream.line, self.stream.column
        self.advance()
        self.advance()
        while not self.stream.end_of_file():
            if self.peek() == "*" and self.peek(1) == "/":
                self.advance()
                self.advance()
                return
            self.advance()
        raise LexicalError("Unterminated block comment", line, col)

    def match_operator(self) -> Token | None:
        """Matches the longest operator at the current position, if any."""
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream."""
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token("EOF", "EOF", line, col)

        ch = self.peek()

        # Identifier or keyword
        if ch.isascii() and (ch.isalpha() or ch == "_"):
            ident = ""
            while not self.stream.end_of_file() and self.peek().isascii() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            return Token(token_hashmap.get(ident, "IDENT"), ident, line, col)

        # Integer literal
        if ch.isascii() and ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and self.peek().isascii() and self.peek().isdigit():
                num += self.advance()
            return Token("NUMBER", num, line, col)

        token = self.match_operator()
        if token:
            return token

        # Unknown character; the parser reports it
        return Token("ERROR", self.advance(), line, col)

    def tokens(self) -> Iterator[Token]:
        """Yields tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return


class TokenList:
    """Serves a prepared token sequence through the TokenStream protocol.

    Once the sequence is used up every call returns an EOF token, so a list
    without a trailing EOF still terminates cleanly.

    Attributes:
        consumed (int): Number of tokens handed out from the sequence.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: list[Token] = list(tokens)
        self.consumed = 0

    def next_token(self) -> Token:
        if self.consumed < len(self._tokens):
            tok = self._tokens[self.consumed]
            self.consumed += 1
            return tok
        last = self._tokens[-1] if self._tokens else None
        return Token("EOF", "EOF", last.line if last else 0, last.col if last else 0)

    @property
    def exhausted(self) -> bool:
        return self.consumed >= len(self._tokens)


def tokenize(source: str) -> list[Token]:
    """Scans `source` completely, returning its tokens including the final EOF."""
    return list(Lexer(CharacterStream(source)).tokens())


__all__ = ["CharacterStream", "Lexer", "Token", "TokenList", "TokenStream", "tokenize"]
