"""
Error types raised by the Java-SST front end.

Every error is fatal: the first one raised ends the parse.

Classes:
    UnexpectedTokenError: The current token is not one of the expected kinds.
    LexicalError: The scanner met input it cannot tokenize at all.
    SemanticError: Base for declaration-level conditions.
    DuplicateDeclarationError: A name was declared twice in the same scope.
    ConstantEvaluationError: A constant initializer is not a compile-time constant.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from sst.sst_lexer import Token
    from sst.sst_symbols import Scope


class UnexpectedTokenError(SyntaxError):
    """Raised when the lookahead token is outside the expected set.

    Attributes:
        token (Token): The offending token.
        expected (tuple[str, ...]): Every acceptable token type, in grammar order.
    """

    def __init__(self, token: Token, expected: Iterable[str]):
        self.token = token
        self.expected: tuple[str, ...] = tuple(dict.fromkeys(expected))
        message = f"Unexpected token {token!r} at line {token.line}, col {token.col}."
        if self.expected:
            message += f" Expected one of: {', '.join(self.expected)}."
        super().__init__(message)


class LexicalError(SyntaxError):
    """Raised for unterminated constructs the scanner cannot recover from."""

    def __init__(self, message: str, line: int = 0, col: int = 0):
        super().__init__(f"{message} at line {line}, col {col}")
        self.line = line
        self.col = col


class SemanticError(Exception):
    """Base class for errors raised while registering declarations."""


class DuplicateDeclarationError(SemanticError):
    """Raised when a name is inserted twice into one scope.

    Attributes:
        name (str): The redeclared name.
        scope (Scope): The scope that already holds the name.
    """

    def __init__(self, name: str, scope: Scope):
        super().__init__(
            f"Duplicate declaration of '{name}' in {scope.kind.value} scope"
        )
        self.name = name
        self.scope = scope


class ConstantEvaluationError(SemanticError):
    """Raised when a constant's initializer cannot be evaluated at parse time."""

    def __init__(self, name: str, line: int = 0, col: int = 0):
        super().__init__(
            f"Initializer of constant '{name}' (line {line}, col {col}) "
            "is not a compile-time constant"
        )
        self.name = name
