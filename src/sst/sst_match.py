"""
Fluent token-matching combinators used by the grammar productions.

A production states what it expects of the lookahead token and what should
happen on a match:

    self.token().one_of("IDENT").once()               # consume or fail
    name = self.token().one_of("IDENT").capture()     # consume, return the token
    self.token().one_of("LPAREN").optional(self.actual_parameters)
    self.token().one_of("FINAL").repeat(self.constant)

A failed mandatory match reports the current token and the full expected set
through the cursor's `error()`, which never returns. When `optional()` or
`repeat()` pass over the lookahead, their kinds are handed to the cursor as
skipped alternatives: they were acceptable at this position too, so the
cursor adds them to the expected set of any error raised before the next
token is consumed.
"""

from __future__ import annotations

from typing import Callable, Iterable, NoReturn, Protocol, TypeVar

from sst.sst_lexer import Token

T = TypeVar("T")


class Cursor(Protocol):
    """The single-token lookahead a Specification works against."""

    current: Token

    def next(self) -> None: ...  # pragma: no cover

    def error(self, expected: Iterable[str]) -> NoReturn: ...  # pragma: no cover

    def skip_alternatives(self, kinds: Iterable[str]) -> None: ...  # pragma: no cover


class Counter:
    """Applies one of four effects depending on whether the lookahead matches."""

    def __init__(self, cursor: Cursor, expected: tuple[str, ...]) -> None:
        self.cursor = cursor
        self.expected = expected

    def __repr__(self) -> str:
        return f"Counter({', '.join(self.expected)})"

    def matches(self) -> bool:
        return self.cursor.current.type in self.expected

    def once(self) -> None:
        """Consumes the lookahead if it matches, fails otherwise."""
        if not self.matches():
            self.cursor.error(self.expected)
        self.cursor.next()

    def capture(self) -> Token:
        """Consumes the lookahead like `once()` and returns it."""
        if not self.matches():
            self.cursor.error(self.expected)
        tok = self.cursor.current
        self.cursor.next()
        return tok

    def optional(self, rule: Callable[[], T]) -> T | None:
        """Runs `rule` once if the lookahead matches."""
        if self.matches():
            return rule()
        self.cursor.skip_alternatives(self.expected)
        return None

    def repeat(self, rule: Callable[[], object]) -> int:
        """Runs `rule` for as long as the lookahead matches.

        `rule` must consume at least one token per run; the grammar guarantees it.
        """
        count = 0
        while self.matches():
            rule()
            count += 1
        self.cursor.skip_alternatives(self.expected)
        return count


class Specification:
    """Entry point of the matching DSL, bound to a cursor."""

    def __init__(self, cursor: Cursor) -> None:
        self.cursor = cursor

    def one_of(self, *kinds: str | Iterable[str]) -> Counter:
        """Builds a Counter over token types given singly or as whole sets."""
        expected: list[str] = []
        for kind in kinds:
            if isinstance(kind, str):
                expected.append(kind)
            else:
                expected.extend(kind)
        return Counter(self.cursor, tuple(dict.fromkeys(expected)))
