"""
Declarations and lexically nested scopes for the Java-SST front end.

Classes:
    Declaration:
        Base for everything a scope can hold. Subclasses are ClassDeclaration,
        ProcedureDeclaration, VariableDeclaration and ConstantDeclaration.

    DeclarationDict / ScopeDict:
        TypedDict shapes produced by `to_dict()`, used for JSON output and for
        comparing symbol tables in tests.

    Scope:
        One namespace in the chain. Holds its declarations by name and a
        non-owning link to the enclosing scope.

    SymbolTable:
        Owns the "current scope" pointer and enforces the enter/exit
        discipline. `scoped()` pairs every enter with an exit, including when
        a parse error unwinds through the construct that opened the scope.

Scopes are created when entering a class body, a method body, an if-statement
and a while-statement. The class scope is the root; everything below it
becomes unreachable once its construct has been parsed.

Example:
    >>> table = SymbolTable()
    >>> with table.scoped(ScopeKind.CLASS):
    ...     table.insert(VariableDeclaration("x", "int"))
    ...     table.lookup("x")
    VariableDeclaration(name='x', type_=int)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterator, TypedDict

from sst.sst_errors import DuplicateDeclarationError

LOGGER = logging.getLogger(__name__)


class DeclarationDict(TypedDict, total=False):
    """Serialized form of a Declaration.

    Fields:
        kind (str): "class", "procedure", "variable" or "constant".
        name (str): Declared name.
        line (int): Line of the declaring identifier.
        col (int): Column of the declaring identifier.
        type (str | None): Declared type of a variable or constant.
        value (Any): Evaluated value of a constant.
        return_type (str | None): Return type of a procedure.
        parameters (list[DeclarationDict]): Formal parameters of a procedure.
    """

    kind: str
    name: str
    line: int
    col: int
    type: str | None
    value: Any
    return_type: str | None
    parameters: list["DeclarationDict"]


class ScopeDict(TypedDict):
    kind: str
    head: DeclarationDict | None
    declarations: list[DeclarationDict]


class Declaration:
    """A named entity recorded in a scope.

    Attributes:
        kind (str): Tag of the variant.
        name (str): The declared identifier.
        line (int): Source line of the identifier (0 when unknown).
        col (int): Source column of the identifier (0 when unknown).
    """

    kind = "declaration"

    def __init__(self, name: str, line: int = 0, col: int = 0):
        self.name = name
        self.line = line
        self.col = col

    def _fields(self) -> dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        parts = [f"name={self.name!r}"]
        parts.extend(f"{k}={v}" for k, v in self._fields().items())
        return f"{type(self).__name__}({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        return (
            type(self) is type(other)
            and self.name == other.name
            and self.line == other.line
            and self.col == other.col
            and self._fields() == other._fields()
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.name, self.line, self.col))

    def to_dict(self) -> DeclarationDict:
        return {"kind": self.kind, "name": self.name, "line": self.line, "col": self.col}


class ClassDeclaration(Declaration):
    kind = "class"


class VariableDeclaration(Declaration):
    """A field, formal parameter or local variable."""

    kind = "variable"

    def __init__(self, name: str, type_: str, line: int = 0, col: int = 0):
        super().__init__(name, line, col)
        self.type = type_

    def _fields(self) -> dict[str, Any]:
        return {"type_": self.type}

    def to_dict(self) -> DeclarationDict:
        d = super().to_dict()
        d["type"] = self.type
        return d


class ConstantDeclaration(Declaration):
    """A `final` field together with the value of its initializer."""

    kind = "constant"

    def __init__(self, name: str, type_: str, value: int | bool, line: int = 0, col: int = 0):
        super().__init__(name, line, col)
        self.type = type_
        self.value = value

    def _fields(self) -> dict[str, Any]:
        return {"type_": self.type, "value": self.value}

    def to_dict(self) -> DeclarationDict:
        d = super().to_dict()
        d["type"] = self.type
        d["value"] = self.value
        return d


class ProcedureDeclaration(Declaration):
    """A method, with its return type and formal parameters in order."""

    kind = "procedure"

    def __init__(
        self,
        name: str,
        return_type: str,
        parameters: list[VariableDeclaration] | None = None,
        line: int = 0,
        col: int = 0,
    ):
        super().__init__(name, line, col)
        self.return_type = return_type
        self.parameters: list[VariableDeclaration] = parameters or []

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def _fields(self) -> dict[str, Any]:
        return {"return_type": self.return_type, "parameters": self.parameters}

    def to_dict(self) -> DeclarationDict:
        d = super().to_dict()
        d["return_type"] = self.return_type
        d["parameters"] = [p.to_dict() for p in self.parameters]
        return d


class ScopeKind(Enum):
    CLASS = "class"
    METHOD = "method"
    IF = "if"
    WHILE = "while"


class Scope:
    """A single namespace in the scope chain.

    Attributes:
        kind (ScopeKind): Which construct opened the scope.
        parent (Scope | None): Enclosing scope; None for the class scope.
        head (Declaration | None): The declaration that names the scope itself.
        declarations (dict[str, Declaration]): Members, in insertion order.
    """

    def __init__(self, kind: ScopeKind, parent: Scope | None = None):
        self.kind = kind
        self.parent = parent
        self.head: Declaration | None = None
        self.declarations: dict[str, Declaration] = {}

    def __repr__(self) -> str:
        names = ", ".join(self.declarations)
        return f"Scope({self.kind.value}, [{names}])"

    def __contains__(self, name: object) -> bool:
        return name in self.declarations

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Scope):
            return False
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    @property
    def depth(self) -> int:
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return depth

    def names(self) -> list[str]:
        return list(self.declarations)

    def set_head(self, declaration: Declaration) -> None:
        """Binds the declaration that names this scope; it is not a member."""
        self.head = declaration

    def insert(self, declaration: Declaration) -> None:
        """Adds a member, refusing a second declaration of the same name."""
        if declaration.name in self.declarations:
            raise DuplicateDeclarationError(declaration.name, self)
        self.declarations[declaration.name] = declaration

    def lookup_local(self, name: str) -> Declaration | None:
        return self.declarations.get(name)

    def lookup(self, name: str) -> Declaration | None:
        """Finds the nearest declaration of `name`, searching outward."""
        scope: Scope | None = self
        while scope is not None:
            if name in scope.declarations:
                return scope.declarations[name]
            scope = scope.parent
        return None

    def to_dict(self) -> ScopeDict:
        return {
            "kind": self.kind.value,
            "head": self.head.to_dict() if self.head is not None else None,
            "declarations": [d.to_dict() for d in self.declarations.values()],
        }


class SymbolTable:
    """Tracks the current scope while the parser walks nested constructs.

    Attributes:
        current (Scope | None): The innermost open scope.
        root (Scope | None): The first scope ever opened (the class scope).
        on_exit (Callable[[Scope], None] | None): Called with each scope as it
            is discarded.
    """

    def __init__(self, on_exit: Callable[[Scope], None] | None = None):
        self.current: Scope | None = None
        self.root: Scope | None = None
        self.on_exit = on_exit

    def _require_scope(self) -> Scope:
        if self.current is None:
            raise RuntimeError("No scope is open")
        return self.current

    def enter_scope(self, kind: ScopeKind) -> Scope:
        scope = Scope(kind, self.current)
        if self.root is None:
            self.root = scope
        self.current = scope
        LOGGER.debug("enter %s scope (depth %d)", kind.value, scope.depth)
        return scope

    def exit_scope(self) -> Scope:
        scope = self._require_scope()
        self.current = scope.parent
        LOGGER.debug("exit %s scope: %s", scope.kind.value, scope.names())
        if self.on_exit is not None:
            self.on_exit(scope)
        return scope

    @contextmanager
    def scoped(self, kind: ScopeKind) -> Iterator[Scope]:
        scope = self.enter_scope(kind)
        try:
            yield scope
        finally:
            self.exit_scope()

    def insert(self, declaration: Declaration) -> None:
        self._require_scope().insert(declaration)

    def set_head(self, declaration: Declaration) -> None:
        self._require_scope().set_head(declaration)

    def lookup(self, name: str, scope: Scope | None = None) -> Declaration | None:
        """Resolves `name` from `scope`, or from the current scope by default."""
        start = scope if scope is not None else self.current
        if start is None:
            return None
        return start.lookup(name)
