"""
Java-SST Language Parser

Predictive (LL(1)) recursive-descent parser for Java-SST. It pulls classified
tokens from a token stream one at a time, checks that they form one class
declaration followed by end of input, and registers every declared name in a
chain of nested scopes.

Grammar
-------
    class             = CLASS IDENT class_body
    class_body        = "{" declarations "}"
    declarations      = {constant} {variable_declaration} {method_declaration}
    constant          = FINAL type IDENT "=" expression ";"
    variable_decl     = type IDENT ";"
    method_decl       = PUBLIC method_type IDENT formal_parameters
                        "{" {local_declaration} {statement} "}"
    formal_parameters = "(" [fp_section {"," fp_section}] ")"
    fp_section        = type IDENT
    statement         = IDENT ( actual_parameters | "=" expression ) ";"
                      | if_statement | while_statement | return_statement
    if_statement      = IF "(" expression ")" "{" statement_seq "}"
                        ELSE "{" statement_seq "}"
    while_statement   = WHILE "(" expression ")" "{" statement_seq "}"
    statement_seq     = statement {statement}
    return_statement  = RETURN [simple_expression] ";"
    expression        = simple_expression [rel_op simple_expression]
    simple_expression = term {("+" | "-") term}
    term              = factor {("*" | "/") factor}
    factor            = IDENT [actual_parameters] | NUMBER | "(" expression ")"
    actual_parameters = "(" [expression {"," expression}] ")"

Parser Behavior
---------------
- Every decision is made from the current token alone; nothing is buffered
  and nothing is backtracked.
- The first violated expectation raises `UnexpectedTokenError` naming the
  offending token and every token type acceptable at that point. There is no
  recovery.
- Class bodies, method bodies, if-statements and while-statements each open
  a scope that is closed when the construct ends, on the error path too.
- Expression productions return the compile-time value of what they parsed,
  or None when it is not a constant. Constant declarations require a value.
- Recursion depth follows the nesting depth of the source (parentheses,
  if/while bodies), not its length.

Entry Points
------------
- `Parser(stream).parse()`: Parse a whole program, returning the class scope.
- `parse_source(source)`: Scan and parse a source string.

Raises
------
UnexpectedTokenError
    On the first token that does not fit the grammar.
DuplicateDeclarationError
    When a name is declared twice in one scope.
ConstantEvaluationError
    When a constant's initializer is not a compile-time constant.
"""

from __future__ import annotations

import logging
import operator
from typing import Callable, Iterable, NoReturn, Union

from sst.sst_constants import ADDITIVE_OPS, MULTIPLICATIVE_OPS
from sst.sst_errors import ConstantEvaluationError, UnexpectedTokenError
from sst.sst_first import Construct, first
from sst.sst_lexer import CharacterStream, Lexer, Token, TokenStream
from sst.sst_match import Specification
from sst.sst_symbols import (
    ClassDeclaration,
    ConstantDeclaration,
    ProcedureDeclaration,
    Scope,
    ScopeKind,
    SymbolTable,
    VariableDeclaration,
)

LOGGER = logging.getLogger(__name__)

Value = Union[int, bool, None]
"""Compile-time value of an expression; None when it is not constant."""


def _divide(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right > 0) else -quotient


BINARY_OPERATORS: dict[str, Callable[[int, int], int | bool]] = {
    "PLUS": operator.add,
    "SUB": operator.sub,
    "MULT": operator.mul,
    "DIV": _divide,
    "EQ": operator.eq,
    "LT": operator.lt,
    "LE": operator.le,
    "GT": operator.gt,
    "GE": operator.ge,
}


def fold(op: str, left: Value, right: Value) -> Value:
    """Applies a binary operator to two compile-time values.

    Integer division truncates toward zero; a zero divisor leaves the result
    non-constant.
    """
    if left is None or right is None:
        return None
    if op == "DIV" and right == 0:
        return None
    return BINARY_OPERATORS[op](left, right)


class Parser:
    """
    Java-SST Parser Class

    Attributes
    ----------
    stream : TokenStream
        Source of tokens, pulled one per cursor advance.
    current : Token
        The lookahead token.
    symbols : SymbolTable
        Scope chain the declarations are registered in.
    """

    def __init__(self, stream: TokenStream, symbols: SymbolTable | None = None) -> None:
        self.stream = stream
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.current: Token = Token("EOF", "EOF")
        self._skipped: list[str] = []

    # Cursor

    def next(self) -> None:
        self.current = self.stream.next_token()
        self._skipped.clear()
        LOGGER.debug("token %r at %d:%d", self.current, self.current.line, self.current.col)

    def skip_alternatives(self, kinds: Iterable[str]) -> None:
        self._skipped.extend(kinds)

    def error(self, expected: Iterable[str]) -> NoReturn:
        raise UnexpectedTokenError(self.current, [*self._skipped, *expected])

    def token(self) -> Specification:
        return Specification(self)

    # Declarations

    def parse(self) -> Scope:
        """Parse a full program and return the class scope."""
        self.next()
        scope = self.class_declaration()
        self.token().one_of("EOF").once()
        return scope

    def class_declaration(self) -> Scope:
        with self.symbols.scoped(ScopeKind.CLASS) as scope:
            self.token().one_of("CLASS").once()
            ident = self.token().one_of("IDENT").capture()
            self.symbols.set_head(ClassDeclaration(ident.value, ident.line, ident.col))
            self.class_body()
        return scope

    def class_body(self) -> None:
        self.token().one_of("LBRACE").once()
        self.declarations()
        self.token().one_of("RBRACE").once()

    def declarations(self) -> None:
        """Constants, then fields, then methods, in that fixed order."""
        self.token().one_of(first(Construct.CONSTANT)).repeat(self.constant)
        self.token().one_of(first(Construct.VARIABLE_DECLARATION)).repeat(
            self.variable_declaration
        )
        self.token().one_of(first(Construct.METHOD_DECLARATION)).repeat(
            self.method_declaration
        )

    def type_(self) -> str:
        return self.token().one_of(first(Construct.TYPE)).capture().value

    def method_type(self) -> str:
        return self.token().one_of(first(Construct.METHOD_TYPE)).capture().value

    def constant(self) -> None:
        self.token().one_of("FINAL").once()
        type_ = self.type_()
        ident = self.token().one_of("IDENT").capture()
        self.token().one_of("ASSIGN").once()
        value = self.expression()
        self.token().one_of("SEMICOLON").once()

        if value is None:
            raise ConstantEvaluationError(ident.value, ident.line, ident.col)
        self.symbols.insert(
            ConstantDeclaration(ident.value, type_, value, ident.line, ident.col)
        )

    def variable_declaration(self) -> None:
        type_ = self.type_()
        ident = self.token().one_of("IDENT").capture()
        self.token().one_of("SEMICOLON").once()
        self.symbols.insert(VariableDeclaration(ident.value, type_, ident.line, ident.col))

    def method_declaration(self) -> None:
        self.token().one_of("PUBLIC").once()
        return_type = self.method_type()
        ident = self.token().one_of("IDENT").capture()
        parameters = self.formal_parameters()

        # Declared before the body so the method can call itself.
        self.symbols.insert(
            ProcedureDeclaration(ident.value, return_type, parameters, ident.line, ident.col)
        )

        with self.symbols.scoped(ScopeKind.METHOD):
            for parameter in parameters:
                self.symbols.insert(parameter)
            self.token().one_of("LBRACE").once()
            self.token().one_of(first(Construct.LOCAL_DECLARATION)).repeat(
                self.local_declaration
            )
            self.token().one_of(first(Construct.STATEMENT)).repeat(self.statement)
            self.token().one_of("RBRACE").once()

    def formal_parameters(self) -> list[VariableDeclaration]:
        parameters: list[VariableDeclaration] = []

        def next_section() -> None:
            self.token().one_of("COMMA").once()
            parameters.append(self.fp_section())

        def sections() -> None:
            parameters.append(self.fp_section())
            self.token().one_of("COMMA").repeat(next_section)

        self.token().one_of("LPAREN").once()
        self.token().one_of(first(Construct.FP_SECTION)).optional(sections)
        self.token().one_of("RPAREN").once()
        return parameters

    def fp_section(self) -> VariableDeclaration:
        type_ = self.type_()
        ident = self.token().one_of("IDENT").capture()
        return VariableDeclaration(ident.value, type_, ident.line, ident.col)

    def local_declaration(self) -> None:
        type_ = self.type_()
        ident = self.token().one_of("IDENT").capture()
        self.token().one_of("SEMICOLON").once()
        self.symbols.insert(VariableDeclaration(ident.value, type_, ident.line, ident.col))

    # Statements

    def statement_sequence(self) -> int:
        self.statement()
        return 1 + self.token().one_of(first(Construct.STATEMENT)).repeat(self.statement)

    def statement(self) -> None:
        tok = self.current

        if tok.type == "IDENT":
            # Assignment or procedure call, told apart by the token after the name.
            self.next()
            if self.current.type == "LPAREN":
                self.intern_procedure_call(tok)
                self.token().one_of("SEMICOLON").once()
            elif self.current.type == "ASSIGN":
                self.assignment()
            else:
                self.error(("LPAREN", "ASSIGN"))
        elif tok.type in first(Construct.IF_STATEMENT):
            self.if_statement()
        elif tok.type in first(Construct.WHILE_STATEMENT):
            self.while_statement()
        elif tok.type in first(Construct.RETURN_STATEMENT):
            self.return_statement()
        else:
            self.error(first(Construct.STATEMENT))

    def assignment(self) -> None:
        self.token().one_of("ASSIGN").once()
        self.expression()
        self.token().one_of("SEMICOLON").once()

    def if_statement(self) -> None:
        with self.symbols.scoped(ScopeKind.IF):
            self.token().one_of("IF").once()
            self.token().one_of("LPAREN").once()
            self.expression()
            self.token().one_of("RPAREN").once()
            self.block()
            self.token().one_of("ELSE").once()
            self.block()

    def while_statement(self) -> None:
        with self.symbols.scoped(ScopeKind.WHILE):
            self.token().one_of("WHILE").once()
            self.token().one_of("LPAREN").once()
            self.expression()
            self.token().one_of("RPAREN").once()
            self.block()

    def block(self) -> None:
        self.token().one_of("LBRACE").once()
        self.statement_sequence()
        self.token().one_of("RBRACE").once()

    def return_statement(self) -> Value:
        self.token().one_of("RETURN").once()
        value = self.token().one_of(first(Construct.SIMPLE_EXPRESSION)).optional(
            self.simple_expression
        )
        self.token().one_of("SEMICOLON").once()
        return value

    def intern_procedure_call(self, name: Token) -> int:
        """Parses the argument list of a call whose name was already consumed.

        Returns the number of arguments.
        """
        LOGGER.debug("call to %s at %d:%d", name.value, name.line, name.col)
        return self.actual_parameters()

    def actual_parameters(self) -> int:
        def next_argument() -> None:
            self.token().one_of("COMMA").once()
            self.expression()

        def arguments() -> int:
            self.expression()
            return 1 + self.token().one_of("COMMA").repeat(next_argument)

        self.token().one_of("LPAREN").once()
        count = self.token().one_of(first(Construct.EXPRESSION)).optional(arguments)
        self.token().one_of("RPAREN").once()
        return count or 0

    # Expressions

    def expression(self) -> Value:
        value = self.simple_expression()

        def comparison() -> None:
            nonlocal value
            op = self.token().one_of(first(Construct.RELATIONAL_OPERATOR)).capture()
            value = fold(op.type, value, self.simple_expression())

        self.token().one_of(first(Construct.RELATIONAL_OPERATOR)).optional(comparison)
        return value

    def simple_expression(self) -> Value:
        value = self.term()

        def additive() -> None:
            nonlocal value
            op = self.token().one_of(ADDITIVE_OPS).capture()
            value = fold(op.type, value, self.term())

        self.token().one_of(ADDITIVE_OPS).repeat(additive)
        return value

    def term(self) -> Value:
        value = self.factor()

        def multiplicative() -> None:
            nonlocal value
            op = self.token().one_of(MULTIPLICATIVE_OPS).capture()
            value = fold(op.type, value, self.factor())

        self.token().one_of(MULTIPLICATIVE_OPS).repeat(multiplicative)
        return value

    def factor(self) -> Value:
        tok = self.current

        if tok.type == "IDENT":
            self.next()
            called = self.token().one_of("LPAREN").optional(
                lambda: self.intern_procedure_call(tok)
            )
            if called is not None:
                return None
            declaration = self.symbols.lookup(tok.value)
            if isinstance(declaration, ConstantDeclaration):
                return declaration.value
            return None
        if tok.type == "NUMBER":
            self.next()
            try:
                return int(tok.value)
            except ValueError:
                # Literal longer than the interpreter's int conversion limit.
                LOGGER.debug("literal at %d:%d is not a constant", tok.line, tok.col)
                return None
        if tok.type == "LPAREN":
            self.next()
            value = self.expression()
            self.token().one_of("RPAREN").once()
            return value

        self.error(first(Construct.FACTOR))


def parse_source(source: str, symbols: SymbolTable | None = None) -> Scope:
    """Scans and parses `source`, returning the class scope."""
    return Parser(Lexer(CharacterStream(source)), symbols).parse()
