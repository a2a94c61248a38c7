"""
FIRST sets of the Java-SST grammar.

`GRAMMAR_STARTERS` lists, for every construct, the alternatives that can
begin it: either a token type or another construct. The table is resolved
once at import time into `FIRST_SETS`; an unlisted construct or a construct
whose FIRST set depends on itself raises `GrammarError` right then, so
`first()` itself cannot fail.

Every optional or repeated construct has a FIRST set disjoint from what can
follow it, which is what lets the parser decide with a single token of
lookahead.
"""

from __future__ import annotations

from enum import Enum

from sst.sst_constants import RELATIONAL_OPS


class GrammarError(Exception):
    """Raised when the FIRST-set table is incomplete or left recursive."""


class Construct(Enum):
    TYPE = "type"
    METHOD_TYPE = "method_type"
    CONSTANT = "constant"
    VARIABLE_DECLARATION = "variable_declaration"
    METHOD_DECLARATION = "method_declaration"
    METHOD_HEAD = "method_head"
    FP_SECTION = "fp_section"
    LOCAL_DECLARATION = "local_declaration"
    STATEMENT = "statement"
    ASSIGNMENT = "assignment"
    PROCEDURE_CALL = "procedure_call"
    IF_STATEMENT = "if_statement"
    WHILE_STATEMENT = "while_statement"
    RETURN_STATEMENT = "return_statement"
    INTERN_PROCEDURE_CALL = "intern_procedure_call"
    EXPRESSION = "expression"
    SIMPLE_EXPRESSION = "simple_expression"
    TERM = "term"
    FACTOR = "factor"
    RELATIONAL_OPERATOR = "relational_operator"


Starter = str | Construct

GRAMMAR_STARTERS: dict[Construct, tuple[Starter, ...]] = {
    Construct.TYPE: ("INT",),
    Construct.METHOD_TYPE: ("VOID", Construct.TYPE),
    Construct.CONSTANT: ("FINAL",),
    Construct.VARIABLE_DECLARATION: (Construct.TYPE,),
    Construct.METHOD_DECLARATION: (Construct.METHOD_HEAD,),
    Construct.METHOD_HEAD: ("PUBLIC",),
    Construct.FP_SECTION: (Construct.TYPE,),
    Construct.LOCAL_DECLARATION: (Construct.TYPE,),
    Construct.STATEMENT: (
        Construct.ASSIGNMENT,
        Construct.PROCEDURE_CALL,
        Construct.IF_STATEMENT,
        Construct.WHILE_STATEMENT,
        Construct.RETURN_STATEMENT,
    ),
    Construct.ASSIGNMENT: ("IDENT",),
    Construct.PROCEDURE_CALL: (Construct.INTERN_PROCEDURE_CALL,),
    Construct.IF_STATEMENT: ("IF",),
    Construct.WHILE_STATEMENT: ("WHILE",),
    Construct.RETURN_STATEMENT: ("RETURN",),
    Construct.INTERN_PROCEDURE_CALL: ("IDENT",),
    Construct.EXPRESSION: (Construct.SIMPLE_EXPRESSION,),
    Construct.SIMPLE_EXPRESSION: (Construct.TERM,),
    Construct.TERM: (Construct.FACTOR,),
    Construct.FACTOR: (
        "IDENT",
        "NUMBER",
        "LPAREN",
        Construct.INTERN_PROCEDURE_CALL,
    ),
    Construct.RELATIONAL_OPERATOR: RELATIONAL_OPS,
}


def _resolve(
    construct: Construct,
    resolved: dict[Construct, tuple[str, ...]],
    visiting: tuple[Construct, ...] = (),
) -> tuple[str, ...]:
    if construct in resolved:
        return resolved[construct]
    if construct in visiting:
        cycle = " -> ".join(c.value for c in visiting + (construct,))
        raise GrammarError(f"FIRST set of '{construct.value}' depends on itself: {cycle}")
    if construct not in GRAMMAR_STARTERS:
        raise GrammarError(f"No FIRST-set entry for construct '{construct.value}'")

    result: list[str] = []
    for starter in GRAMMAR_STARTERS[construct]:
        if isinstance(starter, Construct):
            result.extend(_resolve(starter, resolved, visiting + (construct,)))
        else:
            result.append(starter)
    resolved[construct] = tuple(dict.fromkeys(result))
    return resolved[construct]


def build_first_sets() -> dict[Construct, tuple[str, ...]]:
    """Resolves the FIRST set of every construct."""
    resolved: dict[Construct, tuple[str, ...]] = {}
    for construct in Construct:
        _resolve(construct, resolved)
    return resolved


FIRST_SETS: dict[Construct, tuple[str, ...]] = build_first_sets()


def first(construct: Construct) -> tuple[str, ...]:
    """Returns the token types that can begin `construct`, in grammar order."""
    return FIRST_SETS[construct]
