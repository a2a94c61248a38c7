"""
Token vocabulary for the Java-SST language.

Token types are canonical upper-case strings. `token_hashmap` maps every
reserved word and operator lexeme to its token type; the lexer consults it for
keyword recognition and longest-match operator scanning.

Exports:
    - KEYWORDS
    - OPERATORS
    - token_hashmap
    - TOKEN_TYPES
    - RELATIONAL_OPS, ADDITIVE_OPS, MULTIPLICATIVE_OPS
"""

KEYWORDS: dict[str, str] = {
    "class": "CLASS",
    "public": "PUBLIC",
    "final": "FINAL",
    "void": "VOID",
    "int": "INT",
    "if": "IF",
    "else": "ELSE",
    "while": "WHILE",
    "return": "RETURN",
}

OPERATORS: dict[str, str] = {
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    ";": "SEMICOLON",
    ",": "COMMA",
    "=": "ASSIGN",
    "==": "EQ",
    "<": "LT",
    "<=": "LE",
    ">": "GT",
    ">=": "GE",
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
}

token_hashmap: dict[str, str] = {**KEYWORDS, **OPERATORS}

TOKEN_TYPES: frozenset[str] = frozenset(token_hashmap.values()) | {
    "IDENT",
    "NUMBER",
    "EOF",
    "ERROR",
}

RELATIONAL_OPS: tuple[str, ...] = ("EQ", "LT", "LE", "GT", "GE")
ADDITIVE_OPS: tuple[str, ...] = ("PLUS", "SUB")
MULTIPLICATIVE_OPS: tuple[str, ...] = ("MULT", "DIV")
