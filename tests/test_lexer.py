import pytest
from hypothesis import given
from hypothesis import strategies as st

from sst.sst_constants import KEYWORDS, OPERATORS, TOKEN_TYPES, token_hashmap
from sst.sst_errors import LexicalError
from sst.sst_lexer import CharacterStream, Lexer, Token, TokenList, tokenize


def types(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_single_char_tokens() -> None:
    code = "{ } ( ) ; , = < > + - * /"
    expected = [
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "SEMICOLON",
        "COMMA",
        "ASSIGN",
        "LT",
        "GT",
        "PLUS",
        "SUB",
        "MULT",
        "DIV",
        "EOF",
    ]
    assert types(code) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("==", ["EQ", "EOF"]),
        ("= =", ["ASSIGN", "ASSIGN", "EOF"]),
        ("<=", ["LE", "EOF"]),
        (">=", ["GE", "EOF"]),
        ("===", ["EQ", "ASSIGN", "EOF"]),
        ("a<=b", ["IDENT", "LE", "IDENT", "EOF"]),
    ],
)
def test_longest_match_operators(source: str, expected: list[str]) -> None:
    assert types(source) == expected


def test_number_token() -> None:
    tok = Lexer(CharacterStream("123")).next_token()
    assert tok == Token("NUMBER", "123", 1, 1)


def test_identifier_token() -> None:
    tok = Lexer(CharacterStream("myVar_2")).next_token()
    assert tok.type == "IDENT"
    assert tok.value == "myVar_2"


@pytest.mark.parametrize("word", sorted(KEYWORDS))
def test_reserved_words(word: str) -> None:
    tok = Lexer(CharacterStream(word)).next_token()
    assert tok.type == KEYWORDS[word]
    assert tok.value == word


def test_keywords_are_case_sensitive() -> None:
    tok = Lexer(CharacterStream("Class")).next_token()
    assert tok.type == "IDENT"


def test_number_followed_by_identifier() -> None:
    assert types("12ab") == ["NUMBER", "IDENT", "EOF"]


def test_line_and_column_tracking() -> None:
    tokens = tokenize("class A\n  {\n}")
    assert [(t.type, t.line, t.col) for t in tokens] == [
        ("CLASS", 1, 1),
        ("IDENT", 1, 7),
        ("LBRACE", 2, 3),
        ("RBRACE", 3, 1),
        ("EOF", 3, 2),
    ]


def test_line_comment_skipped() -> None:
    assert types("int x; // trailing words\nint") == [
        "INT",
        "IDENT",
        "SEMICOLON",
        "INT",
        "EOF",
    ]


def test_block_comment_skipped() -> None:
    assert types("a /* b\n c */ d") == ["IDENT", "IDENT", "EOF"]


def test_division_is_not_a_comment() -> None:
    assert types("a / b") == ["IDENT", "DIV", "IDENT", "EOF"]


def test_unterminated_block_comment_raises() -> None:
    with pytest.raises(LexicalError, match="Unterminated block comment at line 1, col 3"):
        tokenize("a /* never closed")


def test_unknown_character_becomes_error_token() -> None:
    tokens = tokenize("x ! y")
    assert tokens[1] == Token("ERROR", "!", 1, 3)


def test_eof_repeats_after_end() -> None:
    lexer = Lexer(CharacterStream("x"))
    assert lexer.next_token().type == "IDENT"
    assert lexer.next_token().type == "EOF"
    assert lexer.next_token().type == "EOF"


def test_empty_source_is_just_eof() -> None:
    assert tokenize("") == [Token("EOF", "EOF", 1, 1)]


def test_token_repr_and_immutability() -> None:
    tok = Token("IDENT", "x", 2, 3)
    assert repr(tok) == "Token(IDENT, x)"
    with pytest.raises(AttributeError):
        tok.value = "y"  # type: ignore[misc]


def test_character_stream_read_past_end() -> None:
    stream = CharacterStream("a")
    assert stream.next() == "a"
    assert stream.peek() == ""
    with pytest.raises(EOFError):
        stream.next()


def test_token_list_serves_tokens_then_eof() -> None:
    stream = TokenList([Token("IDENT", "x", 1, 1)])
    assert stream.next_token() == Token("IDENT", "x", 1, 1)
    assert stream.exhausted
    assert stream.consumed == 1
    assert stream.next_token().type == "EOF"
    assert stream.consumed == 1


def test_empty_token_list() -> None:
    stream = TokenList([])
    assert stream.exhausted
    assert stream.next_token() == Token("EOF", "EOF", 0, 0)


@given(st.sampled_from(sorted(OPERATORS)))
def test_every_operator_lexes_alone(op: str) -> None:
    assert tokenize(op) == [Token(OPERATORS[op], op, 1, 1), Token("EOF", "EOF", 1, len(op) + 1)]


@given(st.integers(min_value=0, max_value=10**12))
def test_integer_literals_round_trip(n: int) -> None:
    tok = tokenize(str(n))[0]
    assert tok.type == "NUMBER"
    assert int(tok.value) == n


@given(st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,12}", fullmatch=True))
def test_identifiers_and_keywords(word: str) -> None:
    tok = tokenize(word)[0]
    assert tok.value == word
    assert tok.type == KEYWORDS.get(word, "IDENT")


@given(st.text(alphabet="classpublicfinalvoidintwhile_0123456789{}();,=<>+-* \n!$", max_size=60))
def test_every_token_type_is_canonical(source: str) -> None:
    tokens = tokenize(source)
    assert tokens[-1].type == "EOF"
    assert all(tok.type in TOKEN_TYPES for tok in tokens)


@pytest.mark.parametrize("lexeme,token_type", sorted(token_hashmap.items()))
def test_reserved_lexemes_scan_to_their_token_type(lexeme: str, token_type: str) -> None:
    assert tokenize(lexeme) == [
        Token(token_type, lexeme, 1, 1),
        Token("EOF", "EOF", 1, len(lexeme) + 1),
    ]
