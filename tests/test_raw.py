import math

import pytest

from lang4.data import (
    OPERATORS,
    Directive,
    Keyword,
    Primitive,
    PrimitiveKind,
    Token,
    TokenKind,
)
from lang4.raw import CompileError, parse_raw, scan_operator


@pytest.mark.parametrize(
    "text, code, end",
    [
        ("+", 0, 1),
        ("+=", 32, 2),
        ("**", 4, 2),
        ("**=", 36, 3),
        ("|<=", 43, 3),
        (">|", 23, 2),
        ("...", 14, 3),
        ("!!=", 26, 3),
        (",", 45, 1),
        ("$", 38, 1),
    ],
)
def test_scan_operator_codes(text, code, end):
    assert scan_operator(text, 0) == (code, end)


def test_every_operator_scans_to_its_own_code():
    for code, text in enumerate(OPERATORS):
        assert scan_operator(text, 0) == (code, len(text))


def test_scan_operator_stops_at_non_operator_and_honours_offset():
    assert scan_operator("+x", 0) == (0, 1)
    assert scan_operator("a<=b", 1) == (OPERATORS.index("<="), 3)


@pytest.mark.parametrize("text", ["!!x", "..x", "!!"])
def test_scan_operator_invalid(text):
    with pytest.raises(CompileError) as info:
        scan_operator(text, 0, 2, 5)
    assert info.value.message == "INVALID OPERATOR"
    assert (info.value.line, info.value.column) == (2, 5)
    assert str(info.value) == "INVALID OPERATOR (2, 5)"


def test_scan_operator_unexpected():
    with pytest.raises(CompileError) as info:
        scan_operator("#", 0)
    assert info.value.message == "UNEXPECTED OPERATOR"


def test_parse_string_like_tokens():
    tokens = parse_raw('Lit("name") Ptr("p") Kwd("if") Dir("unsafe") Kwd("bogus")')
    assert tokens == [
        Token(TokenKind.LIT, "name"),
        Token(TokenKind.PTR, "p"),
        Token(TokenKind.KWD, int(Keyword.IF)),
        Token(TokenKind.DIR, int(Directive.UNSAFE)),
        Token(TokenKind.KWD, int(Keyword.NO_MATCH)),
    ]


def test_parse_data_tokens():
    tokens = parse_raw(
        'Dat(Int(-5)) Dat(Bool(true)) Dat(String("hi there")) '
        "Dat(Byte(255)) Dat(Double(1.5)) Dat(Float(0.5)) Dat(UInt(+7))"
    )
    assert [t.value for t in tokens] == [
        Primitive(PrimitiveKind.INT, -5),
        Primitive(PrimitiveKind.BOOL, True),
        Primitive(PrimitiveKind.STRING, "hi there"),
        Primitive(PrimitiveKind.BYTE, 255),
        Primitive(PrimitiveKind.DOUBLE, 1.5),
        Primitive(PrimitiveKind.FLOAT, 0.5),
        Primitive(PrimitiveKind.UINT, 7),
    ]
    assert all(t.kind is TokenKind.DAT for t in tokens)


def test_float_overflow_becomes_infinity():
    tokens = parse_raw("Dat(Float(1e40))")
    assert tokens == [Token(TokenKind.DAT, Primitive(PrimitiveKind.FLOAT, math.inf))]


def test_parse_type_symbol_and_operator():
    tokens = parse_raw("Typ(double) Typ(string) Sym(;) Opr(+=)")
    assert tokens == [
        Token(TokenKind.TYP, 10),
        Token(TokenKind.TYP, 0),
        Token(TokenKind.SYM, ";"),
        Token(TokenKind.OPR, 32),
    ]


def test_parse_nested_groups_across_lines():
    tokens = parse_raw('Grp(Lit("a")\nGrp(Opr(+)))\nSym(;)')
    assert tokens == [
        Token(
            TokenKind.GRP,
            [Token(TokenKind.LIT, "a"), Token(TokenKind.GRP, [Token(TokenKind.OPR, 0)])],
        ),
        Token(TokenKind.SYM, ";"),
    ]


def test_parse_empty_text():
    assert parse_raw("  \n ") == []


@pytest.mark.parametrize(
    "text, message",
    [
        ("Dat(Byte(256))", "ERROR PARSING BYTE FROM 256"),
        ("Dat(UInt(-1))", "ERROR PARSING UINT FROM -1"),
        ("Dat(Int(1_000))", "ERROR PARSING INT FROM 1_000"),
        ("Dat(Double(abc))", "ERROR PARSING DOUBLE FROM abc"),
        ("Dat(Bool(yes))", "INVALID VALUE FOR BOOLEAN PRIMITIVE"),
        ("Dat(Null(x))", "INVALID PRIMITIVE TYPE (Null)"),
        ("Typ(in7)", "INVALID TYP TOKEN, TYPE MUST BE ALL ALPHA"),
        ("Typ(char)", "INVALID TYP NAME"),
        ("Lit(x)", "MALFORMED STR LIKE TOKEN"),
        ('Lit("x', "UNCLOSED STR LIKE TOKEN"),
        ("Grp(", "UNCLOSED GRP TOKEN"),
        ("Dat(Int(5", "UNCLOSED PRIMITIVE DECLARATION"),
        ('Dat(String("a"x)', "UNCLOSED PRIMITIVE STR DECLARATION"),
    ],
)
def test_parse_errors(text, message):
    with pytest.raises(CompileError) as info:
        parse_raw(text)
    assert info.value.message == message


def test_invalid_token_id_message():
    with pytest.raises(CompileError) as info:
        parse_raw("Xyz(1)", 4, 0)
    assert info.value.message == "INVALID TOKEN ID ['X', 'y', 'z']"
    assert info.value.line == 4


def test_group_error_is_wrapped():
    with pytest.raises(CompileError) as info:
        parse_raw("Grp(Typ(char))", 3, 0)
    assert info.value.message.startswith("GRP TOKEN CONTENTS ERROR: INVALID TYP NAME")
    assert info.value.line == 3