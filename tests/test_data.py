import pytest

from lang4.data import (
    KEYWORDS,
    TYPELST,
    ArgsObj,
    ClassInstObj,
    Directive,
    FuncObj,
    Keyword,
    Primitive,
    PrimitiveKind,
    PrimType,
    PropsObj,
    Token,
    TokenKind,
    operator_symbol,
    stable_hash,
)


def test_stable_hash_is_deterministic_and_64_bit():
    first = stable_hash("println")
    assert first == stable_hash("println")
    assert 0 <= first < 2**64


def test_stable_hash_distinguishes_names():
    assert len({stable_hash(name) for name in KEYWORDS}) == len(KEYWORDS)


def test_operator_symbols_from_table():
    assert operator_symbol(0) == "+"
    assert operator_symbol(46) == ":"
    assert operator_symbol(14) == "..."
    assert operator_symbol(47) == "INVALID"


@pytest.mark.parametrize("name", TYPELST)
def test_primtype_name_round_trip(name):
    assert str(PrimType.from_name(name)) == name


def test_primtype_unknown_is_void():
    assert PrimType.from_name("int") is PrimType.VOID
    assert PrimType.from_code(200) is PrimType.VOID


@pytest.mark.parametrize("ptype", list(PrimType))
def test_primtype_code_round_trip(ptype):
    assert PrimType.from_code(int(ptype)) is ptype


def test_primtype_compares_with_codes():
    assert PrimType.from_name("i32") == PrimType.I32
    assert PrimType.from_name("string") == 0


@pytest.mark.parametrize("kw", [k for k in Keyword if k is not Keyword.NO_MATCH])
def test_keyword_text_round_trip(kw):
    assert kw.text() in KEYWORDS
    assert Keyword.from_name(kw.text()) is kw
    assert Keyword.from_code(int(kw)) is kw


def test_keyword_without_enum_entry_is_no_match():
    assert Keyword.from_name("constructor") is Keyword.NO_MATCH
    assert Keyword.from_name("interface") is Keyword.NO_MATCH
    assert Keyword.from_code(99) is Keyword.NO_MATCH


def test_keyword_no_match_has_no_text():
    with pytest.raises(ValueError):
        Keyword.NO_MATCH.text()


@pytest.mark.parametrize("directive", [d for d in Directive if d is not Directive.NO_MATCH])
def test_directive_round_trip(directive):
    assert Directive.from_name(directive.text()) is directive
    assert Directive.from_code(int(directive)) is directive


def test_directive_spellings():
    assert Directive.from_name("LIBCALL") is Directive.LIBCALL
    assert Directive.from_name("must_override") is Directive.MUST_OVERRIDE
    assert Directive.from_name("nope") is Directive.NO_MATCH
    assert Directive.NO_MATCH.text() == "INVALID DIRECTIVE"
    assert Directive.from_code(42) is Directive.NO_MATCH


def test_null_renders_plainly():
    assert Primitive(PrimitiveKind.NULL).render() == "Null"


def test_int_render_uses_number_colour():
    rendered = Primitive(PrimitiveKind.INT, 5).render()
    assert rendered == "Int(\x1b[38;2;200;255;175m5\x1b[0m)"


def test_string_and_bool_render():
    assert Primitive(PrimitiveKind.STRING, "hi").render() == "String(\x1b[38;2;255;200;0mhi\x1b[0m)"
    assert Primitive(PrimitiveKind.BOOL, True).render().startswith("Bool(\x1b[38;2;200;100;255mtrue")


def test_double_whole_number_renders_without_fraction():
    assert "(\x1b[38;2;200;255;175m1\x1b[0m)" in Primitive(PrimitiveKind.DOUBLE, 1.0).render()


def test_float_is_rounded_to_single_precision_but_renders_short():
    prim = Primitive(PrimitiveKind.FLOAT, 0.1)
    assert prim.value != 0.1
    assert "0.1\x1b[0m" in prim.render()


@pytest.mark.parametrize(
    "kind, value",
    [
        (PrimitiveKind.BYTE, 256),
        (PrimitiveKind.BYTE, -1),
        (PrimitiveKind.INT, 2**31),
        (PrimitiveKind.USHORT, 2**16),
        (PrimitiveKind.ULONG, -1),
        (PrimitiveKind.FLOAT, 1e300),
    ],
)
def test_out_of_range_primitives_rejected(kind, value):
    with pytest.raises(ValueError):
        Primitive(kind, value)


def test_wrong_primitive_value_types_rejected():
    with pytest.raises(TypeError):
        Primitive(PrimitiveKind.INT, True)
    with pytest.raises(TypeError):
        Primitive(PrimitiveKind.STRING, 3)
    with pytest.raises(ValueError):
        Primitive(PrimitiveKind.NULL, 1)


def test_group_token_stores_tuple_and_compares_equal():
    inner = [Token(TokenKind.LIT, "x"), Token(TokenKind.SYM, ";")]
    group = Token(TokenKind.GRP, inner)
    assert group.value == tuple(inner)
    assert group == Token(TokenKind.GRP, tuple(inner))


def test_group_render_nests_children():
    group = Token(TokenKind.GRP, [Token(TokenKind.OPR, 0)])
    assert group.render() == "Grp([Opr(\x1b[38;2;255;100;50m+\x1b[0m)])"


def test_type_token_render_uses_old_names():
    assert "string" in Token(TokenKind.TYP, 0).render()
    assert "INVALID" in Token(TokenKind.TYP, 12).render()
    assert Token(TokenKind.TYP, 0).render().startswith("Type(")


def test_keyword_token_renders_code():
    assert Token(TokenKind.KWD, Keyword.IF).render() == f"Kwd(\x1b[38;2;200;100;255m{int(Keyword.IF)}\x1b[0m)"


def test_invalid_tokens_rejected():
    with pytest.raises(ValueError):
        Token(TokenKind.SYM, "ab")
    with pytest.raises(ValueError):
        Token(TokenKind.OPR, 256)
    with pytest.raises(TypeError):
        Token(TokenKind.DAT, 5)
    with pytest.raises(TypeError):
        Token(TokenKind.GRP, ["x"])


def test_args_obj_append_and_extend():
    args = ArgsObj()
    null = Token(TokenKind.DAT, Primitive(PrimitiveKind.NULL))
    args.append((int(PrimType.STRING), "path", null))
    args.extend([(int(PrimType.BOOL), "flag", null), (int(PrimType.I32), "n", null)])
    assert len(args) == 3
    assert [name for _, name, _ in args] == ["path", "flag", "n"]


def test_func_and_instance_defaults():
    func = FuncObj("println")
    assert len(func.args) == 0
    assert func.tokens == []
    inst = ClassInstObj(7, 2)
    assert (inst.cid, inst.iid) == (7, 2)
    assert inst.props == PropsObj()