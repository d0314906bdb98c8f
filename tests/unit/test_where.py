import pytest

from sqlconn.types import ParamType
from sqlconn.where import ColumnWhere, Condition, OrWhere, RawWhere, format_where, quote_literal


def test_empty_specs_render_nothing():
    assert format_where(None) == ""
    assert format_where(OrWhere([])) == ""
    assert format_where(ColumnWhere({})) == ""
    assert format_where(RawWhere("   ")) == ""


def test_or_list_joins_with_or():
    assert format_where(OrWhere(["a=1", "b=2"])) == " WHERE a=1 OR b=2"
    assert format_where(OrWhere(("a=1",))) == " WHERE a=1"


def test_raw_string_gets_where_prefix():
    assert format_where(RawWhere("status = 'x'")) == " WHERE status = 'x'"


def test_raw_string_with_where_is_not_doubled():
    assert format_where(RawWhere("WHERE status='x'")) == " WHERE status='x'"
    assert format_where(RawWhere("  where status='x'  ")) == " where status='x'"


def test_boolean_rendered_as_integer():
    assert format_where(ColumnWhere({"col": [True]})) == " WHERE (col=1)"
    assert format_where(ColumnWhere({"col": False})) == " WHERE (col=0)"


def test_numbers_rendered_verbatim():
    assert format_where(ColumnWhere({"a": 5, "b": Condition(2.5)})) == " WHERE (a=5) OR (b=2.5)"


def test_combinator_precedes_its_column():
    where = ColumnWhere(
        {
            "a": Condition(1, combinator="AND"),
            "b": Condition(2, combinator="and"),
            "c": (3,),
        }
    )
    assert format_where(where) == " WHERE (a=1) AND (b=2) OR (c=3)"


def test_unknown_combinator_rejected():
    with pytest.raises(ValueError, match="Unsupported WHERE combinator"):
        format_where(ColumnWhere({"a": 1, "b": Condition(2, combinator="; DROP")}))


def test_strings_are_quoted():
    assert format_where(ColumnWhere({"name": "O'Brien"})) == " WHERE (name='O''Brien')"


def test_question_mark_is_left_as_bind_marker():
    # Resolved ambiguity: only a value *equal* to the bind marker is emitted raw.
    # Any other string goes through quoting.
    assert format_where(ColumnWhere({"id": "?"})) == " WHERE (id=?)"
    assert format_where(ColumnWhere({"id": "?x"})) == " WHERE (id='?x')"


def test_dialect_placeholders_are_left_raw():
    where = ColumnWhere({"id": "%s", "name": "?"})
    assert format_where(where, placeholders=("?", "%s")) == " WHERE (id=%s) OR (name=?)"


def test_explicit_type_is_passed_to_quote():
    calls = []

    def fake_quote(value, param_type=None):
        calls.append((value, param_type))
        return f"<{value}>"

    where = ColumnWhere({"n": ("42", ParamType.INT), "s": Condition("x", "str", "AND")})
    assert format_where(where, quote=fake_quote) == " WHERE (n=<42>) AND (s=<x>)"
    assert calls == [("42", ParamType.INT), ("x", ParamType.STR)]


def test_condition_tuple_length_checked():
    with pytest.raises(ValueError, match="1 to 3 items"):
        format_where(ColumnWhere({"a": ()}))


def test_unknown_spec_type_rejected():
    with pytest.raises(TypeError):
        format_where("status = 'x'")


def test_quote_literal():
    assert quote_literal(None) == "NULL"
    assert quote_literal("it's") == "'it''s'"
    assert quote_literal(b"\x01\xff") == "X'01ff'"
    assert quote_literal("7", ParamType.INT) == "7"
    assert quote_literal(1, ParamType.STR) == "'1'"
    assert quote_literal("x", ParamType.NULL) == "NULL"
