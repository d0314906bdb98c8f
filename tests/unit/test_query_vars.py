import pytest

from sqlconn.errors import ConnectionInfo, InvalidQueryVarValue, MissingQueryVarValue
from sqlconn.query_vars import (
    Placeholder,
    QueryTemplate,
    find_placeholders,
    is_valid_value,
    substitute_query_vars,
)

NAMES = ["X", "ORDER_DIRECTION", "a.b-c", "col_1"]


def test_template_without_placeholders_is_unchanged():
    sql = "SELECT *\n  FROM t -- comment\n WHERE a = ? AND b = '{not a var}'"
    assert substitute_query_vars(sql, {"X": "1"}) == sql
    assert substitute_query_vars(sql, {}) == sql


def test_substitution_is_idempotent_without_placeholders():
    sql = "SELECT 1 FROM dual"
    once = substitute_query_vars(sql, {})
    assert substitute_query_vars(once, {}) == once == sql


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("default", ["ASC", "a > 1", "x:y", "?", "1.5"])
def test_default_used_when_no_value_supplied(name, default):
    assert substitute_query_vars("{$" + name + "=" + default + "}", {}) == default


@pytest.mark.parametrize("name", NAMES)
def test_missing_value_without_default(name):
    with pytest.raises(MissingQueryVarValue) as excinfo:
        substitute_query_vars("{$" + name + "}", {})
    assert excinfo.value.name == name


def test_empty_default_counts_as_missing():
    with pytest.raises(MissingQueryVarValue, match='"DIR"'):
        substitute_query_vars("ORDER BY y {$DIR=}", {})


@pytest.mark.parametrize("name", NAMES)
@pytest.mark.parametrize("value", ["--", "ASC -- drop", "a--b"])
def test_double_dash_in_value_is_rejected(name, value):
    with pytest.raises(InvalidQueryVarValue) as excinfo:
        substitute_query_vars("{$" + name + "=}", {name: value})
    assert excinfo.value.name == name
    assert excinfo.value.sql == "{$" + name + "=}"


@pytest.mark.parametrize("value", ["x; DROP TABLE t", "'quoted'", "a,b", "", "é", "DESC\n", "a\r"])
def test_value_outside_allowed_chars_is_rejected(value):
    with pytest.raises(InvalidQueryVarValue):
        substitute_query_vars("{$X=ASC}", {"X": value})


def test_non_string_value_is_rejected():
    with pytest.raises(InvalidQueryVarValue):
        substitute_query_vars("LIMIT {$N=10}", {"N": 5})


def test_supplied_value_wins_over_default():
    assert substitute_query_vars("{$X=A}", {"X": "B"}) == "B"


def test_multiple_placeholders_resolve_independently():
    sql = "SELECT * FROM t_{$SUFFIX=main} ORDER BY {$COL} {$DIR=ASC}"
    expected = "SELECT * FROM t_main ORDER BY created_at DESC"
    assert substitute_query_vars(sql, {"COL": "created_at", "DIR": "DESC"}) == expected
    assert substitute_query_vars(sql, {"DIR": "DESC", "COL": "created_at"}) == expected


def test_order_by_scenario():
    sql = "SELECT * FROM t WHERE x > ? ORDER BY y {$DIR=ASC}"
    assert substitute_query_vars(sql, {}).endswith("ORDER BY y ASC")
    assert substitute_query_vars(sql, {"DIR": "DESC"}).endswith("ORDER BY y DESC")


def test_default_is_trimmed_and_whitespace_before_equals_allowed():
    assert substitute_query_vars("[{$X =  ASC }]", {}) == "[ASC]"


def test_brace_group_with_invalid_default_is_left_alone():
    sql = "SELECT '{$X=a;b}'"
    assert substitute_query_vars(sql, {}) == sql


def test_error_carries_connection_info():
    info = ConnectionInfo(engine="pgsql", host="db", dbname="app", has_username=True, has_password=True)
    with pytest.raises(MissingQueryVarValue) as excinfo:
        substitute_query_vars("SELECT {$X}", {}, info)
    message = str(excinfo.value)
    assert excinfo.value.info is info
    assert message.startswith("Pgsql connection error (host=db; dbname=app; user=[defined]; password=[defined])")
    assert "ERROR-QUERY: SELECT {$X}" in message


def test_find_placeholders():
    found = find_placeholders("{$A} {$B=} {$C=x y} {$D = 1}")
    assert found == [
        Placeholder(name="A", raw_default=None, has_equals=False),
        Placeholder(name="B", raw_default=None, has_equals=True),
        Placeholder(name="C", raw_default="x y", has_equals=True),
        Placeholder(name="D", raw_default=" 1", has_equals=True),
    ]
    assert found[3].default == "1"


def test_query_template_render():
    template = QueryTemplate("SELECT * FROM t ORDER BY y {$DIR=ASC}")
    assert [p.name for p in template.placeholders] == ["DIR"]
    assert template.render({"DIR": "DESC"}) == "SELECT * FROM t ORDER BY y DESC"
    assert str(template) == template.sql


def test_is_valid_value():
    assert is_valid_value("created_at DESC")
    assert is_valid_value("a <= 10")
    assert not is_valid_value("a--")
    assert not is_valid_value(None)
