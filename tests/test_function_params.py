import pytest

from sqlpage_web.function_params import (
    FunctionParam,
    FunctionSignature,
    ParamKind,
    as_sql,
    parse_param,
)
from sqlpage_web.http_fetch_request import parse_fetch_request


def test_as_sql_null():
    assert as_sql(None) == "NULL"


def test_as_sql_escapes_quotes():
    assert as_sql("it's") == "'it''s'"


def test_as_sql_round_trip_shape():
    rendered = as_sql("a'b'c")
    assert rendered.startswith("'") and rendered.endswith("'")
    assert rendered[1:-1].replace("''", "'") == "a'b'c"


def test_describe_and_str():
    sig = FunctionSignature(
        "fetch", (FunctionParam("url"), FunctionParam("method", ParamKind.OPTIONAL))
    )
    assert str(sig) == "sqlpage.fetch"
    assert sig.describe() == "sqlpage.fetch(url, method)"


def test_describe_without_params():
    assert FunctionSignature("random_string").describe() == "sqlpage.random_string()"


def test_bind_required():
    sig = FunctionSignature("f", (FunctionParam("url"),))
    assert sig.bind(["x"]) == {"url": "x"}


@pytest.mark.parametrize("args", [[], [None]])
def test_bind_required_null_fails(args):
    sig = FunctionSignature("f", (FunctionParam("url"),))
    with pytest.raises(ValueError, match="Invalid value for parameter url") as info:
        sig.bind(args)
    assert str(info.value.__cause__) == "Unexpected NULL value"


def test_bind_optional_missing_gives_none():
    sig = FunctionSignature(
        "f", (FunctionParam("a"), FunctionParam("b", ParamKind.OPTIONAL))
    )
    assert sig.bind(["x"]) == {"a": "x", "b": None}


def test_bind_list_drops_nulls():
    sig = FunctionSignature("f", (FunctionParam("items", ParamKind.LIST),))
    assert sig.bind(["a", None, "b"]) == {"items": ["a", "b"]}


def test_bind_optional_list_keeps_nulls():
    sig = FunctionSignature("f", (FunctionParam("items", ParamKind.OPTIONAL_LIST),))
    assert sig.bind(["a", None, "b"]) == {"items": ["a", None, "b"]}


def test_bind_too_many_arguments():
    sig = FunctionSignature("f", (FunctionParam("a"),))
    with pytest.raises(ValueError, match="Too many arguments. Remove extra argument 'y'"):
        sig.bind(["x", "y"])


def test_bind_too_many_null_argument():
    sig = FunctionSignature("f", ())
    with pytest.raises(ValueError, match="Remove extra argument NULL"):
        sig.bind([None])


def test_bind_parsed():
    sig = FunctionSignature("f", (FunctionParam("n", ParamKind.PARSED, int),))
    assert sig.bind(["42"]) == {"n": 42}


def test_bind_parsed_invalid():
    sig = FunctionSignature("f", (FunctionParam("n", ParamKind.PARSED, int),))
    with pytest.raises(ValueError, match="Invalid value for parameter n") as info:
        sig.bind(["abc"])
    assert 'Unable to parse "abc" as int' == str(info.value.__cause__)


def test_parse_param_null():
    with pytest.raises(ValueError, match="Unexpected NULL value"):
        parse_param(None, int)


def test_parse_param_with_fetch_request():
    request = parse_param("http://example.com", parse_fetch_request)
    assert request.url == "http://example.com"


def test_parse_param_wraps_converter_errors():
    with pytest.raises(ValueError, match="as parse_fetch_request") as info:
        parse_param("{}", parse_fetch_request)
    assert isinstance(info.value.__cause__, ValueError)


def test_parsed_param_requires_converter():
    with pytest.raises(ValueError, match="needs a converter"):
        FunctionParam("n", ParamKind.PARSED)