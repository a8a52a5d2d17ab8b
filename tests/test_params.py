import json

from sqlpage_web.params import as_json_str, merge_values, param_map


def test_param_map_brackets_and_repeats():
    pairs = [
        ("my_array[]", "3"),
        ("my_array[]", "Hello World"),
        ("repeated", "1"),
        ("repeated", "2"),
    ]
    assert param_map(pairs) == {
        "my_array": ["3", "Hello World"],
        "repeated": "2",
    }


def test_single_bracket_value_is_list():
    assert param_map([("my_array[]", "5")]) == {"my_array": ["5"]}


def test_empty_input():
    assert param_map([]) == {}


def test_merge_two_singles_keeps_newest():
    assert merge_values("a", "b") == "b"


def test_merge_single_then_list():
    assert merge_values("a", ["b"]) == ["a", "b"]


def test_merge_list_then_single():
    assert merge_values(["a", "b"], "c") == ["a", "b", "c"]


def test_merge_does_not_mutate_inputs():
    old = ["a"]
    new = ["b"]
    merged = merge_values(old, new)
    assert merged == ["a", "b"]
    assert old == ["a"]
    assert new == ["b"]


def test_mixed_plain_and_bracket_keys():
    result = param_map([("x", "1"), ("x[]", "2")])
    assert result == {"x": ["1", "2"]}


def test_as_json_str_single_is_unchanged():
    assert as_json_str("Hello World") == "Hello World"


def test_as_json_str_list_is_compact_json():
    text = as_json_str(["3", "Hello World"])
    assert text == '["3","Hello World"]'
    assert json.loads(text) == ["3", "Hello World"]


def test_as_json_str_round_trip_with_quotes_and_unicode():
    values = ['say "hi"', "gères", ""]
    assert json.loads(as_json_str(values)) == values
    assert "gères" in as_json_str(values)