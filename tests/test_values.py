"""
Tests for value classification.
"""

from collections import OrderedDict

from uritpl.values import (
    ValueKind,
    classify,
    defined_items,
    defined_pairs,
    is_undefined,
    normalize,
    to_text,
)


class TestUndefined:
    """Test undefined-value detection."""

    def test_none(self):
        assert is_undefined(None)

    def test_empty_collections(self):
        assert is_undefined([])
        assert is_undefined(())
        assert is_undefined({})

    def test_all_undefined_contents(self):
        assert is_undefined([None, None])
        assert is_undefined({"a": None, "b": []})
        assert is_undefined([[], {"x": None}])

    def test_defined(self):
        assert not is_undefined("")
        assert not is_undefined(0)
        assert not is_undefined(False)
        assert not is_undefined([None, ""])
        assert not is_undefined({"a": None, "b": "x"})


class TestClassify:
    """Test value shapes."""

    def test_kinds(self):
        assert classify(None) is ValueKind.UNDEFINED
        assert classify("x") is ValueKind.SCALAR
        assert classify(42) is ValueKind.SCALAR
        assert classify(b"x") is ValueKind.SCALAR
        assert classify(["x"]) is ValueKind.SEQUENCE
        assert classify({"k": "v"}) is ValueKind.MAPPING

    def test_to_text(self):
        assert to_text("s") == "s"
        assert to_text(True) == "true"
        assert to_text(False) == "false"
        assert to_text(12) == "12"
        assert to_text(1.5) == "1.5"
        assert to_text(b"caf\xc3\xa9") == "café"

    def test_defined_items(self):
        assert defined_items(["a", None, [], "b"]) == ["a", "b"]

    def test_defined_pairs_keep_order(self):
        pairs = defined_pairs(OrderedDict([("b", "1"), ("a", None), (3, "x")]))
        assert pairs == [("b", "1"), ("3", "x")]

    def test_normalize_generator(self):
        value = normalize(x for x in "ab")
        assert value == ["a", "b"]

    def test_normalize_keeps_others(self):
        data = {"a": 1}
        assert normalize(data) is data
        items = ("a",)
        assert normalize(items) is items
        assert normalize("text") == "text"

    def test_normalize_nested_generators(self):
        value = normalize(["a", (x for x in "bc")])
        assert value == ["a", ["b", "c"]]
        data = normalize({"k": (x for x in "ab")})
        assert data == {"k": ["a", "b"]}

    def test_normalize_keeps_nested_lists(self):
        items = ["a", ["b"], {"k": "v"}]
        assert normalize(items) is items
