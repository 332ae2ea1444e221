"""Tests for metadata value rendering"""

import array
import io
import threading
import uuid
import weakref
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import PurePosixPath

import pytest

from universal_logger.formatters.value_formatter import (
    ERROR_INDENT,
    UNDEFINED,
    ValueKind,
    classify,
    render,
    to_jsonable,
)


class Color(Enum):
    RED = 1


@dataclass
class Point:
    x: int
    y: int


class Money:
    def __init__(self, amount):
        self.amount = amount

    def __str__(self):
        return f"${self.amount}"


class Broken:
    def __str__(self):
        raise RuntimeError("cannot render")


class TestScalars:
    """Test primitives and special scalar values."""

    def test_nullish(self):
        assert render(None) == "null"
        assert render(UNDEFINED) == "undefined"

    def test_primitives(self):
        assert render(42) == "42"
        assert render(2 ** 70) == str(2 ** 70)
        assert render(1.5) == "1.5"
        assert render(True) == "true"
        assert render("hi") == '"hi"'

    def test_enum_and_decimal(self):
        assert render(Color.RED) == "Color.RED"
        assert render(Decimal("1.10")) == "1.10"

    def test_dates_paths_and_ids(self):
        assert render(datetime(2023, 12, 25, 12, 0, 0)) == "2023-12-25T12:00:00"
        assert render(PurePosixPath("/var/log/app.log")) == "/var/log/app.log"
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert render(value) == "12345678-1234-5678-1234-567812345678"


class TestCollections:
    """Test maps, sets and arrays."""

    def test_empty_map_and_set(self):
        assert render(OrderedDict()) == "Map(0)"
        assert render(set()) == "Set(0)"

    def test_map_entries(self):
        assert render({1: "a", 2: "b"}) == 'Map(\n    1 => "a",\n    2 => "b"\n  )'

    def test_set_entries(self):
        assert render(frozenset([1])) == "Set(\n    1\n  )"

    def test_list_as_pretty_json(self):
        assert render([1, 2]) == "[\n      1,\n      2\n    ]"
        assert render([]) == "[]"

    def test_plain_dict_as_pretty_json(self):
        assert render({"a": 1}) == '{\n      "a": 1\n    }'
        assert render({}) == "{}"

    def test_circular_list(self):
        items = [1]
        items.append(items)
        assert "[Circular]" in render(items)

    def test_circular_map(self):
        mapping = OrderedDict()
        mapping["self"] = mapping
        assert "[Circular Map]" in render(mapping)


class TestBinary:
    """Test typed arrays and raw buffers."""

    def test_typed_arrays(self):
        assert render(array.array("i", [1, 2])) == "Int32Array(1, 2)"
        assert render(array.array("d", [0.5])) == "Float64Array(0.5)"
        assert render(array.array("B", [7])) == "Uint8Array(7)"

    def test_buffers(self):
        assert render(b"abc") == "bytes(3)"
        assert render(bytearray(4)) == "bytearray(4)"
        assert render(memoryview(b"ab")) == "memoryview(2)"


class TestObjects:
    """Test objects, functions and opaque values."""

    def test_dataclass(self):
        assert render(Point(1, 2)) == '{\n      "x": 1,\n      "y": 2\n    }'

    def test_custom_str(self):
        assert render(Money(5)) == "$5"

    def test_functions(self):
        assert render(len) == "[Function: len]"
        assert render(lambda: None) == "[Function: anonymous]"

    def test_opaque(self):
        assert render(weakref.WeakSet()) == "[WeakSet]"

    def test_host_values(self):
        assert render(threading.Event()) == "Event(set=False)"
        assert render(io.BytesIO(b"abc")) == "BytesIO(3 bytes)"

    def test_broken_str_never_raises(self):
        assert render(Broken()) == "[Broken]"

    def test_exception_with_traceback(self):
        try:
            raise ValueError("bad input")
        except ValueError as e:
            rendered = render(e)

        lines = rendered.split(f"\n{ERROR_INDENT}")
        assert lines[0] == "Traceback (most recent call last):"
        assert lines[-1] == "ValueError: bad input"

    def test_exception_without_traceback(self):
        assert render(KeyError("missing")) == "KeyError: 'missing'"


class TestClassify:
    """Test value kind classification."""

    def test_kinds(self):
        assert classify(None) is ValueKind.SCALAR
        assert classify("text") is ValueKind.SCALAR
        assert classify([]) is ValueKind.STRUCTURED
        assert classify({"a": 1}) is ValueKind.STRUCTURED
        assert classify(b"") is ValueKind.BINARY
        assert classify(len) is ValueKind.OPAQUE
        assert classify(ValueError()) is ValueKind.CUSTOM


class TestToJsonable:
    """Test JSON conversion of nested values."""

    def test_nested(self):
        data = {"point": Point(1, 2), "when": datetime(2023, 1, 1), "tags": {"a"}}
        assert to_jsonable(data) == {
            "point": {"x": 1, "y": 2},
            "when": "2023-01-01T00:00:00",
            "tags": ["a"],
        }

    def test_circular(self):
        data = {}
        data["self"] = data
        assert to_jsonable(data) == {"self": "[Circular]"}

    def test_non_finite_floats(self):
        assert to_jsonable({"nan": float("nan"), "inf": float("inf"), "ok": 1.5}) == {
            "nan": None,
            "inf": None,
            "ok": 1.5,
        }

    def test_non_finite_float_keys(self):
        assert to_jsonable({float("inf"): 1}) == {"Infinity": 1}

    def test_huge_int(self):
        converted = to_jsonable({"big": 10 ** 5000, "small": 7})
        assert isinstance(converted["big"], str)
        assert converted["small"] == 7
        assert not render(10 ** 5000).startswith("[int]")


def _raised(error):
    try:
        raise error
    except Exception as e:
        return e


class TestDeterminism:
    """Rendering the same value twice gives the same text."""

    @pytest.mark.parametrize(
        "value",
        [
            OrderedDict([("b", 2), ("a", [1, {"x": None}])]),
            {3, 1, 2},
            frozenset(["x", "y"]),
            Point(1, 2),
            Money(7),
            _raised(ValueError("bad input")),
            array.array("h", [-1, 0, 1]),
            {"nested": {"list": [1, 2.5, "s"], "when": datetime(2023, 1, 1)}},
        ],
        ids=["map", "set", "frozenset", "dataclass", "custom-str", "exception", "typed-array", "dict"],
    )
    def test_render_is_repeatable(self, value):
        assert render(value) == render(value)
        assert classify(value) is classify(value)
