"""
Tests for deep equality.
"""
import copy
import enum
import math
from collections import OrderedDict, namedtuple
from decimal import Decimal

import pytest

from objectset import deep_equal
from objectset.equality import object_state, state_key

from .records import Point, Record, Shape, Slotted


class Color(enum.Enum):
    RED = 1
    BLUE = 2


Pair = namedtuple("Pair", "left right")


class TestScalars:
    """Tests for numbers, strings and None."""

    @pytest.mark.parametrize("a, b", [
        (1, 1), ("s", "s"), (b"x", b"x"), (None, None), (2.5, 2.5),
        (0.0, -0.0), (1 + 2j, 1 + 2j), (True, True),
    ])
    def test_equal(self, a, b):
        assert deep_equal(a, b)

    @pytest.mark.parametrize("a, b", [
        (1, 2), (1, 1.0), (1, True), (0, False), ("1", 1), ("a", b"a"),
        (None, 0), (1.0, 1.5),
    ])
    def test_not_equal(self, a, b):
        assert not deep_equal(a, b)

    def test_nan_equals_nan(self):
        """NaN is equal to NaN so that equality stays reflexive."""
        assert deep_equal(math.nan, float("nan"))
        assert deep_equal(complex(math.nan, 1), complex(math.nan, 1))

    def test_custom_eq_is_trusted(self):
        """Types with their own __eq__ compare themselves."""
        assert deep_equal(Decimal("1.0"), Decimal("1.00"))
        assert not deep_equal(Decimal("1"), Decimal("2"))


class TestContainers:
    """Tests for mappings, sequences and sets."""

    def test_dict_key_order(self):
        assert deep_equal({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1})

    def test_dict_differences(self):
        assert not deep_equal({"a": 1}, {"a": 2})
        assert not deep_equal({"a": 1}, {"b": 1})
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})

    def test_dict_keys_use_python_equality(self):
        """Keys that Python treats as the same key match."""
        assert deep_equal({1: "x"}, {1.0: "x"})

    def test_dict_values_are_strict(self):
        assert not deep_equal({"k": 1}, {"k": 1.0})

    def test_mapping_types_must_match(self):
        assert not deep_equal({"a": 1}, OrderedDict(a=1))
        assert deep_equal(OrderedDict(a=1, b=2), OrderedDict(b=2, a=1))

    def test_sequences(self):
        assert deep_equal([1, [2, {"x": (3,)}]], [1, [2, {"x": (3,)}]])
        assert not deep_equal([1, 2], [2, 1])
        assert not deep_equal([1, 2], [1, 2, 3])
        assert not deep_equal([1, 2], (1, 2))

    def test_named_tuples(self):
        assert deep_equal(Pair(1, [2]), Pair(1, [2]))
        assert not deep_equal(Pair(1, 2), (1, 2))

    def test_sets(self):
        assert deep_equal({1, 2, 3}, {3, 2, 1})
        assert not deep_equal({1, 2}, frozenset({1, 2}))
        assert not deep_equal({1, 2}, {1, 3})


class TestObjects:
    """Tests for dataclasses and plain objects."""

    def test_dataclasses(self):
        assert deep_equal(Point(1, 2), Point(1, 2))
        assert not deep_equal(Point(1, 2), Point(2, 1))

    def test_nested_dataclasses(self):
        assert deep_equal(Shape("s", [Point(0, 0)]), Shape("s", [Point(0, 0)]))
        assert not deep_equal(Shape("s", [Point(0, 0)]), Shape("s", []))

    def test_plain_objects_ignore_identity(self):
        assert deep_equal(Record("a", [1]), Record("a", [1]))
        assert not deep_equal(Record("a", [1]), Record("a", [2]))

    def test_stateless_objects(self):
        assert deep_equal(object(), object())

    def test_slots(self):
        """Slot values, including private ones, are compared."""
        assert deep_equal(Slotted(1, "s"), Slotted(1, "s"))
        assert not deep_equal(Slotted(1, "s"), Slotted(1, "t"))

    def test_object_state_of_slots(self):
        assert object_state(Slotted(1, "s")) == {"value": 1, "_Slotted__secret": "s"}

    def test_functions_compare_by_identity(self):
        def f():
            return 1

        def g():
            return 1

        assert deep_equal(f, f)
        assert not deep_equal(f, g)

    def test_enum_members(self):
        assert deep_equal(Color.RED, Color.RED)
        assert not deep_equal(Color.RED, Color.BLUE)

    def test_eq_errors_propagate(self):
        """An exception raised by __eq__ reaches the caller."""
        class Broken:
            def __eq__(self, other):
                raise ValueError("no comparison")

            __hash__ = object.__hash__

        with pytest.raises(ValueError, match="no comparison"):
            deep_equal(Broken(), Broken())


class TestStateKeys:
    """Tests for set members and mapping keys matched by their state."""

    def test_sets_of_records(self):
        assert deep_equal({Record("r")}, {Record("r")})
        assert not deep_equal({Record("r")}, {Record("q")})

    def test_record_matches_its_deep_copy(self):
        members = {Record("r", [1])}
        assert deep_equal(members, copy.deepcopy(members))

    def test_object_keys(self):
        assert deep_equal({object(): 1}, {object(): 1})
        assert not deep_equal({object(): 1}, {object(): 2})

    def test_tuple_keys_holding_records(self):
        assert deep_equal({(Record("r"), 1): "v"}, {(Record("r"), 1.0): "v"})
        assert not deep_equal({(Record("r"), 1): "v"}, {(Record("q"), 1): "v"})

    def test_numeric_members_follow_python_equality(self):
        """Set members 1 and 1.0 are one member, as in a built-in set."""
        assert deep_equal({1}, {1.0})

    def test_state_keys_are_detected(self):
        assert state_key(Record("r"))
        assert state_key(object())
        assert not state_key(1)
        assert not state_key("s")
        assert not state_key((Record("r"),))
        assert not state_key(Color.RED)


class TestDecimalNaN:
    """Decimal NaN is equal to itself, like float NaN."""

    def test_quiet_nan(self):
        assert deep_equal(Decimal("NaN"), Decimal("NaN"))
        assert not deep_equal(Decimal("NaN"), Decimal("1"))

    def test_signaling_nan(self):
        assert deep_equal(Decimal("sNaN"), Decimal("sNaN"))
        assert not deep_equal(Decimal("sNaN"), Decimal("NaN"))


class TestCycles:
    """Tests for self-referencing structures."""

    def test_equal_cycles(self):
        a = []
        a.append(a)
        b = []
        b.append(b)
        assert deep_equal(a, b)

    def test_cycles_of_different_depth(self):
        a = []
        a.append(a)
        c = []
        c.append([c])
        assert not deep_equal(a, c)

    def test_cyclic_records(self):
        a = {"name": "a"}
        a["self"] = a
        b = {"name": "a"}
        b["self"] = b
        assert deep_equal(a, b)
        b["name"] = "b"
        assert not deep_equal(a, b)


class TestRelation:
    """deep_equal is an equivalence relation."""

    VALUES = [
        {"a": [1, 2]}, {"a": [1, 2]}, {"a": [2, 1]}, Point(1, 2),
        Point(1, 2), Record("r"), [math.nan], [math.nan], 1, 1.0,
    ]

    def test_reflexive(self):
        for value in self.VALUES:
            assert deep_equal(value, value)

    def test_symmetric(self):
        for a in self.VALUES:
            for b in self.VALUES:
                assert deep_equal(a, b) == deep_equal(b, a)

    def test_transitive(self):
        for a in self.VALUES:
            for b in self.VALUES:
                for c in self.VALUES:
                    if deep_equal(a, b) and deep_equal(b, c):
                        assert deep_equal(a, c)
