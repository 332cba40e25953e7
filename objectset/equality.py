"""
Deep structural equality for arbitrary Python values.

Two values are deep-equal when they have the same type and the same shape
and content, regardless of object identity:

    * floats and Decimals compare numerically, with NaN equal to NaN
    * mappings compare by key set and then value by value
    * sequences compare element by element
    * built-in sets compare member by member
    * dataclasses and plain objects compare by attribute state
    * any other type that defines __eq__ is trusted to compare itself
    * functions, classes, modules and enum members compare by identity

Self-referencing structures are equal when every back-reference points at
an ancestor at the same depth on both sides.

Mapping keys and set members follow Python's own equality (1, 1.0 and True
are one key), except plain objects and dataclasses, which hash by identity
and are matched by their state instead.
"""
from __future__ import annotations

import dataclasses
import enum
import math
import numbers
import types
from collections.abc import Iterable, Mapping, Sequence, Set
from decimal import Decimal
from typing import Any

# values compared directly with ==
ATOMS = (type(None), int, str, bytes, bytearray)

# values that only ever equal themselves
OPAQUE = (
    type,
    types.ModuleType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    enum.Enum,
)

Ancestors = dict[int, int]


def _private_name(cls: type, name: str) -> str:
    """Applies name mangling to a private slot name."""
    if name.startswith("__") and not name.endswith("__"):
        return f"_{cls.__name__.lstrip('_')}{name}"
    return name


def object_state(value: Any) -> dict[str, Any]:
    """
    Returns the attribute state of a dataclass or plain object as a dict.
    Dataclasses contribute their fields; other objects contribute their
    slots and their __dict__. Attributes that were never set are skipped.
    """
    if dataclasses.is_dataclass(value):
        return {
            f.name: getattr(value, f.name)
            for f in dataclasses.fields(value)
            if hasattr(value, f.name)
        }
    state: dict[str, Any] = {}
    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            attr = _private_name(cls, name)
            if hasattr(value, attr):
                state[attr] = getattr(value, attr)
    state.update(getattr(value, "__dict__", {}))
    return state


def uses_state(value: Any) -> bool:
    """True when value is compared by its attribute state."""
    return dataclasses.is_dataclass(value) or type(value).__eq__ is object.__eq__


def state_key(key: Any) -> bool:
    """
    True for a mapping key or set member that must be matched by its state.
    Such keys hash by identity (or by fields that may), so Python's own
    equality would tell a key apart from its deep copy.
    """
    if isinstance(key, (numbers.Number, str, bytes, tuple, frozenset, *OPAQUE)):
        return False
    return uses_state(key)


def _holds_state(key: Any) -> bool:
    if isinstance(key, (tuple, frozenset)):
        return any(_holds_state(item) for item in key)
    return state_key(key)


def _is_nan(value: Decimal) -> tuple[bool, bool]:
    return value.is_nan(), value.is_snan()


def _equal_floats(a: float, b: float) -> bool:
    return a == b or (math.isnan(a) and math.isnan(b))


def _equal_key(a: Any, b: Any, seen_a: Ancestors, seen_b: Ancestors) -> bool:
    """Key equality: Python's own, except for keys matched by state."""
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(
            _equal_key(x, y, seen_a, seen_b) for x, y in zip(a, b))
    if isinstance(a, frozenset) and isinstance(b, frozenset):
        return _pair_keys(a, b, seen_a, seen_b) is not None
    if state_key(a) or state_key(b):
        return _equal(a, b, seen_a, seen_b)
    return bool(a == b)


def _pair_keys(a_keys: Iterable, b_keys: Iterable, seen_a: Ancestors,
               seen_b: Ancestors) -> list[tuple[Any, Any]] | None:
    """
    Pairs every key of a_keys with an equal key of b_keys, or returns None.
    Keys without state are matched by Python's own set equality; keys with
    state are matched one by one.
    """
    a_keys, b_keys = list(a_keys), list(b_keys)
    if len(a_keys) != len(b_keys):
        return None
    if not any(map(_holds_state, a_keys)) and \
            not any(map(_holds_state, b_keys)):
        return [(k, k) for k in a_keys] if set(a_keys) == set(b_keys) else None
    remaining = b_keys
    pairs = []
    for key in a_keys:
        for i, other in enumerate(remaining):
            if _equal_key(key, other, seen_a, seen_b):
                pairs.append((key, other))
                del remaining[i]
                break
        else:
            return None
    return pairs


def _equal_mappings(a: Mapping, b: Mapping, seen_a: Ancestors,
                    seen_b: Ancestors) -> bool:
    pairs = _pair_keys(a.keys(), b.keys(), seen_a, seen_b)
    return pairs is not None and all(
        _equal(a[key], b[other], seen_a, seen_b) for key, other in pairs)


def _equal_structures(a: Any, b: Any, seen_a: Ancestors,
                      seen_b: Ancestors) -> bool:
    match a:
        case Mapping():
            return _equal_mappings(a, b, seen_a, seen_b)
        case Sequence():
            return len(a) == len(b) and all(
                _equal(x, y, seen_a, seen_b) for x, y in zip(a, b))
        case set() | frozenset():
            return _pair_keys(a, b, seen_a, seen_b) is not None
        case Set():
            return bool(a == b)
        case _ if uses_state(a):
            return _equal_mappings(object_state(a), object_state(b),
                                   seen_a, seen_b)
        case _:
            return bool(a == b)


def _equal(a: Any, b: Any, seen_a: Ancestors, seen_b: Ancestors) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        return _equal_floats(a, b)
    if isinstance(a, complex):
        return _equal_floats(a.real, b.real) and _equal_floats(a.imag, b.imag)
    if isinstance(a, Decimal) and (a.is_nan() or b.is_nan()):
        return _is_nan(a) == _is_nan(b)
    if isinstance(a, ATOMS):
        return a == b
    if isinstance(a, OPAQUE):
        return a is b

    id_a, id_b = id(a), id(b)
    if id_a in seen_a or id_b in seen_b:
        # back-references must point at the same ancestor depth
        return seen_a.get(id_a) == seen_b.get(id_b)
    depth = len(seen_a)
    seen_a[id_a] = depth
    seen_b[id_b] = depth
    try:
        return _equal_structures(a, b, seen_a, seen_b)
    finally:
        del seen_a[id_a]
        del seen_b[id_b]


def deep_equal(a: Any, b: Any) -> bool:
    """
    Returns True if a and b are structurally equivalent.
    Exceptions raised by a value's own __eq__ propagate to the caller.
    """
    return _equal(a, b, {}, {})
