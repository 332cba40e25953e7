"""
Deterministic digests for arbitrary Python values.

The goal:
    - compute a fixed-length hex digest for any value, including
      dicts, lists, dataclasses and plain objects
    - deep-equal values (see equality.deep_equal) always produce the
      same digest; different values may collide
    - digests of values built only from numbers, strings, bytes and
      containers are reproducible across processes

Values are walked recursively and fed to a hashlib hasher as a stream of
tagged tokens. Unordered containers (mappings, sets) are digested item by
item and the item digests are sorted before being fed, so their iteration
order does not matter.

Mapping keys and set members are encoded in "key mode": Python's own
equality decides whether two keys are the same (1, 1.0 and True are one
key), so numbers are encoded by hash(), which Python keeps consistent
across numeric types. Dataclasses and plain objects hash by identity, so
as keys they are encoded by their state like any other value.
"""
from __future__ import annotations

import hashlib
import numbers
from collections.abc import Mapping, Sequence, Set
from decimal import Decimal
from typing import Any, Callable

from .equality import ATOMS, OPAQUE, object_state, state_key, uses_state

DEFAULT_ALGORITHM = "sha256"


def _type_tag(value: Any) -> str:
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def _float_token(value: float) -> str:
    if value != value:  # NaN
        return "nan"
    if value == 0:
        return "0"
    return float.__repr__(value)


class _Digester:
    """Walks one value, tracking the ancestors currently being encoded."""

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        self.ancestors: dict[int, int] = {}

    @staticmethod
    def _token(h: hashlib._Hash, text: str) -> None:
        data = text.encode("utf-8", "surrogatepass")
        h.update(f"{len(data)}:".encode("ascii"))
        h.update(data)

    @staticmethod
    def _raw(h: hashlib._Hash, data: bytes) -> None:
        h.update(f"{len(data)}:".encode("ascii"))
        h.update(data)

    def _sub_digest(self, feed: Callable[[hashlib._Hash], None]) -> bytes:
        """Digests one item of an unordered container on its own hasher."""
        h = hashlib.new(self.algorithm)
        feed(h)
        return h.digest()

    def _feed_unordered(self, h: hashlib._Hash, parts: list[bytes]) -> None:
        self._token(h, str(len(parts)))
        for part in sorted(parts):
            h.update(part)

    def _feed_key(self, h: hashlib._Hash, key: Any) -> None:
        match key:
            case numbers.Number():
                self._token(h, f"n{hash(key)}")
            case str():
                self._token(h, "s")
                self._token(h, key)
            case bytes():
                self._token(h, "b")
                self._raw(h, key)
            case tuple():
                self._token(h, f"t{len(key)}")
                for item in key:
                    self._feed_key(h, item)
            case frozenset():
                self._token(h, "f")
                self._feed_unordered(h, [
                    self._sub_digest(lambda sub, k=item: self._feed_key(sub, k))
                    for item in key
                ])
            case _ if state_key(key):
                self._token(h, "o")
                self._feed(h, key)
            case _:
                self._token(h, f"h{hash(key)}")

    def _feed_mapping(self, h: hashlib._Hash, mapping: Mapping) -> None:
        def pair(sub: hashlib._Hash, key: Any, value: Any) -> None:
            self._feed_key(sub, key)
            self._feed(sub, value)

        self._feed_unordered(h, [
            self._sub_digest(lambda sub, k=key, v=value: pair(sub, k, v))
            for key, value in mapping.items()
        ])

    def _feed_structure(self, h: hashlib._Hash, value: Any) -> None:
        match value:
            case Mapping():
                self._feed_mapping(h, value)
            case Sequence():
                self._token(h, str(len(value)))
                for item in value:
                    self._feed(h, item)
            case set() | frozenset():
                self._feed_unordered(h, [
                    self._sub_digest(lambda sub, k=item: self._feed_key(sub, k))
                    for item in value
                ])
            case Set():
                self._feed_unordered(h, [
                    self._sub_digest(lambda sub, v=item: self._feed(sub, v))
                    for item in value
                ])
            case _ if uses_state(value):
                self._feed_mapping(h, object_state(value))
            case _:
                # trusted __eq__: equal values share hash() when hashable
                try:
                    self._token(h, f"h{hash(value)}")
                except TypeError:
                    pass

    def _feed(self, h: hashlib._Hash, value: Any) -> None:
        self._token(h, _type_tag(value))
        if isinstance(value, float):
            self._token(h, _float_token(value))
            return
        if isinstance(value, complex):
            self._token(h, _float_token(value.real))
            self._token(h, _float_token(value.imag))
            return
        if isinstance(value, Decimal) and value.is_nan():
            self._token(h, "snan" if value.is_snan() else "nan")
            return
        if isinstance(value, ATOMS):
            match value:
                case None:
                    pass
                case int():
                    self._token(h, int.__repr__(value))
                case str():
                    self._token(h, value)
                case _:
                    self._raw(h, bytes(value))
            return
        if isinstance(value, OPAQUE):
            self._token(h, f"id{id(value)}")
            return

        key = id(value)
        if key in self.ancestors:
            self._token(h, f"ref{self.ancestors[key]}")
            return
        self.ancestors[key] = len(self.ancestors)
        try:
            self._feed_structure(h, value)
        finally:
            del self.ancestors[key]

    def digest(self, value: Any) -> str:
        h = hashlib.new(self.algorithm)
        self._feed(h, value)
        return h.hexdigest()


def deep_digest(value: Any, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute a deterministic digest of any value.

    Returns:
        hex digest string (algorithm: sha256 by default)
    """
    return _Digester(algorithm).digest(value)


__all__ = ["deep_digest", "DEFAULT_ALGORITHM"]
