"""Implements a set of arbitrary values compared by deep equality."""
from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableSet
from typing import Any, Self, TypeVar

from .errors import InvalidArgument
from .options import SetOptions

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")

# marks a for_each call without a receiver
_UNBOUND = object()


def _is_iterable(value: Any) -> bool:
    """True for values that can be iterated and are not a single record."""
    if isinstance(value, Mapping):
        return False
    try:
        iter(value)
    except TypeError:
        return False
    return True


class ObjectSet(MutableSet[A]):
    """
    A mutable set whose members are compared by deep structural equality.

    Members are grouped into buckets keyed by their digest; values sharing
    a digest are told apart by a linear scan with the equality function.
    Inserted values are deep-copied and only copies are handed back, unless
    the options say otherwise. Iteration order is not defined.
    """

    def __init__(self, initial: Iterable[A] | None = None, *,
                 clone_deep: bool | None = None,
                 options: SetOptions | None = None):
        if initial is not None and not _is_iterable(initial):
            raise InvalidArgument(initial)
        if options is None:
            options = SetOptions()
        if clone_deep is not None:
            options = options.model_copy(update={"clone_deep": clone_deep})
        self._options = options
        self._buckets: dict[str, list[A]] = {}
        self._size = 0
        for value in () if initial is None else initial:
            self.add(value)

    @property
    def options(self) -> SetOptions:
        """The options this set was built with."""
        return self._options

    @property
    def size(self) -> int:
        """Number of members in the set."""
        return self._size

    @property
    def bucket_count(self) -> int:
        """Number of distinct digests currently stored."""
        return len(self._buckets)

    def __len__(self) -> int:
        return self._size

    def _read(self, value: A) -> A:
        return self._options.clone(value) if self._options.copies_on_read \
            else value

    def _find(self, bucket: list[A], value: Any) -> int:
        """Index of the member of bucket deep-equal to value, or -1."""
        equal = self._options.equal
        for i, member in enumerate(bucket):
            if equal(value, member):
                return i
        return -1

    def _insert(self, value: A) -> None:
        candidate = self._options.clone(value) \
            if self._options.copies_on_insert else value
        digest = self._options.digest(candidate)
        bucket = self._buckets.get(digest)
        if bucket is None:
            self._buckets[digest] = [candidate]
            self._size += 1
        elif self._find(bucket, candidate) < 0:
            bucket.append(candidate)
            self._size += 1
            logger.debug("Digest collision on %s: bucket now holds %d members",
                         digest, len(bucket))

    def add(self, value: A, *more: A) -> Self:
        """
        Adds one or more values, skipping any already present.
        Returns the set itself so that calls can be chained.
        """
        self._insert(value)
        for extra in more:
            self._insert(extra)
        return self

    def update(self, *iterables: Iterable[A]) -> Self:
        """Adds every value produced by each iterable."""
        for iterable in iterables:
            for value in iterable:
                self._insert(value)
        return self

    def has(self, value: Any) -> bool:
        """Returns True if a member deep-equal to value exists."""
        bucket = self._buckets.get(self._options.digest(value))
        return bucket is not None and self._find(bucket, value) >= 0

    def __contains__(self, value: Any) -> bool:
        """Allows use of `value in my_set`."""
        return self.has(value)

    def delete(self, value: Any) -> bool:
        """
        Removes the member deep-equal to value.
        Returns True if a member was removed, False if none matched.
        """
        digest = self._options.digest(value)
        bucket = self._buckets.get(digest)
        if bucket is None:
            return False
        index = self._find(bucket, value)
        if index < 0:
            return False
        del bucket[index]
        self._size -= 1
        if not bucket:
            del self._buckets[digest]
            logger.debug("Dropped empty bucket %s", digest)
        return True

    def discard(self, value: Any) -> None:
        """Removes the member deep-equal to value if present."""
        self.delete(value)

    def clear(self) -> Self:
        """Removes every member. Returns the set itself."""
        self._buckets.clear()
        self._size = 0
        logger.debug("Cleared set")
        return self

    def __iter__(self) -> Iterator[A]:
        """Iterates over the members, bucket by bucket."""
        for bucket in self._buckets.values():
            for member in bucket:
                yield self._read(member)

    def values(self) -> Iterator[A]:
        """Iterates over the members."""
        return iter(self)

    def keys(self) -> Iterator[A]:
        """Same as values; keys and values coincide in a set."""
        return self.values()

    def entries(self) -> Iterator[tuple[A, A]]:
        """
        Iterates over (member, member) pairs.
        When copying on read, each half of a pair is a separate copy.
        """
        for bucket in self._buckets.values():
            for member in bucket:
                yield self._read(member), self._read(member)

    def for_each(self, callback: Callable[..., Any],
                 this_arg: Any = _UNBOUND) -> None:
        """
        Calls callback with each member for its side effects.
        If this_arg is given (None included), callback is bound to it as its
        receiver and called as callback(this_arg, member). Without it the
        callback is called plainly, so bound methods and builtins such as
        list.append can be passed directly.
        """
        fn = callback if this_arg is _UNBOUND \
            else functools.partial(callback, this_arg)
        for member in self:
            fn(member)

    def _from_iterable(self, iterable: Iterable[B]) -> ObjectSet[B]:
        """Builds results of set operators with the same options."""
        return ObjectSet(iterable, options=self._options)

    def copy(self) -> ObjectSet[A]:
        """Returns a new set with the same options and members."""
        return self._from_iterable(self)

    def map(self, f: Callable[[A], B]) -> ObjectSet[B]:
        """Applies f to every member, collapsing results that become equal."""
        return self._from_iterable(f(member) for member in self)

    def filter(self, predicate: Callable[[A], bool]) -> ObjectSet[A]:
        """Returns a new set with the members satisfying predicate."""
        return self._from_iterable(m for m in self if predicate(m))

    @classmethod
    def empty(cls, *, options: SetOptions | None = None) -> ObjectSet[A]:
        """Creates an empty ObjectSet."""
        return cls(options=options)

    def to_string(self) -> str:
        """Debug rendering of the members. Not format-stable."""
        return f"ObjectSet([{', '.join(map(repr, self))}])"

    def __repr__(self) -> str:
        return self.to_string()

    __str__ = __repr__
