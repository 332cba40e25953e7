""" Deep copy collaborator for ObjectSet. """
import copy
from typing import TypeVar

A = TypeVar("A")


def deep_copy(value: A) -> A:
    """Returns a copy of value sharing no mutable substructure with it."""
    return copy.deepcopy(value)
