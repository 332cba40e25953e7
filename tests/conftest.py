"""
Shared fixtures for objectset tests.
"""
import pytest

from objectset import ObjectSet, SetOptions


@pytest.fixture
def abc_set():
    """Set built from three single-key records."""
    return ObjectSet([{"a": "a"}, {"b": "b"}, {"c": "c"}])


@pytest.fixture
def colliding_options():
    """Options whose digest sends every value to one bucket."""
    return SetOptions(digest=lambda value: "collision")
