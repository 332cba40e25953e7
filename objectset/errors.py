"""
Error raised by the ObjectSet container.
"""
from typing import Any


class InvalidArgument(TypeError):
    """
    Raised by the ObjectSet constructor when the initial collection
    is neither None nor an iterable of values.
    """

    def __init__(self, argument: Any):
        self.argument = argument
        super().__init__(
            "ObjectSet constructor received a non iterable argument: "
            f"{type(argument).__name__}"
        )
