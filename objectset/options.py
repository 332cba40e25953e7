"""
Construction-time options for ObjectSet.
"""
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .copying import deep_copy
from .digest import deep_digest
from .equality import deep_equal


class SetOptions(BaseModel):
    """
    Options fixed for the lifetime of an ObjectSet.

    clone_deep decides whether values are deep-copied on the way in and on
    the way out. copy_on_insert and copy_on_read override either direction
    independently; left as None they follow clone_deep.

    digest, equal and clone are the collaborators used for bucketing,
    in-bucket comparison and defensive copying. digest must give equal
    results for values that equal considers equal.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    clone_deep: bool = True
    copy_on_insert: bool | None = None
    copy_on_read: bool | None = None
    digest: Callable[[Any], str] = Field(default=deep_digest)
    equal: Callable[[Any, Any], bool] = Field(default=deep_equal)
    clone: Callable[[Any], Any] = Field(default=deep_copy)

    @property
    def copies_on_insert(self) -> bool:
        """Effective copy-in policy."""
        if self.copy_on_insert is None:
            return self.clone_deep
        return self.copy_on_insert

    @property
    def copies_on_read(self) -> bool:
        """Effective copy-out policy."""
        if self.copy_on_read is None:
            return self.clone_deep
        return self.copy_on_read
