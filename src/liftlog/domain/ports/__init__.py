"""Domain port definitions for adapters."""

from __future__ import annotations

from .identity import IdentityProvider
from .notification import Notifier
from .persistence import WorkoutStore
from .tag_reader import TagListener, TagReader

__all__ = [
    "IdentityProvider",
    "Notifier",
    "TagListener",
    "TagReader",
    "WorkoutStore",
]
