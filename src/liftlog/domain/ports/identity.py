"""Port exposing the authenticated user."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdentityProvider(Protocol):
    @property
    def user_id(self) -> str: ...
