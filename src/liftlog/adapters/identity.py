"""Identity providers for single-user deployments."""

from __future__ import annotations

from dataclasses import dataclass

from liftlog.config import get_identity_config


@dataclass(frozen=True, slots=True)
class StaticIdentityProvider:
    user_id: str

    @classmethod
    def from_env(cls) -> StaticIdentityProvider:
        return cls(user_id=get_identity_config().user_id)
