"""Identity configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_var


@dataclass(frozen=True, slots=True)
class IdentityConfig:
    user_id: str


def get_identity_config(*, user_id: str | None = None) -> IdentityConfig:
    return IdentityConfig(user_id=user_id or require_env_var("LIFTLOG_USER_ID"))
