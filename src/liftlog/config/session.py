"""Tap-session defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import int_env_var

DEFAULT_SESSION_TIMEOUT_MS = 10 * 60 * 1000


@dataclass(frozen=True, slots=True)
class SessionConfig:
    timeout_ms: int = DEFAULT_SESSION_TIMEOUT_MS


def get_session_config() -> SessionConfig:
    return SessionConfig(
        timeout_ms=int_env_var(
            "LIFTLOG_SESSION_TIMEOUT_MS",
            default=DEFAULT_SESSION_TIMEOUT_MS,
            minimum=1,
        )
    )
