"""Application configuration helpers."""

from __future__ import annotations

from .env import bool_env_var, int_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .firestore import FirestoreConfig, default_firestore_resilience, get_firestore_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .identity import IdentityConfig, get_identity_config
from .logging import configure_logging
from .session import DEFAULT_SESSION_TIMEOUT_MS, SessionConfig, get_session_config
from .storage import (
    MEMORY_DATABASE_URI,
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "DEFAULT_SESSION_TIMEOUT_MS",
    "ConfigurationError",
    "MEMORY_DATABASE_URI",
    "DatabaseConfig",
    "FirestoreConfig",
    "IdentityConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SessionConfig",
    "StorageConfig",
    "bool_env_var",
    "configure_logging",
    "default_firestore_resilience",
    "get_database_config",
    "get_firestore_config",
    "get_identity_config",
    "get_session_config",
    "get_storage_config",
    "int_env_var",
    "require_env_var",
    "require_env_vars",
]
