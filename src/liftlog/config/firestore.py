"""Cloud Firestore configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1/"
FIRESTORE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class FirestoreConfig:
    """Holds Firestore REST configuration values."""

    project_id: str
    id_token: str
    resilience: ResilienceConfig
    database: str = "(default)"

    @property
    def documents_path(self) -> str:
        return f"projects/{self.project_id}/databases/{self.database}/documents"


def default_firestore_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="firestore",
        base_url=FIRESTORE_BASE_URL,
        timeout_seconds=FIRESTORE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


def get_firestore_config(*, resilience: ResilienceConfig | None = None) -> FirestoreConfig:
    values = require_env_vars(("FIRESTORE_PROJECT_ID", "FIRESTORE_ID_TOKEN"))
    return FirestoreConfig(
        project_id=values["FIRESTORE_PROJECT_ID"],
        id_token=values["FIRESTORE_ID_TOKEN"],
        resilience=resilience or default_firestore_resilience(),
    )
