"""Explicit configuration value passed to store adapter constructors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .errors import StoreConfigurationError

StoreBackend = Literal["rest", "firestore"]

STORE_BACKENDS: tuple[StoreBackend, ...] = ("rest", "firestore")


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Configuration for the backing store.

    Args:
        backend: Which adapter to build.
        api_base_url: Base URL of the REST API (REST backend only).
        timeout_seconds: Per-request timeout for the REST backend.
        collection: Firestore collection holding the records.
        firestore_project: Optional Google Cloud project id.
        firestore_database: Optional Firestore database id.
    """

    backend: StoreBackend = "rest"
    api_base_url: str = "http://localhost:8000/api"
    timeout_seconds: float = 10.0
    collection: str = "students"
    firestore_project: str | None = None
    firestore_database: str | None = None

    def __post_init__(self) -> None:
        """Reject configurations that cannot produce a working adapter."""

        if self.backend not in STORE_BACKENDS:
            raise StoreConfigurationError(
                f"Unknown store backend {self.backend!r}; expected one of {', '.join(STORE_BACKENDS)}."
            )
        if self.backend == "rest" and not self.api_base_url.strip():
            raise StoreConfigurationError("The REST backend requires an API base URL.")
        if self.timeout_seconds <= 0:
            raise StoreConfigurationError("timeout_seconds must be positive.")
        if not self.collection.strip():
            raise StoreConfigurationError("collection must not be empty.")

    @property
    def enforces_marks_range(self) -> bool:
        """Return True when submissions must stay within 0..100."""

        return self.backend == "rest"

    @property
    def supports_subscription(self) -> bool:
        """Return True when the backend pushes live snapshots."""

        return self.backend == "firestore"
