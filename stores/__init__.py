"""Store adapters for persisting and reading marks records.

Two interchangeable backends implement the `StoreAdapter` interface:
`RestStore` (pull-based, talks to the students REST API) and
`FirestoreStore` (push-based, live subscription on a Firestore collection).
`build_store` selects one from an explicit `StoreConfig`.
"""

from __future__ import annotations

from .base import CreatedRecord, StoreAdapter, supports_ranking, supports_subscription
from .config import StoreConfig
from .errors import RemoteError, StoreConfigurationError, StoreError, SubscriptionError


def build_store(config: StoreConfig) -> StoreAdapter:
    """Build the adapter named by `config.backend`.

    The Google client libraries are only imported when the Firestore backend
    is selected.
    """

    if config.backend == "firestore":
        from .firestore import FirestoreStore

        return FirestoreStore(config)
    if config.backend == "rest":
        from .rest import RestStore

        return RestStore(config)
    raise StoreConfigurationError(f"Unknown store backend {config.backend!r}.")


__all__ = [
    "CreatedRecord",
    "RemoteError",
    "StoreAdapter",
    "StoreConfig",
    "StoreConfigurationError",
    "StoreError",
    "SubscriptionError",
    "build_store",
    "supports_ranking",
    "supports_subscription",
]
