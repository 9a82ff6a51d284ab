"""Error taxonomy for store adapters."""

from __future__ import annotations


class StoreError(RuntimeError):
    """Base class for store adapter failures."""


class StoreConfigurationError(StoreError):
    """The configured backend cannot be built (unknown backend, missing URL)."""


class RemoteError(StoreError):
    """A network or store failure while creating or reading records.

    The message is safe to show to the user.
    """


class SubscriptionError(RemoteError):
    """The live push channel failed; live updates stop until re-subscribed."""
