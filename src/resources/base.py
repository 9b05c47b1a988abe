"""
Abstract base class for declarative resource lifecycle adapters.

This module defines the interface every resource kind implements so an
external orchestrator can drive it from a plan:

- create_or_update: idempotent upsert of the declared configuration
- read: refresh local state from the remote object (None when it is gone)
- update: same code path as create_or_update for upsert-style APIs
- delete: idempotent removal
- import_state: adopt an existing remote object by its identifier
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from resources.cancellation import CancellationToken

ConfigT = TypeVar("ConfigT")
StateT = TypeVar("StateT")


class ResourceAdapterBase(ABC, Generic[ConfigT, StateT]):
    """
    Abstract base class for resource lifecycle adapters.

    Adapters are stateless translators between a typed configuration model and
    a remote management API. The API client handle is injected at construction
    and may be shared between adapters; cancellation is passed per call.
    """

    resource_type: str = "resource"

    def __init__(self, client: Any):
        """
        Initialize the adapter.

        Args:
            client: Management API client used for every remote call
        """
        self.client = client

    @abstractmethod
    def create_or_update(self, config: ConfigT, token: CancellationToken | None = None) -> StateT:
        """
        Create the remote object, or update it in place if it already exists.

        Returns:
            Local state re-read from the remote object after the write
        """
        pass

    @abstractmethod
    def read(self, identifier: str, token: CancellationToken | None = None) -> StateT | None:
        """
        Fetch the remote object and project it into local state.

        Returns:
            The refreshed state, or None when the remote object no longer exists
        """
        pass

    @abstractmethod
    def delete(self, identifier: str, token: CancellationToken | None = None) -> None:
        """Remove the remote object; absent objects count as deleted."""
        pass

    @abstractmethod
    def import_state(self, identifier: str) -> StateT:
        """Adopt an existing remote object by passing its identifier through."""
        pass

    def update(self, config: ConfigT, token: CancellationToken | None = None) -> StateT:
        """Apply in-place changes; upsert APIs reuse create_or_update."""
        return self.create_or_update(config, token)
