"""
Resource lifecycle adapters for EvGroup.

This package contains the declarative resource adapters that translate a
typed configuration into create/read/update/delete calls against the Azure
management API.
"""

from .cancellation import CancellationToken
from .errors import (
    InvariantViolation,
    MalformedIdentifier,
    OperationCancelled,
    RemoteAPIError,
    ResourceError,
    ValidationError,
)
from .eventhub_consumer_group import EventHubConsumerGroupAdapter
from .identifiers import ConsumerGroupId
from .models import ConsumerGroupConfig, ConsumerGroupState, requires_replacement

__all__ = [
    "CancellationToken",
    "ConsumerGroupConfig",
    "ConsumerGroupId",
    "ConsumerGroupState",
    "EventHubConsumerGroupAdapter",
    "InvariantViolation",
    "MalformedIdentifier",
    "OperationCancelled",
    "RemoteAPIError",
    "ResourceError",
    "ValidationError",
    "requires_replacement",
]
