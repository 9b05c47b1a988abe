"""
Error types for resource lifecycle adapters.

Adapters raise these to the caller without local recovery. Messages carry the
resource name and resource group so an operator can find the object.
"""

from typing import Any

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError


class ResourceError(Exception):
    """Base error for all resource lifecycle failures."""


class ValidationError(ResourceError, ValueError):
    """A declared attribute is malformed; raised before any network call."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class MalformedIdentifier(ResourceError, ValueError):
    """A resource identifier cannot be decomposed into its expected segments."""

    def __init__(self, identifier: str, reason: str):
        super().__init__(f"Malformed resource identifier {identifier!r}: {reason}")
        self.identifier = identifier
        self.reason = reason


class RemoteAPIError(ResourceError):
    """The management API returned a failure other than not-found."""

    def __init__(
        self,
        operation: str,
        name: str,
        resource_group: str,
        cause: BaseException | None = None,
    ):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Error issuing {operation} request for EventHub Consumer Group "
            f"{name!r} (resource group {resource_group!r}){detail}"
        )
        self.operation = operation
        self.name = name
        self.resource_group = resource_group
        self.cause = cause

    @property
    def status_code(self) -> int | None:
        """HTTP status of the underlying SDK error, when there was one."""
        return getattr(self.cause, "status_code", None)


class InvariantViolation(ResourceError):
    """The API acknowledged success but the result breaks an expected invariant."""

    def __init__(self, message: str, name: str, resource_group: str):
        super().__init__(f"{message} (consumer group {name!r}, resource group {resource_group!r})")
        self.name = name
        self.resource_group = resource_group


class OperationCancelled(ResourceError):
    """The caller's cancellation token fired before the operation finished."""

    def __init__(
        self,
        operation: str,
        reason: str | None = None,
        name: str | None = None,
        resource_group: str | None = None,
    ):
        target = ""
        if name is not None:
            target = f" for EventHub Consumer Group {name!r} (resource group {resource_group!r})"
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Operation {operation} cancelled{target}{suffix}")
        self.operation = operation
        self.reason = reason
        self.name = name
        self.resource_group = resource_group


def is_not_found(exc: Any) -> bool:
    """Return True when an SDK error means the remote object does not exist."""
    if isinstance(exc, ResourceNotFoundError):
        return True
    if isinstance(exc, HttpResponseError):
        return exc.status_code == 404
    return False
