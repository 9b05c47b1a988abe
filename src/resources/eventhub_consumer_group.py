"""
Lifecycle adapter for Azure Event Hub consumer groups.

Every operation is a direct marshal into the `consumer_groups` operations of
`azure.mgmt.eventhub.EventHubManagementClient`:

- create_or_update: PUT the group, then GET it back for its canonical ID and
  refresh state from that read (the PUT response is not trusted for attributes)
- read: GET by identifier; a 404 means the group was removed out of band
- delete: DELETE by identifier; a 404 means it is already gone

The consumer group's identifying attributes (name, namespace, event hub and
resource group) are force-new: changing them means delete and create, never an
in-place update.
"""

import logging
from typing import Any

import logfire
from azure.core.exceptions import AzureError
from azure.mgmt.eventhub.models import ConsumerGroup

from resources.base import ResourceAdapterBase
from resources.cancellation import CancellationToken, run_cancellable
from resources.errors import InvariantViolation, OperationCancelled, RemoteAPIError, is_not_found
from resources.identifiers import ConsumerGroupId
from resources.models import ConsumerGroupConfig, ConsumerGroupState

logger = logging.getLogger(__name__)


class EventHubConsumerGroupAdapter(ResourceAdapterBase[ConsumerGroupConfig, ConsumerGroupState]):
    """Create, read, update and delete Event Hub consumer groups."""

    resource_type = "azurerm_eventhub_consumer_group"

    def __init__(self, client: Any, default_timeout_seconds: float | None = None):
        """
        Initialize the adapter.

        Args:
            client: EventHubManagementClient (or any object exposing `consumer_groups`)
            default_timeout_seconds: Deadline applied when a call gets no token
        """
        super().__init__(client)
        self.default_timeout_seconds = default_timeout_seconds

    @property
    def operations(self) -> Any:
        return self.client.consumer_groups

    def _token(self, token: CancellationToken | None) -> CancellationToken:
        if token is not None:
            return token
        return CancellationToken(timeout_seconds=self.default_timeout_seconds)

    def _call(self, token: CancellationToken, operation: str, func: Any, **kwargs: Any) -> Any:
        remaining = token.remaining()
        if remaining is not None:
            kwargs["timeout"] = remaining
        try:
            return run_cancellable(token, operation, func, **kwargs)
        except OperationCancelled as e:
            raise OperationCancelled(
                operation,
                e.reason,
                name=kwargs["consumer_group_name"],
                resource_group=kwargs["resource_group_name"],
            ) from e

    def create_or_update(
        self, config: ConsumerGroupConfig, token: CancellationToken | None = None
    ) -> ConsumerGroupState:
        token = self._token(token)
        name = config.name
        resource_group = config.resource_group_name

        with logfire.span(
            "consumer_group.create_or_update",
            name=name,
            namespace=config.namespace_name,
            eventhub=config.eventhub_name,
            resource_group=resource_group,
        ):
            logger.info(
                f"Preparing arguments for EventHub Consumer Group {name} "
                f"({resource_group}/{config.namespace_name}/{config.eventhub_name})"
            )

            parameters = ConsumerGroup(user_metadata=config.user_metadata or "")

            try:
                self._call(
                    token,
                    "create_or_update",
                    self.operations.create_or_update,
                    resource_group_name=resource_group,
                    namespace_name=config.namespace_name,
                    event_hub_name=config.eventhub_name,
                    consumer_group_name=name,
                    parameters=parameters,
                )
            except AzureError as e:
                raise RemoteAPIError("create_or_update", name, resource_group, e) from e

            try:
                remote = self._call(
                    token,
                    "get",
                    self.operations.get,
                    resource_group_name=resource_group,
                    namespace_name=config.namespace_name,
                    event_hub_name=config.eventhub_name,
                    consumer_group_name=name,
                )
            except AzureError as e:
                raise RemoteAPIError("get", name, resource_group, e) from e

            identifier = getattr(remote, "id", None)
            if not identifier:
                raise InvariantViolation("Cannot read EventHub Consumer Group ID", name, resource_group)

            logger.info(f"EventHub Consumer Group {name} upserted: {identifier}")

        state = self.read(identifier, token)
        if state is None:
            # The group vanished between the write and the refresh.
            raise InvariantViolation(
                "EventHub Consumer Group disappeared immediately after creation",
                name,
                resource_group,
            )
        return state

    def read(self, identifier: str, token: CancellationToken | None = None) -> ConsumerGroupState | None:
        token = self._token(token)
        cg_id = ConsumerGroupId.parse(identifier)

        with logfire.span(
            "consumer_group.read",
            name=cg_id.name,
            namespace=cg_id.namespace_name,
            eventhub=cg_id.eventhub_name,
            resource_group=cg_id.resource_group,
        ) as span:
            try:
                remote = self._call(
                    token,
                    "get",
                    self.operations.get,
                    resource_group_name=cg_id.resource_group,
                    namespace_name=cg_id.namespace_name,
                    event_hub_name=cg_id.eventhub_name,
                    consumer_group_name=cg_id.name,
                )
            except AzureError as e:
                if is_not_found(e):
                    logger.warning(
                        f"EventHub Consumer Group {cg_id.name} (resource group "
                        f"{cg_id.resource_group}) was not found; removing it from state"
                    )
                    span.set_attribute("found", False)
                    return None
                raise RemoteAPIError("get", cg_id.name, cg_id.resource_group, e) from e

            span.set_attribute("found", True)
            return ConsumerGroupState(
                id=identifier,
                name=cg_id.name,
                namespace_name=cg_id.namespace_name,
                eventhub_name=cg_id.eventhub_name,
                resource_group_name=cg_id.resource_group,
                user_metadata=getattr(remote, "user_metadata", None) or "",
            )

    def delete(self, identifier: str, token: CancellationToken | None = None) -> None:
        token = self._token(token)
        cg_id = ConsumerGroupId.parse(identifier)

        with logfire.span(
            "consumer_group.delete",
            name=cg_id.name,
            namespace=cg_id.namespace_name,
            eventhub=cg_id.eventhub_name,
            resource_group=cg_id.resource_group,
        ):
            try:
                self._call(
                    token,
                    "delete",
                    self.operations.delete,
                    resource_group_name=cg_id.resource_group,
                    namespace_name=cg_id.namespace_name,
                    event_hub_name=cg_id.eventhub_name,
                    consumer_group_name=cg_id.name,
                )
            except AzureError as e:
                if not is_not_found(e):
                    raise RemoteAPIError("delete", cg_id.name, cg_id.resource_group, e) from e
                logger.info(f"EventHub Consumer Group {cg_id.name} already absent")
                return

            logger.info(f"EventHub Consumer Group {cg_id.name} deleted")

    def import_state(self, identifier: str) -> ConsumerGroupState:
        cg_id = ConsumerGroupId.parse(identifier)
        logger.info(f"Importing EventHub Consumer Group {cg_id.name} from {identifier}")
        return ConsumerGroupState(
            id=identifier,
            name=cg_id.name,
            namespace_name=cg_id.namespace_name,
            eventhub_name=cg_id.eventhub_name,
            resource_group_name=cg_id.resource_group,
        )
