"""
Factory for creating resource lifecycle adapters.

Usage:
    from resources.factory import create_consumer_group_adapter

    adapter = create_consumer_group_adapter(config.azure)
    state = adapter.create_or_update(config.consumer_groups["CONSUMERGROUP_1"])
    adapter.delete(state.id)
"""

import logging
from typing import Any

from resources.eventhub_consumer_group import EventHubConsumerGroupAdapter
from utils.azure import create_management_client
from utils.config import AzureManagementConfig

logger = logging.getLogger(__name__)


def create_consumer_group_adapter(
    azure_config: AzureManagementConfig | None,
    client: Any | None = None,
) -> EventHubConsumerGroupAdapter:
    """
    Create an Event Hub consumer group adapter.

    Args:
        azure_config: Azure management settings (subscription, credentials, timeout)
        client: Optional pre-built management client to share between adapters

    Returns:
        EventHubConsumerGroupAdapter bound to the management client

    Raises:
        ValueError: If no Azure configuration is available
    """
    if azure_config is None:
        raise ValueError(
            "Azure configuration is required for remote operations. "
            "Set AZURE_SUBSCRIPTION_ID (and optionally AZURE_TENANT_ID)."
        )

    if client is None:
        client = create_management_client(azure_config)

    logger.info(
        f"Creating EventHub consumer group adapter for subscription {azure_config.subscription_id}"
    )
    return EventHubConsumerGroupAdapter(
        client=client,
        default_timeout_seconds=azure_config.operation_timeout_seconds,
    )
