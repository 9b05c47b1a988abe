"""
Azure credential and management client helpers for EvGroup.

This module provides utilities for:
1. Choosing an Azure credential (Azure CLI or DefaultAzureCredential chain)
2. Creating the Event Hubs management client
3. Probing which credentials are available on this machine
"""

import logging
from typing import Any

from azure.identity import (
    AzureCliCredential,
    DefaultAzureCredential,
    EnvironmentCredential,
    ManagedIdentityCredential,
)
from azure.mgmt.eventhub import EventHubManagementClient

from utils.config import AzureManagementConfig

logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"


def build_credential(config: AzureManagementConfig) -> Any:
    """
    Build the credential used for management API calls.

    Args:
        config: Azure management settings

    Returns:
        AzureCliCredential when `use_cli_credential` is set, otherwise a
        DefaultAzureCredential scoped to the configured tenant/client.
    """
    if config.use_cli_credential:
        logger.info("Using Azure CLI credential")
        return AzureCliCredential(tenant_id=config.tenant_id) if config.tenant_id else AzureCliCredential()

    kwargs: dict[str, Any] = {}
    if config.tenant_id:
        kwargs["additionally_allowed_tenants"] = [config.tenant_id]
    if config.client_id:
        kwargs["managed_identity_client_id"] = config.client_id
        kwargs["workload_identity_client_id"] = config.client_id

    logger.info("Using DefaultAzureCredential")
    return DefaultAzureCredential(**kwargs)


def create_management_client(
    config: AzureManagementConfig, credential: Any | None = None
) -> EventHubManagementClient:
    """Create an Event Hubs management client for the configured subscription."""
    if credential is None:
        credential = build_credential(config)

    logger.debug(f"Creating EventHubManagementClient for subscription {config.subscription_id}")
    return EventHubManagementClient(
        credential=credential,
        subscription_id=config.subscription_id,
        base_url=config.management_endpoint,
    )


def probe_credentials() -> list[tuple[str, bool, str]]:
    """
    Try each credential type in turn and report which can issue a token.

    Returns:
        List of (credential name, available, detail) tuples.
    """
    results: list[tuple[str, bool, str]] = []
    for label, factory in (
        ("EnvironmentCredential", EnvironmentCredential),
        ("ManagedIdentityCredential", ManagedIdentityCredential),
        ("AzureCliCredential", AzureCliCredential),
    ):
        try:
            credential = factory()
            credential.get_token(MANAGEMENT_SCOPE)
            results.append((label, True, "token acquired"))
        except Exception as e:
            logger.debug(f"{label} unavailable: {e}")
            results.append((label, False, str(e).splitlines()[0] if str(e) else type(e).__name__))
    return results
