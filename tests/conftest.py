"""
Pytest configuration and shared fixtures for EvGroup tests.

This module provides reusable fixtures for faking the Azure management API and
creating test data consistently across all test modules. No test talks to
Azure: the consumer group operations are served by an in-memory fake.
"""

import os
from types import SimpleNamespace
from typing import Any

import pytest
from azure.core.exceptions import ResourceNotFoundError

from resources.eventhub_consumer_group import EventHubConsumerGroupAdapter
from resources.models import ConsumerGroupConfig
from utils.config import AzureManagementConfig, LogfireConfig

SUBSCRIPTION_ID = "00000000-1111-2222-3333-444444444444"


# ============================================================================
# Fake management API
# ============================================================================


class FakeConsumerGroupOperations:
    """In-memory stand-in for EventHubManagementClient.consumer_groups."""

    def __init__(self, subscription_id: str = SUBSCRIPTION_ID):
        self.subscription_id = subscription_id
        self.groups: dict[tuple[str, str, str, str], SimpleNamespace] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _key(self, kwargs: dict[str, Any]) -> tuple[str, str, str, str]:
        return (
            kwargs["resource_group_name"],
            kwargs["namespace_name"],
            kwargs["event_hub_name"],
            kwargs["consumer_group_name"],
        )

    def _id(self, key: tuple[str, str, str, str]) -> str:
        resource_group, namespace, eventhub, name = key
        return (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{resource_group}"
            f"/providers/Microsoft.EventHub/namespaces/{namespace}"
            f"/eventhubs/{eventhub}/consumergroups/{name}"
        )

    def create_or_update(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(("create_or_update", kwargs))
        key = self._key(kwargs)
        group = SimpleNamespace(
            id=self._id(key),
            name=key[3],
            user_metadata=kwargs["parameters"].user_metadata,
        )
        self.groups[key] = group
        return group

    def get(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(("get", kwargs))
        key = self._key(kwargs)
        if key not in self.groups:
            raise ResourceNotFoundError(message=f"Consumer group {key[3]} not found")
        return self.groups[key]

    def delete(self, **kwargs: Any) -> None:
        self.calls.append(("delete", kwargs))
        key = self._key(kwargs)
        if key not in self.groups:
            raise ResourceNotFoundError(message=f"Consumer group {key[3]} not found")
        del self.groups[key]

    def remove_out_of_band(self, key: tuple[str, str, str, str]) -> None:
        """Simulate someone deleting the group through the portal."""
        self.groups.pop(key, None)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


# ============================================================================
# Fixtures: Configuration Objects
# ============================================================================


@pytest.fixture
def sample_consumer_group_config() -> ConsumerGroupConfig:
    """Create the canonical example consumer group configuration."""
    return ConsumerGroupConfig(
        name="cg1",
        namespace_name="ns1",
        eventhub_name="eh1",
        resource_group_name="rg1",
        user_metadata="m",
    )


@pytest.fixture
def sample_azure_config() -> AzureManagementConfig:
    """Create a sample Azure management configuration for testing."""
    return AzureManagementConfig(
        subscription_id=SUBSCRIPTION_ID,
        tenant_id=None,
        use_cli_credential=False,
        operation_timeout_seconds=30,
    )


@pytest.fixture
def sample_logfire_config() -> LogfireConfig:
    """Create a sample Logfire configuration for testing."""
    return LogfireConfig(
        enabled=False,
        token=None,
        service_name="evgroup-test",
        environment="test",
        send_to_logfire=False,
        console_logging=False,
        log_level="INFO",
    )


@pytest.fixture
def sample_identifier() -> str:
    return (
        f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rg1"
        "/providers/Microsoft.EventHub/namespaces/ns1/eventhubs/eh1/consumergroups/cg1"
    )


# ============================================================================
# Fixtures: Fake Azure SDK Components
# ============================================================================


@pytest.fixture
def fake_consumer_groups() -> FakeConsumerGroupOperations:
    return FakeConsumerGroupOperations()


@pytest.fixture
def fake_management_client(fake_consumer_groups) -> SimpleNamespace:
    """A management client exposing only the consumer_groups operations."""
    return SimpleNamespace(consumer_groups=fake_consumer_groups)


@pytest.fixture
def mock_management_client(mocker):
    """A MagicMock management client for asserting exact SDK calls."""
    client = mocker.MagicMock()
    client.consumer_groups.get.return_value = SimpleNamespace(
        id=(
            f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rg1"
            "/providers/Microsoft.EventHub/namespaces/ns1/eventhubs/eh1/consumergroups/cg1"
        ),
        name="cg1",
        user_metadata="m",
    )
    return client


@pytest.fixture
def adapter(fake_management_client) -> EventHubConsumerGroupAdapter:
    return EventHubConsumerGroupAdapter(client=fake_management_client)


# ============================================================================
# Fixtures: Mock Logfire
# ============================================================================


@pytest.fixture(autouse=True)
def mock_logfire(mocker):
    """Mock Logfire spans so tests never emit telemetry."""
    mocker.patch("logfire.configure")

    mock_span = mocker.MagicMock()
    mock_span.__enter__ = mocker.MagicMock(return_value=mock_span)
    mock_span.__exit__ = mocker.MagicMock(return_value=None)
    mock_span.set_attribute = mocker.MagicMock()

    mocker.patch("logfire.span", return_value=mock_span)

    return mock_span


# ============================================================================
# Fixtures: Environment Variables
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """
    Isolate every test from the developer's environment.

    Changes to a directory without a .env file and clears all variables the
    configuration classes read.
    """
    original_dir = os.getcwd()
    os.chdir(str(tmp_path))

    for key in list(os.environ.keys()):
        if key.startswith(("AZURE_", "LOGFIRE_", "CONSUMERGROUP_")):
            monkeypatch.delenv(key, raising=False)
    for key in ("EVENTHUB_NAMESPACE", "RESOURCE_GROUP", "ENVIRONMENT"):
        monkeypatch.delenv(key, raising=False)

    yield

    os.chdir(original_dir)


@pytest.fixture
def env_setup(monkeypatch):
    """Set up environment variables declaring one consumer group."""
    test_env = {
        "AZURE_SUBSCRIPTION_ID": SUBSCRIPTION_ID,
        "EVENTHUB_NAMESPACE": "ns1",
        "RESOURCE_GROUP": "rg1",
        "CONSUMERGROUP_1_NAME": "cg1",
        "CONSUMERGROUP_1_EVENTHUB": "eh1",
        "CONSUMERGROUP_1_USER_METADATA": "m",
    }
    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    return test_env
