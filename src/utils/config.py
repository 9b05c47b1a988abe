"""
Configuration module for EvGroup.

This module provides configuration management for the Azure management API
connection, Logfire observability and the consumer groups declared for the
lifecycle adapter. It uses Pydantic Settings for validation and python-dotenv
for environment variable loading.

Environment Variables:
- AZURE_SUBSCRIPTION_ID: Subscription that owns the Event Hubs namespaces
- AZURE_TENANT_ID / AZURE_CLIENT_ID: Optional identity hints for credentials
- EVENTHUB_NAMESPACE / RESOURCE_GROUP: Defaults for declared consumer groups
- CONSUMERGROUP_{N}_NAME, CONSUMERGROUP_{N}_EVENTHUB: Declared consumer groups
- CONSUMERGROUP_{N}_NAMESPACE, CONSUMERGROUP_{N}_RESOURCE_GROUP: Per-group overrides
- CONSUMERGROUP_{N}_USER_METADATA: Optional metadata
"""

import os
import re
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from resources.models import ConsumerGroupConfig

GUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

CONSUMER_GROUP_ENV_PATTERN = re.compile(
    r"CONSUMERGROUP_(\d+)_(NAME|NAMESPACE|EVENTHUB|RESOURCE_GROUP|USER_METADATA)"
)


class AzureManagementConfig(BaseSettings):
    """
    Azure Resource Manager connection configuration.

    Authentication goes through azure-identity; by default the
    DefaultAzureCredential chain (environment, workload identity, managed
    identity, Azure CLI, ...) is used.
    """

    model_config = {
        "env_prefix": "AZURE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    subscription_id: str = Field(..., description="Azure subscription ID")
    tenant_id: str | None = Field(default=None, description="Azure AD tenant ID")
    client_id: str | None = Field(
        default=None,
        description="Client ID of a user-assigned managed or workload identity",
    )
    use_cli_credential: bool = Field(
        default=False,
        description="Use AzureCliCredential instead of DefaultAzureCredential",
    )
    management_endpoint: str = Field(
        default="https://management.azure.com",
        description="Azure Resource Manager endpoint (sovereign clouds differ)",
    )
    operation_timeout_seconds: int = Field(
        default=300,
        ge=1,
        le=3600,
        description="Deadline for a single lifecycle operation",
    )

    @field_validator("subscription_id", "tenant_id")
    @classmethod
    def validate_guid(cls, v: str | None) -> str | None:
        """Validate that subscription and tenant IDs are GUIDs."""
        if v is None:
            return v
        v = v.strip()
        if not GUID_PATTERN.fullmatch(v):
            raise ValueError(f"Expected a GUID, got: {v}")
        return v.lower()

    @field_validator("management_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith("https://"):
            raise ValueError("Management endpoint must use https")
        return v.rstrip("/")


class LogfireConfig(BaseSettings):
    """
    Logfire observability configuration.

    Enables Logfire tracing of consumer group lifecycle operations
    (create_or_update, read, delete) alongside Rich console logging.
    """

    model_config = {
        "env_prefix": "LOGFIRE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    enabled: bool = Field(default=False, description="Enable Logfire tracing")
    token: str | None = Field(default=None, description="Logfire API token")
    service_name: str = Field(default="evgroup", description="Service name in Logfire")
    environment: str = Field(default="development", description="Environment tag")
    send_to_logfire: bool = Field(default=True, description="Send spans to Logfire cloud")
    console_logging: bool = Field(default=True, description="Keep Rich console logging")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {', '.join(valid_levels)}")
        return v_upper

    @model_validator(mode="after")
    def validate_token_when_enabled(self):
        """A token is needed to ship spans to Logfire cloud."""
        if self.enabled and self.send_to_logfire and not self.token:
            raise ValueError(
                "LOGFIRE_TOKEN is required when LOGFIRE_ENABLED=true and LOGFIRE_SEND_TO_LOGFIRE=true"
            )
        return self


class EvGroupConfig(BaseSettings):
    """
    Main configuration class for EvGroup.

    Holds the Azure connection, observability settings and the consumer
    groups declared through numbered CONSUMERGROUP_{N}_* variables.
    """

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    environment: str = Field("development", description="Deployment environment")

    # Defaults applied to declared consumer groups that omit them
    eventhub_namespace: str | None = Field(default=None, description="Default namespace name")
    resource_group: str | None = Field(default=None, description="Default resource group")

    azure: AzureManagementConfig | None = Field(
        default=None,
        description="Azure management connection configuration",
    )
    logfire: LogfireConfig = Field(
        default_factory=LogfireConfig,
        description="Logfire observability configuration",
    )

    consumer_groups: dict[str, ConsumerGroupConfig] = Field(default_factory=dict)

    def __init__(self, **kwargs):
        """Initialize configuration and parse declared consumer groups from the environment."""
        super().__init__(**kwargs)
        # The Azure connection is optional until something talks to the API
        if self.azure is None and os.getenv("AZURE_SUBSCRIPTION_ID"):
            self.azure = AzureManagementConfig()  # type: ignore[call-arg]
        self._parse_dynamic_config()

    @field_validator("eventhub_namespace")
    @classmethod
    def strip_namespace_host(cls, v: str | None) -> str | None:
        """Accept either the namespace name or its FQDN."""
        if v and v.endswith(".servicebus.windows.net"):
            return v.split(".", 1)[0]
        return v

    def _parse_dynamic_config(self) -> None:
        """Parse CONSUMERGROUP_{N}_* variables into ConsumerGroupConfig instances."""
        declared: dict[str, dict[str, str]] = {}

        for key, value in os.environ.items():
            match = CONSUMER_GROUP_ENV_PATTERN.fullmatch(key)
            if match:
                group_num, setting = match.groups()
                declared.setdefault(group_num, {})[setting] = value

        for group_num, data in sorted(declared.items(), key=lambda item: int(item[0])):
            prefix = f"CONSUMERGROUP_{group_num}"
            if "NAME" not in data:
                raise ValueError(f"{prefix}_NAME is required when other {prefix}_* variables are set")
            if "EVENTHUB" not in data:
                raise ValueError(f"{prefix}_EVENTHUB is required for {prefix}")

            namespace = data.get("NAMESPACE") or self.eventhub_namespace
            if not namespace:
                raise ValueError(f"{prefix}_NAMESPACE or EVENTHUB_NAMESPACE is required for {prefix}")
            resource_group = data.get("RESOURCE_GROUP") or self.resource_group
            if not resource_group:
                raise ValueError(f"{prefix}_RESOURCE_GROUP or RESOURCE_GROUP is required for {prefix}")

            self.consumer_groups[prefix] = ConsumerGroupConfig.from_attributes(
                {
                    "name": data["NAME"],
                    "namespace_name": namespace,
                    "eventhub_name": data["EVENTHUB"],
                    "resource_group_name": resource_group,
                    "user_metadata": data.get("USER_METADATA") or None,
                }
            )

    def get_consumer_group_config(self, key: str) -> ConsumerGroupConfig | None:
        """Get a declared consumer group by key (e.g. CONSUMERGROUP_1)."""
        return self.consumer_groups.get(key)

    def validate_configuration(self) -> dict[str, Any]:
        """
        Validate the complete configuration and return validation summary.

        Returns a dictionary with validation results including any warnings or issues.
        """
        warnings: list[str] = []
        errors: list[str] = []

        seen: dict[tuple[str, str, str, str], str] = {}
        for key, group in self.consumer_groups.items():
            natural_key = group.natural_key
            if natural_key in seen:
                errors.append(
                    f"{key} declares the same consumer group as {seen[natural_key]}: "
                    f"{'/'.join(natural_key)}"
                )
            else:
                seen[natural_key] = key

        if not self.consumer_groups:
            warnings.append("No consumer groups declared (CONSUMERGROUP_{N}_* variables)")
        if self.azure is None:
            warnings.append("AZURE_SUBSCRIPTION_ID is not set; remote operations are unavailable")

        return {
            "valid": not errors,
            "consumer_groups_count": len(self.consumer_groups),
            "azure_configured": self.azure is not None,
            "warnings": warnings,
            "errors": errors,
        }


def load_config(env_file: str | None = None) -> EvGroupConfig:
    """
    Load configuration from environment file.

    Args:
        env_file: Optional path to .env file. Defaults to .env in current directory.

    Returns:
        Configured EvGroupConfig instance.

    Raises:
        ValidationError: If configuration is invalid.
        FileNotFoundError: If specified env file doesn't exist.
    """
    from pathlib import Path

    from dotenv import load_dotenv

    if env_file:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_file}")
        load_dotenv(env_path)

    return EvGroupConfig(
        environment=os.getenv("ENVIRONMENT", "development"),
        eventhub_namespace=os.getenv("EVENTHUB_NAMESPACE"),
        resource_group=os.getenv("RESOURCE_GROUP"),
    )
