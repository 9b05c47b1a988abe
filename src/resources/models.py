"""
Typed configuration and state models for Event Hub consumer groups.

`ConsumerGroupConfig` is the declared, desired configuration and is validated
when it is constructed. `ConsumerGroupState` is what the adapter projects back
from the remote object, keyed by the ARM identifier.
"""

import logging
from collections.abc import Mapping
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from resources.errors import ValidationError
from resources.identifiers import ConsumerGroupId
from resources.validation import (
    validate_consumer_group_name,
    validate_eventhub_name,
    validate_namespace_name,
    validate_resource_group_name,
    validate_user_metadata,
)

logger = logging.getLogger(__name__)

# Changing any of these cannot be applied in place; the group must be recreated.
FORCE_NEW_FIELDS: tuple[str, ...] = (
    "name",
    "namespace_name",
    "eventhub_name",
    "resource_group_name",
)


class ConsumerGroupConfig(BaseModel):
    """Declared configuration of a single consumer group."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Consumer group name")
    namespace_name: str = Field(..., description="Event Hubs namespace name")
    eventhub_name: str = Field(..., description="Parent Event Hub name")
    resource_group_name: str = Field(..., description="Resource group owning the namespace")
    user_metadata: str | None = Field(
        default=None,
        description="Free-form metadata stored with the consumer group (1-1024 characters)",
    )
    location: str | None = Field(
        default=None,
        description="Deprecated; consumer groups inherit the namespace location",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_consumer_group_name(v)

    @field_validator("namespace_name")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        return validate_namespace_name(v)

    @field_validator("eventhub_name")
    @classmethod
    def validate_eventhub(cls, v: str) -> str:
        return validate_eventhub_name(v)

    @field_validator("resource_group_name")
    @classmethod
    def validate_resource_group(cls, v: str) -> str:
        return validate_resource_group_name(v)

    @field_validator("user_metadata")
    @classmethod
    def validate_metadata(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return validate_user_metadata(v)

    @field_validator("location")
    @classmethod
    def warn_deprecated_location(cls, v: str | None) -> str | None:
        if v is not None:
            logger.warning(
                "'location' is deprecated for consumer groups and is ignored; "
                "the group lives in its namespace's region"
            )
        return v

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> "ConsumerGroupConfig":
        """
        Build a configuration from a generic attribute mapping.

        Raises:
            ValidationError: If any attribute is missing or malformed.
        """
        try:
            return cls(**dict(attributes))
        except pydantic.ValidationError as e:
            problems = [
                f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            ]
            name = attributes.get("name", "<unnamed>")
            raise ValidationError(
                f"Invalid configuration for consumer group {name!r}: " + "; ".join(problems),
                errors=problems,
            ) from e

    @property
    def natural_key(self) -> tuple[str, str, str, str]:
        return (self.resource_group_name, self.namespace_name, self.eventhub_name, self.name)


class ConsumerGroupState(BaseModel):
    """Local resource state projected from the remote consumer group."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    namespace_name: str
    eventhub_name: str
    resource_group_name: str
    user_metadata: str = ""

    @classmethod
    def from_identifier(cls, identifier: ConsumerGroupId, user_metadata: str = "") -> "ConsumerGroupState":
        return cls(
            id=identifier.format(),
            name=identifier.name,
            namespace_name=identifier.namespace_name,
            eventhub_name=identifier.eventhub_name,
            resource_group_name=identifier.resource_group,
            user_metadata=user_metadata,
        )

    def to_record(self) -> dict[str, str]:
        """Flat attribute record as persisted by a state store."""
        return self.model_dump()

    def to_config(self) -> ConsumerGroupConfig:
        """Rebuild the declared configuration this state satisfies."""
        return ConsumerGroupConfig(
            name=self.name,
            namespace_name=self.namespace_name,
            eventhub_name=self.eventhub_name,
            resource_group_name=self.resource_group_name,
            user_metadata=self.user_metadata or None,
        )


def requires_replacement(old: ConsumerGroupConfig, new: ConsumerGroupConfig) -> list[str]:
    """Return the force-new attributes that differ between two configurations."""
    return [field for field in FORCE_NEW_FIELDS if getattr(old, field) != getattr(new, field)]
