"""
Validators for Event Hub and Azure resource names.

Each validator returns the value unchanged or raises ValueError, so they can be
called directly from pydantic field validators.
"""

import re

# Letters, numbers, periods, hyphens and underscores; up to 50 characters;
# begins and ends with a letter or number.
EVENTHUB_NAME_PATTERN = re.compile(r"[a-zA-Z0-9]([-._a-zA-Z0-9]{0,48}[a-zA-Z0-9])?")
CONSUMER_GROUP_NAME_PATTERN = EVENTHUB_NAME_PATTERN

NAMESPACE_NAME_PATTERN = re.compile(r"[a-zA-Z]([-a-zA-Z0-9]{0,48}[a-zA-Z0-9])?")

RESOURCE_GROUP_NAME_PATTERN = re.compile(r"[-\w._()]+")
RESOURCE_GROUP_NAME_MAX_LENGTH = 90

USER_METADATA_MIN_LENGTH = 1
USER_METADATA_MAX_LENGTH = 1024


def validate_consumer_group_name(value: str) -> str:
    if not CONSUMER_GROUP_NAME_PATTERN.fullmatch(value):
        raise ValueError(
            "The consumer group name can contain only letters, numbers, periods (.), "
            "hyphens (-), and underscores (_), up to 50 characters, and it must begin "
            f"and end with a letter or number: {value!r}"
        )
    return value


def validate_eventhub_name(value: str) -> str:
    if not EVENTHUB_NAME_PATTERN.fullmatch(value):
        raise ValueError(
            "The event hub name can contain only letters, numbers, periods (.), "
            "hyphens (-), and underscores (_), up to 50 characters, and it must begin "
            f"and end with a letter or number: {value!r}"
        )
    return value


def validate_namespace_name(value: str) -> str:
    """Validate an Event Hubs namespace name (not the FQDN)."""
    if value.endswith(".servicebus.windows.net"):
        raise ValueError(
            f"Use the namespace name, not the fully qualified host name: {value!r}"
        )
    if not NAMESPACE_NAME_PATTERN.fullmatch(value):
        raise ValueError(
            "The namespace name can contain only letters, numbers, and hyphens. It must "
            "start with a letter, end with a letter or number, and be at most 50 "
            f"characters long: {value!r}"
        )
    return value


def validate_resource_group_name(value: str) -> str:
    if not value:
        raise ValueError("Resource group name cannot be empty")
    if len(value) > RESOURCE_GROUP_NAME_MAX_LENGTH:
        raise ValueError(
            f"Resource group name may not exceed {RESOURCE_GROUP_NAME_MAX_LENGTH} "
            f"characters: {value!r}"
        )
    if value.endswith("."):
        raise ValueError(f"Resource group name cannot end with a period: {value!r}")
    if not RESOURCE_GROUP_NAME_PATTERN.fullmatch(value):
        raise ValueError(
            "Resource group name may only contain alphanumeric characters, dash, "
            f"underscores, parentheses and periods: {value!r}"
        )
    return value


def validate_user_metadata(value: str) -> str:
    if not USER_METADATA_MIN_LENGTH <= len(value) <= USER_METADATA_MAX_LENGTH:
        raise ValueError(
            f"user_metadata must be between {USER_METADATA_MIN_LENGTH} and "
            f"{USER_METADATA_MAX_LENGTH} characters, got {len(value)}"
        )
    return value
