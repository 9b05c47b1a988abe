"""
Azure Resource Manager identifiers.

ARM identifiers are hierarchical paths of alternating key/value segments:

    /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}/...

`AzureResourceId` is the generic decomposition (subscription, resource group,
provider and the remaining key/value path). `ConsumerGroupId` is the typed view
for Event Hub consumer groups with an explicit parse/format round-trip.
"""

from pydantic import BaseModel, ConfigDict, Field

from resources.errors import MalformedIdentifier

EVENTHUB_PROVIDER = "Microsoft.EventHub"


class AzureResourceId(BaseModel):
    """Generic decomposition of an ARM resource identifier."""

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str = ""
    provider: str = ""
    path: dict[str, str] = Field(default_factory=dict)


def parse_azure_resource_id(identifier: str) -> AzureResourceId:
    """
    Split an ARM identifier into its subscription, group, provider and path.

    Raises:
        MalformedIdentifier: If the identifier is not a well-formed ARM path.
    """
    if not identifier or not identifier.strip():
        raise MalformedIdentifier(identifier, "identifier is empty")

    components = identifier.strip("/").split("/")
    if len(components) % 2 != 0:
        raise MalformedIdentifier(identifier, "the number of path segments is not divisible by 2")

    segments: dict[str, str] = {}
    for i in range(0, len(components), 2):
        key, value = components[i], components[i + 1]
        if not key or not value:
            raise MalformedIdentifier(identifier, f"key/value segment {i // 2} is empty")
        segments[key] = value

    subscription_id = _pop_segment(segments, "subscriptions")
    if not subscription_id:
        raise MalformedIdentifier(identifier, "no subscription ID found")

    resource_group = _pop_segment(segments, "resourceGroups") or ""
    provider = _pop_segment(segments, "providers") or ""

    return AzureResourceId(
        subscription_id=subscription_id,
        resource_group=resource_group,
        provider=provider,
        path=segments,
    )


def _pop_segment(segments: dict[str, str], key: str) -> str | None:
    # ARM services are inconsistent about the casing of "resourceGroups"
    for existing in list(segments):
        if existing.lower() == key.lower():
            return segments.pop(existing)
    return None


class ConsumerGroupId(BaseModel):
    """Identifier of a single Event Hub consumer group."""

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    namespace_name: str
    eventhub_name: str
    name: str

    @classmethod
    def parse(cls, identifier: str) -> "ConsumerGroupId":
        """
        Parse a consumer group identifier.

        Raises:
            MalformedIdentifier: If any of the group, namespace, event hub or
                consumer group segments is missing.
        """
        parsed = parse_azure_resource_id(identifier)
        if not parsed.resource_group:
            raise MalformedIdentifier(identifier, "no resource group found")

        path = {key.lower(): value for key, value in parsed.path.items()}
        missing = [key for key in ("namespaces", "eventhubs", "consumergroups") if key not in path]
        if missing:
            raise MalformedIdentifier(identifier, f"missing segments: {', '.join(missing)}")

        return cls(
            subscription_id=parsed.subscription_id,
            resource_group=parsed.resource_group,
            namespace_name=path["namespaces"],
            eventhub_name=path["eventhubs"],
            name=path["consumergroups"],
        )

    def format(self) -> str:
        """Render the canonical ARM path for this consumer group."""
        return (
            f"/subscriptions/{self.subscription_id}"
            f"/resourceGroups/{self.resource_group}"
            f"/providers/{EVENTHUB_PROVIDER}"
            f"/namespaces/{self.namespace_name}"
            f"/eventhubs/{self.eventhub_name}"
            f"/consumergroups/{self.name}"
        )

    @property
    def natural_key(self) -> tuple[str, str, str, str]:
        """(resource group, namespace, event hub, name) as the API addresses it."""
        return (self.resource_group, self.namespace_name, self.eventhub_name, self.name)

    def __str__(self) -> str:
        return self.format()
