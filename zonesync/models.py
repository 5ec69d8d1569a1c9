"""Record models shared by the reconciler, the exporter and the providers."""

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TTL = 3600

# Only these types carry a priority on the provider side
PRIORITY_TYPES = frozenset({"MX", "SRV"})

SUPPORTED_TYPES = frozenset(
    {"A", "AAAA", "CNAME", "TXT", "NS", "MX", "SRV", "SPF", "CAA", "PTR"}
)


class RecordKey(NamedTuple):
    """Identity used to correlate desired and remote records."""

    name: str
    type: str

    def __str__(self) -> str:
        return f"{self.name}:{self.type}"


class DesiredRecord(BaseModel):
    """One record as declared in the zone file."""

    model_config = ConfigDict(frozen=True)

    name: str = ""  # Empty string means the zone apex
    type: str = Field(min_length=1)
    target: str = Field(min_length=1)
    ttl: int = Field(default=0, ge=0)  # 0 means provider default
    priority: int = Field(default=0, ge=0)  # Only sent for MX and SRV

    @field_validator("name", mode="before")
    @classmethod
    def empty_name(cls, v: Any) -> Any:
        return "" if v is None else v


class RemoteRecord(BaseModel):
    """A record as held by the provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int | None = None
    zone: str = ""
    sub_domain: str = Field(default="", alias="subDomain")
    field_type: str = Field(alias="fieldType")
    target: str
    ttl: int = 0
    priority: int | None = None


class CreatePayload(BaseModel):
    """Request body used to create a record."""

    model_config = ConfigDict(populate_by_name=True)

    sub_domain: str = Field(alias="subDomain")
    field_type: str = Field(alias="fieldType")
    target: str
    ttl: int
    priority: int | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class UpdatePayload(BaseModel):
    """Request body used to update a record addressed by its id."""

    target: str
    ttl: int
    priority: int | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def _ttl_and_priority(
    desired: DesiredRecord, default_ttl: int
) -> tuple[int, int | None]:
    """Apply the TTL default and drop priority for types that do not use it."""
    ttl = desired.ttl or default_ttl
    priority = desired.priority if desired.type in PRIORITY_TYPES else None
    return ttl, priority


def to_create_payload(
    desired: DesiredRecord, default_ttl: int = DEFAULT_TTL
) -> CreatePayload:
    """Build the create request for a desired record."""
    ttl, priority = _ttl_and_priority(desired, default_ttl)
    return CreatePayload(
        sub_domain=desired.name,
        field_type=desired.type,
        target=desired.target,
        ttl=ttl,
        priority=priority,
    )


def to_update_payload(
    desired: DesiredRecord, default_ttl: int = DEFAULT_TTL
) -> UpdatePayload:
    """Build the update request for a desired record.

    Name and type are not part of the payload since updates are
    addressed by the remote record id.
    """
    ttl, priority = _ttl_and_priority(desired, default_ttl)
    return UpdatePayload(target=desired.target, ttl=ttl, priority=priority)


def to_desired(remote: RemoteRecord) -> DesiredRecord:
    """Convert a remote record into its declarative form."""
    return DesiredRecord(
        name=remote.sub_domain,
        type=remote.field_type,
        target=remote.target,
        ttl=remote.ttl,
        priority=remote.priority if remote.priority is not None else 0,
    )


def with_defaults(desired: DesiredRecord, default_ttl: int = DEFAULT_TTL) -> DesiredRecord:
    """Return the record the way the provider will end up storing it."""
    ttl, priority = _ttl_and_priority(desired, default_ttl)
    return desired.model_copy(update={"ttl": ttl, "priority": priority or 0})


def records_equal(a: DesiredRecord, b: DesiredRecord) -> bool:
    """Field-exact comparison; targets are not normalised."""
    return (
        a.name == b.name
        and a.type == b.type
        and a.target == b.target
        and a.ttl == b.ttl
        and a.priority == b.priority
    )


def record_key(record: DesiredRecord | RemoteRecord) -> RecordKey:
    """Return the (name, type) key of either representation."""
    if isinstance(record, RemoteRecord):
        return RecordKey(record.sub_domain, record.field_type)
    return RecordKey(record.name, record.type)
