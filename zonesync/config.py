"""Configuration management for zonesync."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from zonesync.errors import ConfigError
from zonesync.models import DEFAULT_TTL, SUPPORTED_TYPES, DesiredRecord

DEFAULT_CREDENTIALS_FILE = "ovh-credentials.yaml"

REQUIRED_CREDENTIALS = ("application_key", "application_secret", "consumer_key")


class DNSZone(BaseModel):
    """Declarative description of a zone."""

    domain: str = Field(min_length=1)
    records: list[DesiredRecord] = Field(default_factory=list)

    @field_validator("records", mode="before")
    @classmethod
    def empty_records(cls, v: Any) -> Any:
        return [] if v is None else v


class SyncSettings(BaseModel):
    """Options for one reconciliation run."""

    dry_run: bool = False
    default_ttl: int = Field(default=DEFAULT_TTL, gt=0)


class CLIOptions(BaseModel):
    """Options shared by every CLI command."""

    credentials_path: Path | None = None


class OVHSettings(BaseSettings):
    """OVH credentials read from environment variables and .env."""

    model_config = SettingsConfigDict(env_prefix="OVH_", env_file=".env", extra="ignore")

    endpoint: str | None = None
    application_key: str | None = None
    application_secret: str | None = None
    consumer_key: str | None = None
    timeout: int | None = None


class OVHCredentials(BaseModel):
    """Resolved OVH credentials."""

    endpoint: str = "ovh-eu"
    application_key: str
    application_secret: str
    consumer_key: str
    timeout: int = 30


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(lines)


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"failed to read file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse YAML in {path}: {e}") from e


def validate_zone(zone: DNSZone) -> None:
    """Reject record types the provider integration does not handle."""
    for index, record in enumerate(zone.records):
        if record.type not in SUPPORTED_TYPES:
            raise ConfigError(f"invalid DNS record {index}: unsupported record type: {record.type}")


def load_zone(path: Path) -> DNSZone:
    """Load and validate a zone file."""
    if not path.exists():
        raise ConfigError(f"zone file not found: {path}")

    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError(f"zone file {path} must contain a mapping")

    try:
        zone = DNSZone(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid zone file {path}: {_format_validation_error(e)}") from e

    validate_zone(zone)
    return zone


def record_to_dict(record: DesiredRecord) -> dict[str, Any]:
    """Serialise a record, leaving out TTL and priority when unset."""
    entry: dict[str, Any] = {
        "name": record.name,
        "type": record.type,
        "target": record.target,
    }
    if record.ttl:
        entry["ttl"] = record.ttl
    if record.priority:
        entry["priority"] = record.priority
    return entry


def zone_to_dict(zone: DNSZone) -> dict[str, Any]:
    return {
        "domain": zone.domain,
        "records": [record_to_dict(record) for record in zone.records],
    }


def save_zone(zone: DNSZone, path: Path, fmt: str = "yaml") -> None:
    """Write a zone file as YAML or JSON."""
    data = zone_to_dict(zone)
    if fmt == "json":
        content = json.dumps(data, indent=2) + "\n"
    elif fmt == "yaml":
        content = dump_yaml(data)
    else:
        raise ConfigError(f"unsupported output format: {fmt}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to write file {path}: {e}") from e


def load_env_settings() -> OVHSettings:
    """Load OVH settings from .env and environment variables."""
    return OVHSettings()


def load_credentials(path: Path | None = None) -> OVHCredentials:
    """Resolve OVH credentials.

    Environment variables win; values they leave unset are taken from
    the YAML credentials file when it exists.
    """
    try:
        env_values = load_env_settings().model_dump(exclude_none=True)
    except ValidationError as e:
        raise ConfigError(f"invalid OVH environment settings: {_format_validation_error(e)}") from e
    values = {key: value for key, value in env_values.items() if value}

    if not all(values.get(key) for key in REQUIRED_CREDENTIALS):
        path = path or Path(DEFAULT_CREDENTIALS_FILE)
        if path.exists():
            file_values = _read_yaml(path) or {}
            if not isinstance(file_values, dict):
                raise ConfigError(f"credentials file {path} must contain a mapping")
            for key, value in file_values.items():
                if value and key not in values:
                    values[key] = value
        elif not values:
            raise ConfigError(
                f"failed to read credentials file {path} and no environment variables set"
            )

    for key in REQUIRED_CREDENTIALS:
        if not values.get(key):
            raise ConfigError(
                f"{key} is required (set OVH_{key.upper()} env var or provide in credentials file)"
            )

    try:
        return OVHCredentials(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid OVH credentials: {_format_validation_error(e)}") from e


class _LiteralBlockDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_LiteralBlockDumper.add_representer(str, _str_representer)


def dump_yaml(data: dict, stream=None) -> str | None:
    """Dump data to YAML, preserving multiline strings as literal blocks."""
    return yaml.dump(
        data,
        stream=stream,
        Dumper=_LiteralBlockDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
