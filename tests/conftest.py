"""Shared test fixtures for zonesync tests."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from zonesync.config import OVHCredentials
from zonesync.errors import ProviderError
from zonesync.models import CreatePayload, RemoteRecord, UpdatePayload
from zonesync.providers.dns.base import DNSProvider

MUTATING_CALLS = {"create", "update", "delete", "refresh"}


# ============================================================================
# Fake provider
# ============================================================================


class InMemoryProvider(DNSProvider):
    """DNS provider backed by a dict, recording every call."""

    def __init__(self, records: list[RemoteRecord] | None = None):
        self.records: dict[int, RemoteRecord] = {}
        self.calls: list[tuple] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.fetch_error: Exception | None = None
        self.refresh_error: Exception | None = None
        self._next_id = 1000

        for record in records or []:
            self.records[record.id] = record

    @property
    def mutating_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def fail(self, operation: str, name: str, message: str = "API error: 500") -> None:
        """Make ``operation`` fail for the record with sub-domain ``name``."""
        self.failures[(operation, name)] = ProviderError(message)

    def _check(self, operation: str, name: str) -> None:
        error = self.failures.get((operation, name))
        if error is not None:
            raise error

    def list_record_ids(self, zone: str) -> list[int]:
        self.calls.append(("list", zone))
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.records)

    def get_record(self, zone: str, record_id: int) -> RemoteRecord:
        self.calls.append(("get", record_id))
        return self.records[record_id]

    def create_record(self, zone: str, payload: CreatePayload) -> RemoteRecord:
        self.calls.append(("create", payload))
        self._check("create", payload.sub_domain)
        self._next_id += 1
        record = RemoteRecord(
            id=self._next_id,
            zone=zone,
            sub_domain=payload.sub_domain,
            field_type=payload.field_type,
            target=payload.target,
            ttl=payload.ttl,
            priority=payload.priority,
        )
        self.records[record.id] = record
        return record

    def update_record(self, zone: str, record_id: int, payload: UpdatePayload) -> None:
        self.calls.append(("update", record_id, payload))
        current = self.records[record_id]
        self._check("update", current.sub_domain)
        self.records[record_id] = current.model_copy(
            update={"target": payload.target, "ttl": payload.ttl, "priority": payload.priority}
        )

    def delete_record(self, zone: str, record_id: int) -> None:
        self.calls.append(("delete", record_id))
        self._check("delete", self.records[record_id].sub_domain)
        del self.records[record_id]

    def refresh_zone(self, zone: str) -> None:
        self.calls.append(("refresh", zone))
        if self.refresh_error is not None:
            raise self.refresh_error


# ============================================================================
# CLI Fixtures
# ============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch) -> Path:
    """Run in an empty directory without OVH environment variables."""
    for name in (
        "OVH_ENDPOINT",
        "OVH_APPLICATION_KEY",
        "OVH_APPLICATION_SECRET",
        "OVH_CONSUMER_KEY",
        "OVH_TIMEOUT",
        "OVH_DOMAIN",
        "OVH_CONFIG_PATH",
        "OVH_CREDENTIALS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_credentials():
    """Mock credential loading with test values."""
    credentials = OVHCredentials(
        endpoint="ovh-eu",
        application_key="app-key",
        application_secret="app-secret",
        consumer_key="consumer-key",
        timeout=30,
    )
    with patch("zonesync.commands.zone.load_credentials", return_value=credentials):
        yield credentials


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_remote_records() -> list[RemoteRecord]:
    """Provide a small zone as the provider holds it."""
    return [
        RemoteRecord(
            id=1, zone="example.com", sub_domain="", field_type="A", target="192.168.1.100", ttl=3600
        ),
        RemoteRecord(
            id=2, zone="example.com", sub_domain="www", field_type="CNAME", target="example.com.", ttl=3600
        ),
        RemoteRecord(
            id=3,
            zone="example.com",
            sub_domain="",
            field_type="MX",
            target="mx1.example.com.",
            ttl=3600,
            priority=10,
        ),
    ]


@pytest.fixture
def make_provider():
    """Provide a factory for in-memory providers."""
    return InMemoryProvider


@pytest.fixture
def provider(sample_remote_records) -> InMemoryProvider:
    """Provide an in-memory provider seeded with the sample zone."""
    return InMemoryProvider(sample_remote_records)


@pytest.fixture
def zone_file(tmp_path: Path) -> Path:
    """Write a zone file matching the sample zone plus one new record."""
    data = {
        "domain": "example.com",
        "records": [
            {"name": "", "type": "A", "target": "192.168.1.100", "ttl": 3600},
            {"name": "www", "type": "CNAME", "target": "example.com.", "ttl": 3600},
            {"name": "", "type": "MX", "target": "mx1.example.com.", "ttl": 3600, "priority": 10},
            {"name": "api", "type": "A", "target": "192.168.1.101"},
        ],
    }
    path = tmp_path / "example.com.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
