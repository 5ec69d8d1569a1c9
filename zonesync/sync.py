"""One-way reconciliation of a declared zone against the provider."""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import ValidationError

from zonesync.config import DNSZone, SyncSettings
from zonesync.errors import (
    DuplicateRecordError,
    ProviderError,
    RecordOperationError,
    RefreshError,
    ZoneFetchError,
)
from zonesync.models import (
    DesiredRecord,
    RecordKey,
    RemoteRecord,
    record_key,
    records_equal,
    to_create_payload,
    to_desired,
    to_update_payload,
    with_defaults,
)
from zonesync.providers.dns.base import DNSProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one reconciliation pass."""

    created: tuple[DesiredRecord, ...] = ()
    updated: tuple[DesiredRecord, ...] = ()
    deleted: tuple[RemoteRecord, ...] = ()
    errors: tuple[Exception, ...] = ()

    def has_changes(self) -> bool:
        return bool(self.created or self.updated or self.deleted)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> str:
        """Return a one-line count of what happened."""
        if not self.has_changes():
            text = "No changes needed"
        else:
            text = (
                f"{len(self.created)} created, {len(self.updated)} updated, "
                f"{len(self.deleted)} deleted"
            )
        if self.errors:
            text += f", {len(self.errors)} errors"
        return text


def find_duplicate_keys(records: Iterable[DesiredRecord | RemoteRecord]) -> list[RecordKey]:
    """Return keys shared by more than one record, sorted."""
    counts = Counter(record_key(record) for record in records)
    return sorted(key for key, count in counts.items() if count > 1)


def convert_snapshot(domain: str, records: Iterable[RemoteRecord]) -> list[DesiredRecord]:
    """Convert fetched records to their declarative form.

    A record that cannot be represented fails the whole fetch, so no
    mutation is attempted against a zone that was only partly understood.
    """
    converted = []
    for remote in records:
        try:
            converted.append(to_desired(remote))
        except ValidationError as e:
            raise ZoneFetchError(
                f"failed to read record {record_key(remote)} (ID: {remote.id}) of {domain}: {_first_error(e)}"
            ) from e
    return converted


def _first_error(error: ValidationError) -> str:
    item = error.errors()[0]
    location = ".".join(str(part) for part in item["loc"])
    return f"{location}: {item['msg']}" if location else item["msg"]


class Syncer:
    """Converges a zone at the provider to a declared set of records."""

    def __init__(self, provider: DNSProvider, settings: SyncSettings | None = None):
        self.provider = provider
        self.settings = settings or SyncSettings()

    def reconcile(self, zone: DNSZone) -> SyncResult:
        """Apply the minimal create/update/delete set for ``zone``.

        Raises DuplicateRecordError or ZoneFetchError before any mutation.
        Failures of individual operations are collected in the result.
        """
        domain = zone.domain
        dry_run = self.settings.dry_run
        default_ttl = self.settings.default_ttl

        duplicates = find_duplicate_keys(zone.records)
        if duplicates:
            raise DuplicateRecordError("desired", duplicates)

        try:
            current = self.provider.fetch_records(domain)
        except ProviderError as e:
            raise ZoneFetchError(f"failed to fetch records for {domain}: {e}") from e

        duplicates = find_duplicate_keys(current)
        if duplicates:
            raise DuplicateRecordError("remote", duplicates)

        desired_by_key = {record_key(r): with_defaults(r, default_ttl) for r in zone.records}
        remote_by_key = {record_key(r): r for r in current}
        # Both sides are normalised so TTL 0 equals the default TTL
        remote_as_desired = {
            record_key(r): with_defaults(r, default_ttl)
            for r in convert_snapshot(domain, current)
        }

        created: list[DesiredRecord] = []
        updated: list[DesiredRecord] = []
        deleted: list[RemoteRecord] = []
        errors: list[Exception] = []

        for key in sorted(desired_by_key):
            desired = desired_by_key[key]
            remote = remote_by_key.get(key)

            if remote is None:
                logger.info("Creating record: %s %s -> %s", desired.name, desired.type, desired.target)
                if not dry_run:
                    try:
                        self.provider.create_record(domain, to_create_payload(desired, default_ttl))
                    except ProviderError as e:
                        logger.error("Failed to create record %s: %s", key, e)
                        errors.append(RecordOperationError("create", key, e))
                        continue
                created.append(desired)
                continue

            current_desired = remote_as_desired[key]
            if records_equal(desired, current_desired):
                continue

            logger.info(
                "Updating record: %s %s -> %s (was %s)",
                desired.name,
                desired.type,
                desired.target,
                current_desired.target,
            )
            if not dry_run:
                try:
                    self.provider.update_record(
                        domain, remote.id, to_update_payload(desired, default_ttl)
                    )
                except ProviderError as e:
                    logger.error("Failed to update record %s: %s", key, e)
                    errors.append(RecordOperationError("update", key, e))
                    continue
            updated.append(desired)

        for key in sorted(remote_by_key):
            if key in desired_by_key:
                continue

            remote = remote_by_key[key]
            logger.info(
                "Deleting record: %s %s -> %s (ID: %s)",
                remote.sub_domain,
                remote.field_type,
                remote.target,
                remote.id,
            )
            if not dry_run:
                try:
                    self.provider.delete_record(domain, remote.id)
                except ProviderError as e:
                    logger.error("Failed to delete record %s: %s", key, e)
                    errors.append(RecordOperationError("delete", key, e))
                    continue
            deleted.append(remote)

        if (created or updated or deleted) and not dry_run:
            logger.info("Refreshing DNS zone %s", domain)
            try:
                self.provider.refresh_zone(domain)
            except ProviderError as e:
                logger.error("Failed to refresh zone %s: %s", domain, e)
                errors.append(RefreshError(f"failed to refresh zone {domain}: {e}"))

        return SyncResult(
            created=tuple(created),
            updated=tuple(updated),
            deleted=tuple(deleted),
            errors=tuple(errors),
        )
