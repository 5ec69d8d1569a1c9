"""Export live provider state into the declarative zone format."""

import logging

from zonesync.config import DNSZone
from zonesync.errors import ProviderError, ZoneFetchError
from zonesync.models import SUPPORTED_TYPES
from zonesync.providers.dns.base import DNSProvider
from zonesync.sync import convert_snapshot, find_duplicate_keys

logger = logging.getLogger(__name__)


def export_zone(domain: str, provider: DNSProvider) -> DNSZone:
    """Fetch every record of ``domain`` and convert it to a DNSZone.

    Records keep the order the provider returned them in.
    """
    try:
        remote_records = provider.fetch_records(domain)
    except ProviderError as e:
        raise ZoneFetchError(f"failed to fetch records for {domain}: {e}") from e

    records = convert_snapshot(domain, remote_records)

    for key in find_duplicate_keys(records):
        logger.warning("Record %s appears more than once; apply will refuse this zone", key)
    for record in records:
        if record.type not in SUPPORTED_TYPES:
            logger.warning(
                "Record %s:%s has an unsupported type; apply will reject it",
                record.name,
                record.type,
            )

    logger.info("Exported %d DNS records for domain %s", len(records), domain)
    return DNSZone(domain=domain, records=records)
