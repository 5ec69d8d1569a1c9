"""DNS provider implementations."""

from zonesync.providers.dns.base import DNSProvider
from zonesync.providers.dns.ovh import OVHProvider

__all__ = ["DNSProvider", "OVHProvider"]
