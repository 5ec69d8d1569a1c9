"""OVH DNS provider implementation."""

import hashlib
import json
import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from zonesync.errors import APIError, ProviderError
from zonesync.models import CreatePayload, RemoteRecord, UpdatePayload
from zonesync.providers.dns.base import DNSProvider

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "ovh-eu": "https://eu.api.ovh.com/1.0",
    "ovh-ca": "https://ca.api.ovh.com/1.0",
    "ovh-us": "https://api.ovhcloud.com/1.0",
}


def resolve_endpoint(endpoint: str) -> str:
    """Map an endpoint alias to its base URL.

    Anything starting with "http" is used as-is, unknown aliases fall
    back to the European API.
    """
    if endpoint in ENDPOINTS:
        return ENDPOINTS[endpoint]
    if endpoint.startswith("http"):
        return endpoint.rstrip("/")
    return ENDPOINTS["ovh-eu"]


class OVHProvider(DNSProvider):
    """DNS provider implementation for the OVH API."""

    def __init__(
        self,
        application_key: str,
        application_secret: str,
        consumer_key: str,
        endpoint: str = "ovh-eu",
        timeout: float = 30.0,
    ):
        """Initialize OVH provider.

        Args:
            application_key: OVH application key
            application_secret: OVH application secret
            consumer_key: OVH consumer key
            endpoint: Endpoint alias (ovh-eu, ovh-ca, ovh-us) or base URL
            timeout: Per-request timeout in seconds
        """
        self.application_key = application_key
        self.application_secret = application_secret
        self.consumer_key = consumer_key
        self.base_url = resolve_endpoint(endpoint)
        self.client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def _sign(self, method: str, url: str, body: str, timestamp: int) -> str:
        """Compute the request signature (SHA1 is mandated by the API)."""
        raw = "+".join(
            [
                self.application_secret,
                self.consumer_key,
                method,
                url,
                body,
                str(timestamp),
            ]
        )
        return "$1$" + hashlib.sha1(raw.encode("utf-8")).hexdigest()

    def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Send a signed request and map failures to ProviderError."""
        body = json.dumps(payload) if payload is not None else ""
        timestamp = int(time.time())
        headers = {
            "X-Ovh-Application": self.application_key,
            "X-Ovh-Consumer": self.consumer_key,
            "X-Ovh-Timestamp": str(timestamp),
            "X-Ovh-Signature": self._sign(method, f"{self.base_url}{path}", body, timestamp),
        }
        logger.debug("%s %s", method, path)

        try:
            response = self.client.request(method, path, content=body or None, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise APIError(e.response.status_code, e.response.text.strip()) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"request failed: {e}") from e

        return response

    def _read_record(self, response: httpx.Response) -> RemoteRecord:
        try:
            return RemoteRecord.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderError(f"failed to parse record: {e}") from e

    def list_record_ids(self, zone: str) -> list[int]:
        """List the ids of every record in a zone."""
        response = self._request("GET", f"/domain/zone/{zone}/record")
        try:
            return [int(record_id) for record_id in response.json()]
        except (TypeError, ValueError) as e:
            raise ProviderError(f"failed to parse record list: {e}") from e

    def get_record(self, zone: str, record_id: int) -> RemoteRecord:
        """Fetch a single record."""
        response = self._request("GET", f"/domain/zone/{zone}/record/{record_id}")
        return self._read_record(response)

    def create_record(self, zone: str, payload: CreatePayload) -> RemoteRecord:
        """Create a record."""
        response = self._request("POST", f"/domain/zone/{zone}/record", payload.to_json())
        return self._read_record(response)

    def update_record(self, zone: str, record_id: int, payload: UpdatePayload) -> None:
        """Update a record in place."""
        self._request("PUT", f"/domain/zone/{zone}/record/{record_id}", payload.to_json())

    def delete_record(self, zone: str, record_id: int) -> None:
        """Delete a record."""
        self._request("DELETE", f"/domain/zone/{zone}/record/{record_id}")

    def refresh_zone(self, zone: str) -> None:
        """Apply pending changes to the zone."""
        self._request("POST", f"/domain/zone/{zone}/refresh")
