"""Abstract base class for DNS providers."""

from abc import ABC, abstractmethod

from zonesync.models import CreatePayload, RemoteRecord, UpdatePayload


class DNSProvider(ABC):
    """Abstract DNS provider interface.

    Every method raises ProviderError when the call fails, whether the
    cause is connectivity, a timeout or an error status from the API.
    """

    @abstractmethod
    def list_record_ids(self, zone: str) -> list[int]:
        """List the ids of every record in a zone.

        Args:
            zone: The zone name (e.g., "example.com")

        Returns:
            Record ids in provider order
        """
        pass

    @abstractmethod
    def get_record(self, zone: str, record_id: int) -> RemoteRecord:
        """Fetch a single record.

        Args:
            zone: The zone name
            record_id: Provider-assigned record id
        """
        pass

    @abstractmethod
    def create_record(self, zone: str, payload: CreatePayload) -> RemoteRecord:
        """Create a record and return it with its assigned id.

        Args:
            zone: The zone name
            payload: Name, type, target, TTL and optional priority
        """
        pass

    @abstractmethod
    def update_record(self, zone: str, record_id: int, payload: UpdatePayload) -> None:
        """Update an existing record in place.

        Args:
            zone: The zone name
            record_id: Id of the record to update
            payload: New target, TTL and optional priority
        """
        pass

    @abstractmethod
    def delete_record(self, zone: str, record_id: int) -> None:
        """Delete a record.

        Args:
            zone: The zone name
            record_id: Id of the record to delete
        """
        pass

    @abstractmethod
    def refresh_zone(self, zone: str) -> None:
        """Ask the provider to apply pending changes to the zone.

        Args:
            zone: The zone name
        """
        pass

    def fetch_records(self, zone: str) -> list[RemoteRecord]:
        """Fetch every record of a zone, preserving provider order."""
        return [self.get_record(zone, record_id) for record_id in self.list_record_ids(zone)]
