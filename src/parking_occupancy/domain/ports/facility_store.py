"""Facility store port."""

from typing import Protocol

from parking_occupancy.domain.models.facility_record import FacilityRecord


class FacilityStore(Protocol):
    """Port for the durable keyed collection of facility records.

    Mutations of returned records are only made durable by ``save``.
    """

    def fetch_all(self) -> list[FacilityRecord]:
        """Return all records in store order."""
        ...

    def fetch_favourites(self) -> list[FacilityRecord]:
        """Return favourite records in store order."""
        ...

    def get(self, facility_id: str) -> FacilityRecord | None:
        """Return the record with the given id, if any."""
        ...

    def insert(self, record: FacilityRecord) -> None:
        """Add a record."""
        ...

    def delete_all(self) -> None:
        """Remove every record."""
        ...

    def save(self) -> None:
        """Commit pending changes."""
        ...
