"""In-memory facility store with an optional JSON snapshot file."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from parking_occupancy.domain.models.cadence_group import CadenceGroup
from parking_occupancy.domain.models.facility_record import FAR_PAST, FacilityRecord
from parking_occupancy.domain.models.occupancy_snapshot import ZoneOccupancy
from parking_occupancy.domain.ports.facility_store import FacilityStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _load_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def record_to_dict(record: FacilityRecord) -> dict[str, Any]:
    """Serialise a record for the snapshot file."""
    return {
        "facility_id": record.facility_id,
        "name": record.name,
        "suburb": record.suburb,
        "address": record.address,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "total_spaces": record.total_spaces,
        "tsn": record.tsn,
        "tfnsw_facility_id": record.tfnsw_facility_id,
        "is_favourite": record.is_favourite,
        "last_visited": _dump_datetime(record.last_visited),
        "last_updated": _dump_datetime(record.last_updated),
        "cadence_group": record.cadence_group.value,
        "cached_occupied": record.cached_occupied,
        "cached_available": record.cached_available,
        "occupancy_cached_at": _dump_datetime(record.occupancy_cached_at),
        "zones": [
            {
                "zone_id": zone.zone_id,
                "zone_name": zone.zone_name,
                "total_spaces": zone.total_spaces,
                "occupied": zone.occupied,
                "parent_zone_id": zone.parent_zone_id,
            }
            for zone in record.zones
        ],
        "last_refreshed_at": _dump_datetime(record.last_refreshed_at),
        "next_scheduled_refresh_at": _dump_datetime(record.next_scheduled_refresh_at),
        "consecutive_failures": record.consecutive_failures,
        "last_failure_at": _dump_datetime(record.last_failure_at),
    }


def record_from_dict(data: dict[str, Any]) -> FacilityRecord:
    """Rebuild a record from the snapshot file; the stored cadence group is kept."""
    return FacilityRecord(
        facility_id=str(data["facility_id"]),
        name=data["name"],
        suburb=data.get("suburb", ""),
        address=data.get("address", ""),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        total_spaces=int(data["total_spaces"]),
        tsn=data.get("tsn", ""),
        tfnsw_facility_id=data.get("tfnsw_facility_id", ""),
        is_favourite=bool(data.get("is_favourite", False)),
        last_visited=_load_datetime(data.get("last_visited")),
        last_updated=_load_datetime(data.get("last_updated")),
        cadence=CadenceGroup(data.get("cadence_group", CadenceGroup.STANDARD.value)),
        cached_occupied=data.get("cached_occupied"),
        cached_available=data.get("cached_available"),
        occupancy_cached_at=_load_datetime(data.get("occupancy_cached_at")),
        zones=[ZoneOccupancy(**zone) for zone in data.get("zones", [])],
        last_refreshed_at=_load_datetime(data.get("last_refreshed_at")),
        next_scheduled_refresh_at=(
            _load_datetime(data.get("next_scheduled_refresh_at")) or FAR_PAST
        ),
        consecutive_failures=int(data.get("consecutive_failures", 0)),
        last_failure_at=_load_datetime(data.get("last_failure_at")),
    )


class InMemoryFacilityStore(FacilityStore):
    """Keyed record collection preserving insertion order.

    With a ``path``, ``save`` writes a JSON snapshot and the constructor loads
    an existing one.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize the store.

        Args:
            path: Optional snapshot file location.
        """
        self._records: dict[str, FacilityRecord] = {}
        self._path = Path(path) if path is not None else None
        self.save_count = 0
        if self._path is not None and self._path.exists():
            self._load(self._path)

    def fetch_all(self) -> list[FacilityRecord]:
        return list(self._records.values())

    def fetch_favourites(self) -> list[FacilityRecord]:
        return [record for record in self._records.values() if record.is_favourite]

    def get(self, facility_id: str) -> FacilityRecord | None:
        return self._records.get(facility_id)

    def insert(self, record: FacilityRecord) -> None:
        if record.facility_id in self._records:
            raise ValueError(f"Facility {record.facility_id} already stored")
        self._records[record.facility_id] = record

    def delete_all(self) -> None:
        self._records.clear()

    def save(self) -> None:
        """Commit changes, writing the snapshot file when one is configured."""
        self.save_count += 1
        if self._path is None:
            return

        payload = {
            "version": SNAPSHOT_VERSION,
            "facilities": [record_to_dict(record) for record in self._records.values()],
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(self._path)
        logger.debug(f"Saved {len(self._records)} facilities to {self._path}")

    def _load(self, path: Path) -> None:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)

        if payload.get("version") != SNAPSHOT_VERSION:
            raise ValueError(
                f"Unsupported facility snapshot version {payload.get('version')} in {path}"
            )
        for data in payload.get("facilities", []):
            record = record_from_dict(data)
            self._records[record.facility_id] = record
        logger.info(f"Loaded {len(self._records)} facilities from {path}")
