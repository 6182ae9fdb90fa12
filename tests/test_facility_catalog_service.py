"""Tests for the facility catalog service."""

from datetime import timedelta

import pytest

from parking_occupancy.adapters.store import InMemoryFacilityStore
from parking_occupancy.application.services import FacilityCatalogService
from parking_occupancy.domain.models import (
    CadenceGroup,
    Coordinate,
    OccupancySnapshot,
    StaticFacilityInfo,
)
from tests.fakes import START_TIME, FakeLocationProvider, FakeOccupancyClient

TALLAWONG = Coordinate(-33.693, 150.905)


def _info(facility_id: str, name: str, latitude: float, longitude: float) -> StaticFacilityInfo:
    return StaticFacilityInfo(
        facility_id=facility_id,
        name=name,
        suburb="",
        address="",
        latitude=latitude,
        longitude=longitude,
        total_spaces=100,
    )


@pytest.fixture
def catalog() -> list[StaticFacilityInfo]:
    return [
        _info("8", "Park&Ride - Gosford", -33.42526471, 151.340236),
        _info("26", "Park&Ride - Tallawong P1", -33.69304704, 150.9052577),
        _info("29", "Park&Ride - Kellyville (north)", -33.711156, 150.934364),
    ]


def _service(
    store: InMemoryFacilityStore, client: FakeOccupancyClient | None = None
) -> FacilityCatalogService:
    return FacilityCatalogService(store, FakeLocationProvider(TALLAWONG), client)


def test_load_inserts_records_nearest_first(catalog: list[StaticFacilityInfo]) -> None:
    """Given an empty store, when loading the catalog, then records are stored nearest first."""
    store = InMemoryFacilityStore()

    inserted = _service(store).load_static_facilities_if_needed(catalog)

    assert inserted == 3
    assert [record.facility_id for record in store.fetch_all()] == ["26", "29", "8"]
    assert store.save_count == 1


def test_load_classifies_cadence(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()

    _service(store).load_static_facilities_if_needed(catalog)

    groups = {record.facility_id: record.cadence_group for record in store.fetch_all()}
    assert groups == {
        "26": CadenceGroup.HIGH,
        "29": CadenceGroup.HIGH,
        "8": CadenceGroup.STANDARD,
    }


def test_new_records_have_no_data_and_are_due(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()

    _service(store).load_static_facilities_if_needed(catalog)

    for record in store.fetch_all():
        assert record.available_spots(START_TIME) is None
        assert record.is_due(START_TIME)


def test_load_is_skipped_when_store_has_records(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()
    service = _service(store)
    service.load_static_facilities_if_needed(catalog)

    assert service.load_static_facilities_if_needed(catalog) == 0
    assert len(store.fetch_all()) == 3
    assert store.save_count == 1


def test_duplicate_catalog_ids_are_inserted_once(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()

    inserted = _service(store).load_static_facilities_if_needed([*catalog, catalog[0]])

    assert inserted == 3
    assert len(store.fetch_all()) == 3


def test_reload_discards_favourites_and_data(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()
    service = _service(store)
    service.load_static_facilities_if_needed(catalog)
    record = store.get("26")
    assert record is not None
    record.toggle_favourite()

    assert service.reload_static_facilities(catalog) == 3

    reloaded = store.get("26")
    assert reloaded is not None
    assert reloaded is not record
    assert not reloaded.is_favourite


def test_facility_stats_counts_valid_data(catalog: list[StaticFacilityInfo]) -> None:
    store = InMemoryFacilityStore()
    service = _service(store)
    service.load_static_facilities_if_needed(catalog)
    record = store.get("26")
    assert record is not None
    record.toggle_favourite()
    record.update_from_snapshot(
        OccupancySnapshot(facility_id="26", facility_name="", total_spaces=123, occupied=3),
        START_TIME,
    )

    stats = service.facility_stats(START_TIME)
    assert (stats.total_count, stats.with_occupancy_data, stats.favourite_count) == (3, 1, 1)
    assert stats.description == "3 facilities, 1 with data (33%), 1 favourites"

    expired = service.facility_stats(START_TIME + timedelta(minutes=20))
    assert expired.with_occupancy_data == 0


@pytest.mark.asyncio
async def test_enumerate_excludes_historical_entries() -> None:
    client = FakeOccupancyClient()
    client.facilities = {
        "1": "Park&Ride - Tallawong (historical only)",
        "2": "Park&Ride - Kellyville (HISTORICAL ONLY)",
        "26": "Park&Ride - Tallawong P1",
    }

    result = await _service(InMemoryFacilityStore(), client).enumerate_remote_facilities()

    assert result == {"26": "Park&Ride - Tallawong P1"}


@pytest.mark.asyncio
async def test_enumerate_requires_client() -> None:
    with pytest.raises(ValueError, match="occupancy client is required"):
        await _service(InMemoryFacilityStore()).enumerate_remote_facilities()
