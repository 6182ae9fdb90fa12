"""Tests for FacilityRecord refresh, backoff and cache behaviour."""

from datetime import timedelta

import pytest

from parking_occupancy.domain.models import (
    AppState,
    AvailabilityStatus,
    CadenceGroup,
    FacilityRecord,
    OccupancySnapshot,
    StaticFacilityInfo,
    failure_backoff_seconds,
    success_interval_seconds,
)
from parking_occupancy.domain.models.facility_record import FAR_PAST
from tests.fakes import START_TIME, make_record


def _snapshot(occupied: int, total: int = 100) -> OccupancySnapshot:
    return OccupancySnapshot(
        facility_id="1", facility_name="Park&Ride - Test", total_spaces=total, occupied=occupied
    )


def test_new_record_is_immediately_due_without_data() -> None:
    """Given a fresh record, then it is due now and reports no data."""
    record = make_record("1")

    assert record.next_scheduled_refresh_at == FAR_PAST
    assert record.is_due(START_TIME)
    assert record.available_spots(START_TIME) is None
    assert record.availability_status(START_TIME) is AvailabilityStatus.NO_DATA
    assert record.consecutive_failures == 0


@pytest.mark.parametrize(
    ("occupied", "available", "status"),
    [
        (98, 2, AvailabilityStatus.ALMOST_FULL),
        (100, 0, AvailabilityStatus.FULL),
        (0, 100, AvailabilityStatus.AVAILABLE),
        (120, 0, AvailabilityStatus.FULL),
    ],
)
def test_successful_fetch_classifies_availability(
    occupied: int, available: int, status: AvailabilityStatus
) -> None:
    """Given a 100 space record, when a fetch succeeds, then availability follows the counts."""
    record = make_record("1", total_spaces=100)

    record.update_from_snapshot(_snapshot(occupied), START_TIME)

    assert record.available_spots(START_TIME) == available
    assert record.availability_status(START_TIME) is status


def test_cache_expires_after_fifteen_minutes() -> None:
    """Given cached data, when it reaches 15 minutes of age, then reads return no data."""
    record = make_record("1")
    record.update_from_snapshot(_snapshot(40), START_TIME)

    just_valid = START_TIME + timedelta(minutes=15) - timedelta(seconds=1)
    assert record.available_spots(just_valid) == 60
    assert record.occupied_spots(just_valid) == 40

    expired = START_TIME + timedelta(minutes=15)
    assert record.available_spots(expired) is None
    assert record.occupied_spots(expired) is None
    assert record.occupancy_percentage(expired) is None
    assert record.availability_status(expired) is AvailabilityStatus.NO_DATA


def test_snapshot_total_replaces_catalog_capacity() -> None:
    """Given a snapshot with a positive total, then the record takes it over."""
    record = make_record("1", total_spaces=100)

    record.update_from_snapshot(_snapshot(occupied=50, total=200), START_TIME)

    assert record.total_spaces == 200
    assert record.available_spots(START_TIME) == 150
    assert record.occupancy_percentage(START_TIME) == 25.0


def test_message_date_becomes_last_updated() -> None:
    message_date = START_TIME - timedelta(minutes=2)
    snapshot = OccupancySnapshot(
        facility_id="1",
        facility_name="Test",
        total_spaces=100,
        occupied=1,
        message_date=message_date,
    )
    record = make_record("1")

    record.update_from_snapshot(snapshot, START_TIME)

    assert record.last_updated == message_date
    assert record.occupancy_cached_at == START_TIME


@pytest.mark.parametrize(
    ("failures", "expected"),
    [(1, 240.0), (2, 480.0), (3, 960.0), (4, 1800.0), (10, 1800.0)],
)
def test_failure_backoff_doubles_up_to_cap(failures: int, expected: float) -> None:
    assert failure_backoff_seconds(failures) == expected


def test_failure_increments_by_exactly_one_and_keeps_cache() -> None:
    """Given cached data, when fetches fail, then failures count up and the cache stays."""
    record = make_record("1")
    record.update_from_snapshot(_snapshot(30), START_TIME)

    for expected in (1, 2, 3):
        record.mark_refresh_failed(START_TIME)
        assert record.consecutive_failures == expected

    assert record.last_failure_at == START_TIME
    assert record.cached_occupied == 30
    assert record.available_spots(START_TIME) == 70


def test_three_failures_use_failure_backoff_not_success_interval() -> None:
    """Given a standard non-favourite record, when it fails three times, then it waits 960s."""
    record = make_record("1")
    assert record.cadence_group is CadenceGroup.STANDARD

    for _ in range(3):
        record.mark_refresh_failed(START_TIME)

    assert record.next_scheduled_refresh_at == START_TIME + timedelta(seconds=960)
    assert success_interval_seconds(CadenceGroup.STANDARD, AppState.ACTIVE, False, 3) == 480.0


def test_success_resets_failures_and_schedules_base_interval() -> None:
    """Given a failing record, when a fetch succeeds, then the base interval applies."""
    record = make_record("1")
    record.mark_refresh_failed(START_TIME)
    record.mark_refresh_failed(START_TIME)

    record.update_from_snapshot(_snapshot(10), START_TIME)
    record.schedule_next_refresh(AppState.ACTIVE, START_TIME)

    assert record.consecutive_failures == 0
    assert record.last_failure_at is None
    assert record.last_refreshed_at == START_TIME
    assert record.next_scheduled_refresh_at == START_TIME + timedelta(seconds=60)


def test_favourite_interval_is_lower() -> None:
    """Given equal cadence and no failures, then a favourite refreshes twice as often."""
    for group in CadenceGroup:
        for state in AppState:
            favourite = success_interval_seconds(group, state, True, 0)
            regular = success_interval_seconds(group, state, False, 0)
            assert favourite < regular
            assert favourite == regular * 0.5


@pytest.mark.parametrize(
    ("group", "state", "expected"),
    [
        (CadenceGroup.HIGH, AppState.ACTIVE, 15.0),
        (CadenceGroup.HIGH, AppState.BACKGROUND, 300.0),
        (CadenceGroup.STANDARD, AppState.ACTIVE, 60.0),
        (CadenceGroup.STANDARD, AppState.BACKGROUND, 600.0),
    ],
)
def test_cadence_intervals(group: CadenceGroup, state: AppState, expected: float) -> None:
    assert success_interval_seconds(group, state, False, 0) == expected


def test_success_interval_failure_multiplier_is_capped() -> None:
    assert success_interval_seconds(CadenceGroup.HIGH, AppState.ACTIVE, False, 4) == 240.0
    assert success_interval_seconds(CadenceGroup.HIGH, AppState.ACTIVE, False, 9) == 240.0


def test_cadence_group_is_classified_once_from_name() -> None:
    """Given a Tallawong facility, then it is high cadence even after a rename."""
    info = StaticFacilityInfo(
        facility_id="26",
        name="Park&Ride - Tallawong P1",
        suburb="Tallawong",
        address="Conferta Avenue",
        latitude=-33.69304704,
        longitude=150.9052577,
        total_spaces=123,
    )
    record = FacilityRecord.from_static_info(info)

    assert record.cadence_group is CadenceGroup.HIGH
    record.name = "Park&Ride - Gosford"
    assert record.cadence_group is CadenceGroup.HIGH
    with pytest.raises(AttributeError):
        record.cadence_group = CadenceGroup.STANDARD  # type: ignore[misc]


def test_cadence_group_is_set_through_constructor_keyword() -> None:
    record = make_record("1", cadence=CadenceGroup.HIGH)

    assert record.cadence_group is CadenceGroup.HIGH
    assert make_record("2").cadence_group is CadenceGroup.STANDARD
    with pytest.raises(TypeError):
        FacilityRecord(  # type: ignore[call-arg]
            facility_id="3",
            name="Park&Ride - Gosford",
            suburb="Gosford",
            address="Showground Road",
            latitude=-33.42,
            longitude=151.34,
            total_spaces=100,
            _cadence_group=CadenceGroup.HIGH,
        )


def test_custom_high_cadence_list() -> None:
    info = StaticFacilityInfo(
        facility_id="8",
        name="Park&Ride - Gosford",
        suburb="Gosford",
        address="Showground Road",
        latitude=-33.42526471,
        longitude=151.340236,
        total_spaces=1059,
    )

    assert FacilityRecord.from_static_info(info).cadence_group is CadenceGroup.STANDARD
    assert FacilityRecord.from_static_info(info, ["gosford"]).cadence_group is CadenceGroup.HIGH


def test_time_since_last_refresh() -> None:
    record = make_record("1")
    assert record.time_since_last_refresh(START_TIME) == float("inf")

    record.update_from_snapshot(_snapshot(1), START_TIME)

    assert record.time_since_last_refresh(START_TIME + timedelta(seconds=45)) == 45.0


def test_reset_refresh_state_makes_record_due() -> None:
    record = make_record("1")
    record.mark_refresh_failed(START_TIME)

    record.reset_refresh_state()

    assert record.consecutive_failures == 0
    assert record.last_failure_at is None
    assert record.last_refreshed_at is None
    assert record.is_due(START_TIME)


def test_user_interaction_fields() -> None:
    record = make_record("1")

    assert record.toggle_favourite() is True
    assert record.is_favourite
    assert record.toggle_favourite() is False

    record.mark_visited(START_TIME)
    assert record.last_visited == START_TIME
