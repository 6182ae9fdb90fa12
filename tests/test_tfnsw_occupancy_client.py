"""Tests for the TfNSW occupancy client."""

import asyncio
import json
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from parking_occupancy.adapters.tfnsw_api import TfnswOccupancyClient
from parking_occupancy.domain.errors import (
    DecodeError,
    InvalidRequestError,
    NetworkError,
    NoDataError,
)

TALLAWONG_P1: dict[str, Any] = {
    "tsn": "2155384",
    "time": "1750633872",
    "spots": "123",
    "zones": [
        {
            "spots": "123",
            "zone_id": "1",
            "occupancy": {"loop": "118", "total": "118", "monthlies": None},
            "zone_name": "Tallawong P1",
            "parent_zone_id": "0",
        }
    ],
    "ParkID": "1",
    "occupancy": {"loop": "118", "total": "118", "transients": "118"},
    "MessageDate": "2025-06-23T08:31:12",
    "facility_id": "26",
    "facility_name": "Park&Ride - Tallawong P1",
    "tfnsw_facility_id": "2155384TPR001",
    "location": {
        "suburb": "Tallawong",
        "address": "Conferta Avenue",
        "latitude": "-33.69304704",
        "longitude": "150.9052577",
    },
}


def _mock_session(body: str, status: int = 200) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=body)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=context)
    return session


def _client(session: MagicMock) -> TfnswOccupancyClient:
    return TfnswOccupancyClient(session, api_key="secret", base_url="https://example.test/v1/")


@pytest.mark.asyncio
async def test_fetch_facility_decodes_snapshot() -> None:
    session = _mock_session(json.dumps(TALLAWONG_P1))

    snapshot = await _client(session).fetch_facility("26")

    assert snapshot.facility_id == "26"
    assert snapshot.facility_name == "Park&Ride - Tallawong P1"
    assert snapshot.total_spaces == 123
    assert snapshot.occupied == 118
    assert snapshot.available_spots == 5
    # Naive feed time is Sydney local time (AEST, UTC+10 in June)
    assert snapshot.message_date == datetime(2025, 6, 22, 22, 31, 12, tzinfo=UTC)
    assert snapshot.latitude == pytest.approx(-33.69304704)
    assert snapshot.tfnsw_facility_id == "2155384TPR001"
    assert len(snapshot.zones) == 1
    assert snapshot.zones[0].zone_name == "Tallawong P1"
    assert snapshot.zones[0].occupied == 118


@pytest.mark.asyncio
async def test_message_date_with_offset_is_converted_to_utc() -> None:
    body = {**TALLAWONG_P1, "MessageDate": "2025-12-23T08:31:12+11:00"}
    session = _mock_session(json.dumps(body))

    snapshot = await _client(session).fetch_facility("26")

    assert snapshot.message_date == datetime(2025, 12, 22, 21, 31, 12, tzinfo=UTC)
    assert snapshot.message_date is not None
    assert snapshot.message_date.tzinfo is UTC


@pytest.mark.asyncio
async def test_fetch_facility_sends_api_key_and_facility_param() -> None:
    session = _mock_session(json.dumps(TALLAWONG_P1))

    await _client(session).fetch_facility("26")

    args, kwargs = session.get.call_args
    assert args[0] == "https://example.test/v1/carpark"
    assert kwargs["params"] == {"facility": "26"}
    assert kwargs["headers"]["Authorization"] == "apikey secret"


@pytest.mark.asyncio
async def test_fetch_facility_uses_first_list_element() -> None:
    session = _mock_session(json.dumps([TALLAWONG_P1, {**TALLAWONG_P1, "facility_id": "27"}]))

    snapshot = await _client(session).fetch_facility("26")

    assert snapshot.facility_id == "26"


@pytest.mark.asyncio
@pytest.mark.parametrize("facility_id", ["", "26&facility=27", "../admin", "26 "])
async def test_invalid_facility_id_is_rejected_without_request(facility_id: str) -> None:
    session = _mock_session("{}")

    with pytest.raises(InvalidRequestError):
        await _client(session).fetch_facility(facility_id)

    session.get.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["[]", '"text"', "42"])
async def test_unexpected_shape_is_no_data(body: str) -> None:
    session = _mock_session(body)

    with pytest.raises(NoDataError) as exc_info:
        await _client(session).fetch_facility("26")

    assert exc_info.value.details.kind == "no_data"


@pytest.mark.asyncio
async def test_invalid_json_is_decode_error() -> None:
    session = _mock_session("<html>maintenance</html>")

    with pytest.raises(DecodeError):
        await _client(session).fetch_facility("26")


@pytest.mark.asyncio
async def test_schema_mismatch_is_decode_error() -> None:
    broken = {key: value for key, value in TALLAWONG_P1.items() if key != "spots"}
    session = _mock_session(json.dumps(broken))

    with pytest.raises(DecodeError) as exc_info:
        await _client(session).fetch_facility("26")

    assert exc_info.value.cause is not None


@pytest.mark.asyncio
async def test_non_numeric_count_is_decode_error() -> None:
    session = _mock_session(json.dumps({**TALLAWONG_P1, "spots": "many"}))

    with pytest.raises(DecodeError):
        await _client(session).fetch_facility("26")


@pytest.mark.asyncio
async def test_http_error_status_is_network_error() -> None:
    session = _mock_session('{"ErrorDetails": {"Message": "Unauthorized"}}', status=401)

    with pytest.raises(NetworkError) as exc_info:
        await _client(session).fetch_facility("26")

    assert exc_info.value.status_code == 401
    assert exc_info.value.details.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [aiohttp.ClientConnectionError("reset"), asyncio.TimeoutError()]
)
async def test_transport_failure_is_network_error(error: Exception) -> None:
    session = MagicMock()
    session.get = MagicMock(side_effect=error)

    with pytest.raises(NetworkError) as exc_info:
        await _client(session).fetch_facility("26")

    assert exc_info.value.cause is error


@pytest.mark.asyncio
async def test_fetch_all_facilities_returns_mapping() -> None:
    facilities = {"1": "Park&Ride - Old Site (historical only)", "26": "Park&Ride - Tallawong P1"}
    session = _mock_session(json.dumps(facilities))

    result = await _client(session).fetch_all_facilities()

    assert result == facilities
    _, kwargs = session.get.call_args
    assert kwargs["params"] is None


@pytest.mark.asyncio
async def test_fetch_all_facilities_rejects_wrong_shape() -> None:
    session = _mock_session(json.dumps(["26", "27"]))

    with pytest.raises(DecodeError):
        await _client(session).fetch_all_facilities()
