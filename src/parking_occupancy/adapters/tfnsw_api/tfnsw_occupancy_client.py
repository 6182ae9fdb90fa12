"""Occupancy client for the TfNSW car park API using aiohttp."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import TYPE_CHECKING, Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from parking_occupancy.adapters.api_request_logger import log_api_request, log_api_response
from parking_occupancy.adapters.tfnsw_api.api_models import ParkingApiResponse
from parking_occupancy.adapters.tfnsw_api.constants import (
    TFNSW_CARPARK_PATH,
    TFNSW_DEFAULT_BASE_URL,
)
from parking_occupancy.domain.errors import (
    DecodeError,
    InvalidRequestError,
    NetworkError,
    NoDataError,
)
from parking_occupancy.domain.ports.occupancy_client import OccupancyClient

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from parking_occupancy.domain.models.occupancy_snapshot import OccupancySnapshot

logger = logging.getLogger(__name__)

_FACILITY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_FACILITY_LIST_ADAPTER = TypeAdapter(dict[str, str])


class TfnswOccupancyClient(OccupancyClient):
    """Fetches facility occupancy from ``{base_url}/carpark``."""

    def __init__(
        self,
        session: ClientSession,
        api_key: str,
        base_url: str = TFNSW_DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            api_key: TfNSW open data API key.
            base_url: API base URL without trailing slash.
            timeout_seconds: Total timeout per request.
        """
        self._session = session
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def _headers(self) -> dict[str, str]:
        return {"accept": "application/json", "Authorization": f"apikey {self._api_key}"}

    async def _get_text(self, params: dict[str, str] | None = None) -> str:
        """GET the car park endpoint and return the body of a 200 response."""
        url = f"{self._base_url}{TFNSW_CARPARK_PATH}"
        log_api_request("GET", url, params=params, headers=self._headers)

        try:
            async with self._session.get(
                url, params=params, headers=self._headers, timeout=self._timeout
            ) as response:
                body = await response.text()
                log_api_response(url, response.status, body)
                if response.status != 200:
                    raise NetworkError(
                        f"Got response ({response.status}) from {url}: {body[:200]}",
                        status_code=response.status,
                    )
                return body
        except NetworkError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request to {url} timed out", cause=e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}", cause=e) from e

    @staticmethod
    def _decode_json(body: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Response is not valid JSON: {e}", cause=e) from e

    async def fetch_facility(self, facility_id: str) -> OccupancySnapshot:
        """Fetch occupancy for one facility.

        The API answers either with a single object or with a list of which
        the first element is used.
        """
        if not facility_id or not _FACILITY_ID_PATTERN.match(facility_id):
            raise InvalidRequestError(f"Invalid facility id: {facility_id!r}")

        logger.debug(f"Fetching facility {facility_id}")
        data = self._decode_json(await self._get_text({"facility": facility_id}))

        if isinstance(data, list):
            if not data:
                raise NoDataError(f"Empty response for facility {facility_id}")
            data = data[0]
        if not isinstance(data, dict):
            raise NoDataError(f"Unexpected response shape for facility {facility_id}")

        try:
            return ParkingApiResponse.model_validate(data).to_snapshot()
        except (ValidationError, ValueError) as e:
            raise DecodeError(f"Could not decode facility {facility_id}: {e}", cause=e) from e

    async def fetch_all_facilities(self) -> dict[str, str]:
        """Return every facility id with its display name, historical ones included."""
        data = self._decode_json(await self._get_text())
        try:
            facilities = _FACILITY_LIST_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise DecodeError(f"Could not decode facility list: {e}", cause=e) from e

        logger.info(f"Decoded {len(facilities)} facilities")
        return facilities
