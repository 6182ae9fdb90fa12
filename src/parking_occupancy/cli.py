"""CLI helpers for inspecting car park facilities and occupancy."""

import asyncio
import json
import sys
from datetime import UTC, datetime
from typing import Any

import aiohttp

from parking_occupancy.adapters.config import AppConfig, FacilityCatalogLoader
from parking_occupancy.adapters.location import StaticLocationProvider
from parking_occupancy.adapters.store import InMemoryFacilityStore
from parking_occupancy.adapters.tfnsw_api import TfnswOccupancyClient
from parking_occupancy.application.services import FacilityCatalogService
from parking_occupancy.domain.models import (
    AvailabilityStatus,
    CadenceGroup,
    OccupancySnapshot,
    StaticFacilityInfo,
)


def _build_client(session: aiohttp.ClientSession, config: AppConfig) -> TfnswOccupancyClient:
    if not config.tfnsw_api_key:
        raise ValueError("TFNSW_API_KEY is not set")
    return TfnswOccupancyClient(
        session,
        api_key=config.tfnsw_api_key,
        base_url=config.api_base_url,
        timeout_seconds=config.api_timeout_seconds,
    )


def snapshot_to_dict(snapshot: OccupancySnapshot) -> dict[str, Any]:
    """Flatten an occupancy snapshot for JSON output."""
    status = AvailabilityStatus.classify(snapshot.available_spots, snapshot.total_spaces)
    return {
        "facility_id": snapshot.facility_id,
        "name": snapshot.facility_name,
        "suburb": snapshot.suburb,
        "total_spaces": snapshot.total_spaces,
        "occupied": snapshot.occupied,
        "available": snapshot.available_spots,
        "status": status.value,
        "message_date": snapshot.message_date.isoformat() if snapshot.message_date else None,
        "zones": [
            {
                "zone_id": zone.zone_id,
                "zone_name": zone.zone_name,
                "total_spaces": zone.total_spaces,
                "occupied": zone.occupied,
            }
            for zone in snapshot.zones
        ],
    }


def format_snapshot(snapshot: OccupancySnapshot) -> str:
    """Render an occupancy snapshot as human-readable lines."""
    status = AvailabilityStatus.classify(snapshot.available_spots, snapshot.total_spaces)
    lines = [
        f"{snapshot.facility_name} (ID: {snapshot.facility_id})",
        f"  {snapshot.available_spots}/{snapshot.total_spaces} spaces available - {status.text}",
    ]
    if snapshot.message_date is not None:
        lines.append(f"  Updated: {snapshot.message_date:%Y-%m-%d %H:%M:%S %Z}")
    for zone in snapshot.zones:
        free = max(0, zone.total_spaces - zone.occupied)
        lines.append(f"    {zone.zone_name}: {free}/{zone.total_spaces}")
    return "\n".join(lines)


def catalog_rows(
    catalog: list[StaticFacilityInfo], high_cadence_names: list[str] | None = None
) -> list[dict[str, Any]]:
    """Describe each configured facility with its cadence group."""
    return [
        {
            "facility_id": info.facility_id,
            "name": info.name,
            "suburb": info.suburb,
            "total_spaces": info.total_spaces,
            "cadence": CadenceGroup.classify(info.name, high_cadence_names).value,
        }
        for info in catalog
    ]


async def list_facilities(config: AppConfig, format_json: bool = False) -> None:
    """Print facilities known to the remote API."""
    async with aiohttp.ClientSession() as session:
        client = _build_client(session, config)
        service = FacilityCatalogService(InMemoryFacilityStore(), StaticLocationProvider(), client)
        facilities = await service.enumerate_remote_facilities()

    if format_json:
        print(json.dumps(facilities, indent=2, ensure_ascii=False))
        return

    print(f"Found {len(facilities)} facilities:\n")
    for facility_id, name in sorted(facilities.items(), key=lambda item: item[1]):
        print(f"  {facility_id:>4}  {name}")


async def show_facility_status(
    config: AppConfig, facility_id: str, format_json: bool = False
) -> None:
    """Fetch and print the live occupancy of one facility."""
    async with aiohttp.ClientSession() as session:
        client = _build_client(session, config)
        snapshot = await client.fetch_facility(facility_id)

    if format_json:
        print(json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False))
    else:
        print(format_snapshot(snapshot))
        print(f"  Fetched: {datetime.now(UTC):%Y-%m-%d %H:%M:%S} UTC")


def show_catalog(config: AppConfig, format_json: bool = False) -> None:
    """Print the facility catalog from the config file."""
    catalog = FacilityCatalogLoader.load(config)
    rows = catalog_rows(catalog, config.high_cadence_names)

    if format_json:
        print(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    print(f"{len(rows)} facilities configured in {config.config_file}:\n")
    for row in rows:
        print(f"  {row['facility_id']:>4}  {row['name']} ({row['suburb']})")
        print(f"        {row['total_spaces']} spaces, {row['cadence']} cadence")


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Parking Occupancy Helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List all facilities known to the API
  parking-occupancy-cli list

  # Show live occupancy for a facility
  parking-occupancy-cli status 26

  # Show the configured catalog
  parking-occupancy-cli catalog --json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    list_parser = subparsers.add_parser("list", help="List facilities known to the API")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # Status command
    status_parser = subparsers.add_parser("status", help="Show live occupancy for a facility")
    status_parser.add_argument("facility_id", help="Facility ID (e.g., 26)")
    status_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # Catalog command
    catalog_parser = subparsers.add_parser("catalog", help="Show the configured facility catalog")
    catalog_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = AppConfig()

    try:
        if args.command == "list":
            await list_facilities(config, format_json=args.json)

        elif args.command == "status":
            await show_facility_status(config, args.facility_id, format_json=args.json)

        elif args.command == "catalog":
            show_catalog(config, format_json=args.json)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
