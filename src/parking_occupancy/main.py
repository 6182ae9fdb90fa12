"""Main entry point for the parking occupancy refresh service."""

import asyncio
import logging
import signal
import sys

import aiohttp

from parking_occupancy.adapters.api_rate_limiter import ApiRateLimiter
from parking_occupancy.adapters.broadcasters import StateBroadcaster
from parking_occupancy.adapters.clock import SystemClock
from parking_occupancy.adapters.config import AppConfig, FacilityCatalogLoader
from parking_occupancy.adapters.lifecycle import AppLifecycleObserver
from parking_occupancy.adapters.location import StaticLocationProvider
from parking_occupancy.adapters.store import InMemoryFacilityStore
from parking_occupancy.adapters.tfnsw_api import TfnswOccupancyClient
from parking_occupancy.adapters.tfnsw_api.constants import TFNSW_API_NAME
from parking_occupancy.application.services import FacilityCatalogService, RefreshScheduler
from parking_occupancy.domain.models import AppState, Coordinate, RefreshState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def _log_state_updates(queue: "asyncio.Queue[RefreshState]") -> None:
    """Log initial load progress as it is published."""
    last_description = ""
    while True:
        state = await queue.get()
        description = state.initial_load_progress.description
        if description != last_description:
            logger.info(
                f"Progress: {description} ({state.initial_load_progress.progress_fraction:.0%}), "
                f"stats: {state.refresh_stats.description}"
            )
            last_description = description


def log_lifecycle_change(state: AppState) -> None:
    """Report the cycle interval that applies from the next tick on."""
    logger.info(f"App is now {state.value}, refresh cycles every {state.refresh_interval:.0f}s")


def _install_signal_handlers(
    stop_event: asyncio.Event, lifecycle: AppLifecycleObserver
) -> None:
    """Map SIGINT/SIGTERM to shutdown and SIGUSR1/SIGUSR2 to background/foreground."""
    loop = asyncio.get_running_loop()
    handlers = {
        signal.SIGINT: stop_event.set,
        signal.SIGTERM: stop_event.set,
    }
    if hasattr(signal, "SIGUSR1"):
        handlers[signal.SIGUSR1] = lifecycle.did_enter_background
        handlers[signal.SIGUSR2] = lifecycle.did_become_active

    for sig, handler in handlers.items():
        try:
            loop.add_signal_handler(sig, handler)
        except NotImplementedError:
            logger.warning(f"Signal {sig.name} not supported on this platform")


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()

    try:
        catalog = FacilityCatalogLoader.load(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid facility configuration: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    if not catalog:
        logger.error("No facilities configured.")
        logger.error("Add [[facilities]] entries to your config file (see config.example.toml).")
        sys.exit(1)

    if not config.tfnsw_api_key:
        logger.error("TFNSW_API_KEY is not set. Please provide your TfNSW open data API key.")
        sys.exit(1)

    logger.info(f"Loaded {len(catalog)} facilities from {config.config_file}")

    store = InMemoryFacilityStore(config.store_path)
    location_provider = StaticLocationProvider(
        known_coordinates=[Coordinate(info.latitude, info.longitude) for info in catalog],
        device_location=config.device_location,
    )
    if location_provider.is_location_available:
        logger.info(f"Ranking facilities by distance from {config.device_location}")
    else:
        logger.info("No device location configured, ranking from the centre of the catalog")
    lifecycle = AppLifecycleObserver(config.app_state)
    lifecycle.add_listener(log_lifecycle_change)
    broadcaster = StateBroadcaster()
    rate_limiter = ApiRateLimiter.get_instance(TFNSW_API_NAME, config.min_api_interval_seconds)

    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event, lifecycle)

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        client = TfnswOccupancyClient(
            session,
            api_key=config.tfnsw_api_key,
            base_url=config.api_base_url,
            timeout_seconds=config.api_timeout_seconds,
        )

        catalog_service = FacilityCatalogService(
            store, location_provider, client, high_cadence_names=config.high_cadence_names
        )
        catalog_service.load_static_facilities_if_needed(catalog)

        scheduler = RefreshScheduler(
            store=store,
            client=client,
            location_provider=location_provider,
            rate_limiter=rate_limiter,
            lifecycle=lifecycle,
            clock=SystemClock(),
            settings=config.scheduler_settings(),
            state_broadcaster=broadcaster,
        )

        progress_task = asyncio.create_task(_log_state_updates(broadcaster.subscribe()))
        try:
            await scheduler.perform_initial_load()
            logger.info(catalog_service.facility_stats(scheduler.clock.now()).description)
            scheduler.start_auto_refresh()
            await stop_event.wait()
        finally:
            logger.info("Shutting down...")
            await scheduler.aclose()
            progress_task.cancel()


def run() -> None:
    """Synchronous entry point for the service command."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
