"""TfNSW car park API adapter."""

from parking_occupancy.adapters.tfnsw_api.tfnsw_occupancy_client import TfnswOccupancyClient

__all__ = ["TfnswOccupancyClient"]
