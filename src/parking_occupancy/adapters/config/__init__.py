"""Configuration adapters."""

from parking_occupancy.adapters.config.app_config import AppConfig
from parking_occupancy.adapters.config.facility_catalog_loader import FacilityCatalogLoader

__all__ = ["AppConfig", "FacilityCatalogLoader"]
