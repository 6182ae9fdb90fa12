"""Live parking facility occupancy with a rate-limited refresh scheduler."""

__version__ = "0.1.0"
