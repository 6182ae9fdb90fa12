"""Facility statistics domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FacilityStats:
    """Summary of the stored facilities."""

    total_count: int
    with_occupancy_data: int
    favourite_count: int

    @property
    def occupancy_data_percentage(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.with_occupancy_data / self.total_count * 100

    @property
    def description(self) -> str:
        return (
            f"{self.total_count} facilities, {self.with_occupancy_data} with data "
            f"({int(self.occupancy_data_percentage)}%), {self.favourite_count} favourites"
        )
