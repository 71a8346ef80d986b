"""Candidate (bearing, distance) generation for the placement search."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from placement.types import PlacementConfig


@dataclass(frozen=True)
class Candidate:
    bearing: float
    distance_m: float


class CandidateStrategy(Protocol):
    def candidate(self, attempt: int) -> Candidate:
        ...


class SpreadingCandidateStrategy:
    """Spread candidates outward from the camera's facing direction.

    Distance grows with the number of pins already placed for the camera and
    with the attempt index. The bearing alternates right (even attempts) and
    left (odd attempts) of the facing direction, with an offset that grows
    linearly up to 80% of the half field of view.
    """

    def __init__(self, direction: float, existing_count: int, config: PlacementConfig):
        self._direction = float(direction)
        self._existing_count = existing_count
        self._config = config

    @property
    def distance_variation(self) -> float:
        band = self._config.max_distance_m - self._config.base_distance_m
        return min(float(self._existing_count) * 2.0, band)

    def candidate(self, attempt: int) -> Candidate:
        progress = float(attempt) / float(self._config.max_attempts)
        distance = self._config.base_distance_m + self.distance_variation * (0.3 + 0.7 * progress)
        side = 1.0 if attempt % 2 == 0 else -1.0
        angle_offset = self._config.max_angle_offset_deg * side * progress
        return Candidate(bearing=self._direction + angle_offset, distance_m=distance)
