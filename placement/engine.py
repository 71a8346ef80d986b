"""Pin placement engine: picks a coordinate inside a camera's field of view."""
from __future__ import annotations

import logging
import random
from typing import Callable, Sequence

from placement.candidates import CandidateStrategy, SpreadingCandidateStrategy
from placement.geo_utils import destination_point, haversine_distance, normalize_bearing
from placement.types import Camera, PlacedPin, Placement, PlacementConfig

logger = logging.getLogger(__name__)

StrategyFactory = Callable[[Camera, int, PlacementConfig], CandidateStrategy]


def _spreading_strategy(camera: Camera, existing_count: int, config: PlacementConfig) -> CandidateStrategy:
    return SpreadingCandidateStrategy(camera.direction, existing_count, config)


class PinPlacementEngine:
    def __init__(
        self,
        config: PlacementConfig | None = None,
        rng: random.Random | None = None,
        strategy_factory: StrategyFactory | None = None,
    ):
        self._config = config or PlacementConfig()
        self._rng = rng or random.Random()
        self._strategy_factory = strategy_factory or _spreading_strategy

    @property
    def config(self) -> PlacementConfig:
        return self._config

    def place(self, camera: Camera, existing_pins: Sequence[PlacedPin]) -> Placement:
        """Return a coordinate for a new pin of `camera`.

        Never raises: when no candidate keeps `min_separation_m` from every
        existing pin, a random in-cone position is returned with
        `fallback=True`.
        """
        cfg = self._config
        placed = [pin for pin in existing_pins if pin.has_position]

        if not placed:
            return self._project(camera, camera.direction, cfg.base_distance_m)

        strategy = self._strategy_factory(camera, len(placed), cfg)
        for attempt in range(cfg.max_attempts):
            candidate = strategy.candidate(attempt)
            placement = self._project(
                camera, candidate.bearing, candidate.distance_m, attempt=attempt
            )
            if self._is_clear(placement, placed):
                logger.debug(
                    "Camera %s: accepted candidate %d at %.2fm / %.1f deg",
                    camera.id,
                    attempt,
                    candidate.distance_m,
                    placement.bearing,
                )
                return placement

        logger.info(
            "Camera %s: no candidate clear of %d pins after %d attempts, using random fallback",
            camera.id,
            len(placed),
            cfg.max_attempts,
        )
        return self._fallback(camera)

    def _fallback(self, camera: Camera) -> Placement:
        cfg = self._config
        distance = self._rng.uniform(cfg.base_distance_m, cfg.max_distance_m)
        offset = cfg.max_angle_offset_deg
        bearing = self._rng.uniform(camera.direction - offset, camera.direction + offset)
        return self._project(camera, bearing, distance, fallback=True)

    def _is_clear(self, placement: Placement, placed: Sequence[PlacedPin]) -> bool:
        radius = self._config.earth_radius_m
        min_separation = self._config.min_separation_m
        for pin in placed:
            separation = haversine_distance(
                placement.latitude,
                placement.longitude,
                pin.latitude,
                pin.longitude,
                radius_m=radius,
            )
            if separation < min_separation:
                return False
        return True

    def _project(
        self,
        camera: Camera,
        bearing: float,
        distance_m: float,
        attempt: int | None = None,
        fallback: bool = False,
    ) -> Placement:
        lat, lon = destination_point(
            camera.latitude,
            camera.longitude,
            bearing,
            distance_m,
            radius_m=self._config.earth_radius_m,
        )
        return Placement(
            latitude=lat,
            longitude=lon,
            bearing=normalize_bearing(bearing),
            distance_m=distance_m,
            attempt=attempt,
            fallback=fallback,
        )
