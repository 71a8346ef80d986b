"""Placement orchestration: detection in, stored pin out."""
from __future__ import annotations

import logging
from typing import Protocol

from placement.engine import PinPlacementEngine
from placement.exceptions import CameraNotFoundError
from placement.types import Camera, PinInput, PlacedPin, PlacementRequest

logger = logging.getLogger(__name__)


class CameraRepository(Protocol):
    def find_by_stream_identifier(self, identifier: str) -> Camera | None:
        ...


class PinRepository(Protocol):
    def list_by_camera(self, camera_id: int) -> list[PlacedPin]:
        ...

    def create(self, pin: PinInput) -> PlacedPin:
        ...


class PinPlacementService:
    """Resolves the source camera, runs the engine and stores the new pin.

    Repository implementations raise RepositoryUnavailableError (and
    DuplicateDetectionError on create); both propagate unchanged.
    """

    def __init__(
        self,
        cameras: CameraRepository,
        pins: PinRepository,
        engine: PinPlacementEngine | None = None,
    ):
        self._cameras = cameras
        self._pins = pins
        self._engine = engine or PinPlacementEngine()

    def place_pin(self, request: PlacementRequest) -> PlacedPin:
        camera_ref = request.camera_ref
        if camera_ref is None:
            logger.info(
                "Detection %s has no camera reference, storing pin without coordinates",
                request.detection_id,
            )
            return self._pins.create(self._pin_input(request, camera=None))

        camera = self._cameras.find_by_stream_identifier(camera_ref)
        if camera is None:
            raise CameraNotFoundError(f"No camera matches '{camera_ref}'")

        existing = self._pins.list_by_camera(camera.id)
        placement = self._engine.place(camera, existing)
        logger.info(
            "Placed %s for camera %s at (%.7f, %.7f), %.2fm / %.1f deg%s",
            request.animal_type,
            camera.id,
            placement.latitude,
            placement.longitude,
            placement.distance_m,
            placement.bearing,
            " (fallback)" if placement.fallback else "",
        )

        pin_input = self._pin_input(request, camera=camera)
        pin_input.latitude = placement.latitude
        pin_input.longitude = placement.longitude
        return self._pins.create(pin_input)

    @staticmethod
    def _pin_input(request: PlacementRequest, camera: Camera | None) -> PinInput:
        return PinInput(
            animal_type=request.animal_type,
            stray_status=request.stray_status,
            camera_pin_id=camera.id if camera else None,
            user_map_id=camera.user_map_id if camera else request.user_map_id,
            camera=request.camera_ref,
            detection_id=request.detection_id,
            breed=request.breed,
            collar=request.collar,
            picture=request.picture,
        )
