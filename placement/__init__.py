"""Animal pin placement package."""

from .candidates import Candidate, CandidateStrategy, SpreadingCandidateStrategy
from .engine import PinPlacementEngine
from .exceptions import (
    CameraNotFoundError,
    DuplicateDetectionError,
    PlacementError,
    RepositoryUnavailableError,
)
from .service import CameraRepository, PinPlacementService, PinRepository
from .types import Camera, PinInput, PlacedPin, Placement, PlacementConfig, PlacementRequest

__all__ = [
    "Camera",
    "CameraNotFoundError",
    "CameraRepository",
    "Candidate",
    "CandidateStrategy",
    "DuplicateDetectionError",
    "PinInput",
    "PinPlacementEngine",
    "PinPlacementService",
    "PinRepository",
    "PlacedPin",
    "Placement",
    "PlacementConfig",
    "PlacementError",
    "PlacementRequest",
    "RepositoryUnavailableError",
    "SpreadingCandidateStrategy",
]
