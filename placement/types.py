"""Types for animal pin placement."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from common.config import (
    PLACEMENT_BASE_DISTANCE_M,
    PLACEMENT_FIELD_OF_VIEW_DEG,
    PLACEMENT_MAX_ATTEMPTS,
    PLACEMENT_MAX_DISTANCE_M,
    PLACEMENT_MIN_SEPARATION_M,
)
from placement.geo_utils import EARTH_RADIUS_M, normalize_bearing


class Camera(BaseModel):
    """Camera position and facing direction, as seen by the engine."""

    id: int
    latitude: float
    longitude: float
    direction: float  # bearing, clockwise from north; normalized to [0, 360)
    user_map_id: int | None = None

    model_config = {"from_attributes": True}

    @field_validator("direction")
    @classmethod
    def _normalize_direction(cls, v: float) -> float:
        # camera_pins.direction is not range-checked in the database
        return normalize_bearing(v)


class PlacedPin(BaseModel):
    id: int
    animal_type: str | None = None
    stray_status: str | None = None
    camera_pin_id: int | None = None
    user_map_id: int | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"from_attributes": True}

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PinInput(BaseModel):
    """Fields written for a newly placed pin."""

    animal_type: str
    stray_status: str
    camera_pin_id: int | None = None
    user_map_id: int | None = None
    latitude: float | None = None
    longitude: float | None = None
    camera: str | None = None
    detection_id: str | None = None
    breed: str | None = None
    collar: str | None = None
    picture: str | None = None


class PlacementRequest(BaseModel):
    """One detection to be turned into a pin."""

    animal_type: str = Field(..., min_length=1, max_length=255)
    stray_status: str = Field(..., min_length=1, max_length=255)
    camera: str | None = None  # identifier embedded in the camera stream URL
    detection_id: str | None = Field(None, max_length=255)
    user_map_id: int | None = None
    breed: str | None = Field(None, max_length=255)
    collar: str | None = Field(None, max_length=255)
    picture: str | None = Field(None, max_length=255)

    @property
    def camera_ref(self) -> str | None:
        if self.camera is None:
            return None
        return self.camera.strip() or None

    @field_validator("detection_id")
    @classmethod
    def _blank_detection_id_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class PlacementConfig(BaseModel):
    """Tunable parameters of the placement search."""

    base_distance_m: float = Field(PLACEMENT_BASE_DISTANCE_M, ge=0)
    max_distance_m: float = Field(PLACEMENT_MAX_DISTANCE_M, ge=0)
    field_of_view_deg: float = Field(PLACEMENT_FIELD_OF_VIEW_DEG, gt=0, le=360)
    min_separation_m: float = Field(PLACEMENT_MIN_SEPARATION_M, ge=0)
    max_attempts: int = Field(PLACEMENT_MAX_ATTEMPTS, ge=1)
    earth_radius_m: float = Field(EARTH_RADIUS_M, gt=0)

    @model_validator(mode="after")
    def _check_distance_band(self) -> "PlacementConfig":
        if self.max_distance_m < self.base_distance_m:
            raise ValueError("max_distance_m must be >= base_distance_m")
        return self

    @property
    def half_angle_deg(self) -> float:
        return self.field_of_view_deg / 2

    @property
    def max_angle_offset_deg(self) -> float:
        return self.half_angle_deg * 0.8


class Placement(BaseModel):
    """Outcome of one placement search."""

    latitude: float
    longitude: float
    bearing: float      # normalized to [0, 360)
    distance_m: float
    attempt: int | None = None  # None for the first pin and for the fallback
    fallback: bool = False
