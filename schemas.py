"""
Pydantic models for API request/response validation.

Pin placement requests reuse placement.types.PlacementRequest.
"""
from pydantic import BaseModel, Field


class AnimalPinResponse(BaseModel):
    """
    A stored animal pin.
    Latitude/longitude are null for detections that arrived without a camera.
    """
    id: int
    animal_type: str | None = None
    stray_status: str | None = None
    breed: str | None = None
    collar: str | None = None
    picture: str | None = None
    camera: str | None = None          # Raw camera reference of the detection
    detection_id: str | None = None    # Correlation id of the source detection
    camera_pin_id: int | None = None
    user_map_id: int | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"from_attributes": True}


class AnimalPinCreateResponse(BaseModel):
    success: bool = True
    pin: AnimalPinResponse


class CameraPinCreate(BaseModel):
    camera_name: str | None = Field(None, max_length=255)
    hls_url: str | None = Field(None, max_length=255)   # Stream URL detections refer to
    camera_description: str | None = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    direction: float = Field(..., ge=0, le=360)         # Bearing, clockwise from north
    user_map_id: int | None = None
    image_link: str | None = Field(None, max_length=255)


class CameraPinResponse(BaseModel):
    id: int
    camera_name: str | None = None
    hls_url: str | None = None
    camera_description: str | None = None
    latitude: float
    longitude: float
    direction: float
    user_map_id: int | None = None
    image_link: str | None = None

    model_config = {"from_attributes": True}


class CameraPinCreateResponse(BaseModel):
    success: bool = True
    pin: CameraPinResponse


class SuccessResponse(BaseModel):
    success: bool
