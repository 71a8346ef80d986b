"""FastAPI backend for stray-animal pin placement."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.orm import Session

from auth.config import settings
from auth.deps import require_api_token
from db.database import get_db
from db.init_db import init_db
from db.models import AnimalPin, CameraPin, UserMap
from db.repositories import SqlCameraRepository, SqlPinRepository
from placement import (
    CameraNotFoundError,
    DuplicateDetectionError,
    PinPlacementEngine,
    PinPlacementService,
    PlacementRequest,
    RepositoryUnavailableError,
)
from schemas import (
    AnimalPinCreateResponse,
    AnimalPinResponse,
    CameraPinCreate,
    CameraPinCreateResponse,
    CameraPinResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
placement_engine = PinPlacementEngine()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info(
        "Placement engine ready (base=%.1fm, max=%.1fm, fov=%.0f deg, separation=%.1fm, attempts=%d)",
        placement_engine.config.base_distance_m,
        placement_engine.config.max_distance_m,
        placement_engine.config.field_of_view_deg,
        placement_engine.config.min_separation_m,
        placement_engine.config.max_attempts,
    )
    yield


app = FastAPI(
    title="Stray Map Backend API",
    description="API for placing detected stray animals on camera maps",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_token)])


def get_placement_engine() -> PinPlacementEngine:
    return placement_engine


def get_placement_service(
    db: Annotated[Session, Depends(get_db)],
    engine: Annotated[PinPlacementEngine, Depends(get_placement_engine)],
) -> PinPlacementService:
    return PinPlacementService(
        cameras=SqlCameraRepository(db),
        pins=SqlPinRepository(db),
        engine=engine,
    )


def _ensure_user_map(db: Session, user_map_id: int | None):
    if user_map_id is not None and db.get(UserMap, user_map_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"User map {user_map_id} does not exist",
        )


@app.get("/")
def read_root():
    return {
        "status": "ok",
        "message": "Stray Map Backend API is running",
        "endpoints": {
            "animal_pins": "/api/animal-pins",
            "camera_pins": "/api/camera-pins",
            "health": "/health",
        },
    }


@app.get("/health")
def health_check():
    return {"status": "ok"}


@limiter.limit(settings.pin_create_rate_limit)
@router.post(
    "/animal-pins",
    response_model=AnimalPinCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_animal_pin(
    request: Request,
    payload: PlacementRequest,
    service: Annotated[PinPlacementService, Depends(get_placement_service)],
    db: Annotated[Session, Depends(get_db)],
):
    if payload.camera_ref is None:
        _ensure_user_map(db, payload.user_map_id)

    try:
        pin = service.place_pin(payload)
    except CameraNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except DuplicateDetectionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except RepositoryUnavailableError:
        logger.exception("Pin placement failed for detection %s", payload.detection_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pin storage unavailable",
        )

    stored = db.get(AnimalPin, pin.id)
    return AnimalPinCreateResponse(pin=AnimalPinResponse.model_validate(stored))


@router.get("/animal-pins", response_model=list[AnimalPinResponse])
def list_animal_pins(
    db: Annotated[Session, Depends(get_db)],
    user_map_id: Annotated[int | None, Query()] = None,
):
    if user_map_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing user_map_id")

    return db.scalars(
        select(AnimalPin).where(AnimalPin.user_map_id == user_map_id).order_by(AnimalPin.id)
    ).all()


@router.delete("/animal-pins/{pin_id}", response_model=SuccessResponse)
def delete_animal_pin(
    pin_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    pin = db.get(AnimalPin, pin_id)
    if pin is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Animal pin not found")

    db.delete(pin)
    db.commit()
    return SuccessResponse(success=True)


@router.post(
    "/camera-pins",
    response_model=CameraPinCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_camera_pin(
    payload: CameraPinCreate,
    db: Annotated[Session, Depends(get_db)],
):
    _ensure_user_map(db, payload.user_map_id)

    camera = CameraPin(**payload.model_dump())
    db.add(camera)
    db.commit()
    db.refresh(camera)
    logger.info("Registered camera %s (%s) facing %.0f deg", camera.id, camera.hls_url, camera.direction)
    return CameraPinCreateResponse(pin=CameraPinResponse.model_validate(camera))


@router.get("/camera-pins", response_model=list[CameraPinResponse])
def list_camera_pins(
    db: Annotated[Session, Depends(get_db)],
    user_map_id: Annotated[int | None, Query()] = None,
):
    if user_map_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing user_map_id")

    return db.scalars(
        select(CameraPin).where(CameraPin.user_map_id == user_map_id).order_by(CameraPin.id)
    ).all()


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
