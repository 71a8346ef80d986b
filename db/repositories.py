"""SQLAlchemy-backed camera and pin repositories used by the placement service."""
from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import AnimalPin, CameraPin
from placement.exceptions import DuplicateDetectionError, RepositoryUnavailableError
from placement.types import Camera, PinInput, PlacedPin

logger = logging.getLogger(__name__)


class SqlCameraRepository:
    def __init__(self, db: Session):
        self._db = db

    def find_by_stream_identifier(self, identifier: str) -> Camera | None:
        """Resolve a camera from an identifier embedded in its stream URL.

        An exact hls_url or camera_name match wins (case-sensitive). Otherwise
        the first camera (lowest id) whose hls_url contains the identifier,
        ignoring case, is returned. The containment match renders as
        lower(...) LIKE lower(...) so SQLite and PostgreSQL agree on it. It is
        kept for existing detection feeds and can misroute when two stream
        URLs share a substring.
        """
        try:
            exact = self._db.scalars(
                select(CameraPin)
                .where(or_(CameraPin.hls_url == identifier, CameraPin.camera_name == identifier))
                .order_by(CameraPin.id)
                .limit(1)
            ).first()
            if exact is not None:
                return Camera.model_validate(exact)

            matches = self._db.scalars(
                select(CameraPin)
                .where(CameraPin.hls_url.icontains(identifier, autoescape=True))
                .order_by(CameraPin.id)
                .limit(2)
            ).all()
        except SQLAlchemyError as exc:
            raise RepositoryUnavailableError("Camera lookup failed") from exc

        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "Camera reference '%s' matches several stream URLs, using camera %s",
                identifier,
                matches[0].id,
            )
        return Camera.model_validate(matches[0])


class SqlPinRepository:
    def __init__(self, db: Session):
        self._db = db

    def list_by_camera(self, camera_id: int) -> list[PlacedPin]:
        try:
            rows = self._db.scalars(
                select(AnimalPin).where(AnimalPin.camera_pin_id == camera_id).order_by(AnimalPin.id)
            ).all()
        except SQLAlchemyError as exc:
            raise RepositoryUnavailableError(f"Loading pins for camera {camera_id} failed") from exc
        return [PlacedPin.model_validate(row) for row in rows]

    def create(self, pin: PinInput) -> PlacedPin:
        if pin.detection_id is not None and self._detection_exists(pin.detection_id):
            raise DuplicateDetectionError(f"Detection '{pin.detection_id}' already has a pin")

        row = AnimalPin(**pin.model_dump())
        try:
            self._db.add(row)
            self._db.commit()
            self._db.refresh(row)
        except IntegrityError as exc:
            self._db.rollback()
            # Lost a race with a concurrent insert of the same detection.
            if pin.detection_id is not None and self._detection_exists(pin.detection_id):
                raise DuplicateDetectionError(
                    f"Detection '{pin.detection_id}' already has a pin"
                ) from exc
            raise RepositoryUnavailableError("Storing pin failed") from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise RepositoryUnavailableError("Storing pin failed") from exc
        return PlacedPin.model_validate(row)

    def _detection_exists(self, detection_id: str) -> bool:
        try:
            found = self._db.scalar(
                select(AnimalPin.id).where(AnimalPin.detection_id == detection_id).limit(1)
            )
        except SQLAlchemyError as exc:
            raise RepositoryUnavailableError("Detection lookup failed") from exc
        return found is not None
