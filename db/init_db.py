from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from db.database import Base, engine
from db import models  # noqa: F401 - registers user_maps, camera_pins, animal_pins

logger = logging.getLogger(__name__)


def init_db(bind: Engine | None = None) -> None:
    """Create any missing map, camera and pin tables."""
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info("Database ready: %s", ", ".join(sorted(Base.metadata.tables)))
