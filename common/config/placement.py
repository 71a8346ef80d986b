"""Default parameters for the animal pin placement search."""
from __future__ import annotations

import os

from .paths import BASE_DIR  # noqa: F401 - loads .env before the getenv calls below

PLACEMENT_BASE_DISTANCE_M = float(os.getenv("PLACEMENT_BASE_DISTANCE_M", "5"))
PLACEMENT_MAX_DISTANCE_M = float(os.getenv("PLACEMENT_MAX_DISTANCE_M", "25"))
# Full cone; the search works with half of it on each side of the camera direction.
PLACEMENT_FIELD_OF_VIEW_DEG = float(os.getenv("PLACEMENT_FIELD_OF_VIEW_DEG", "60"))
PLACEMENT_MIN_SEPARATION_M = float(os.getenv("PLACEMENT_MIN_SEPARATION_M", "2"))
PLACEMENT_MAX_ATTEMPTS = int(os.getenv("PLACEMENT_MAX_ATTEMPTS", "20"))
