"""Custom exceptions for animal pin placement."""


class PlacementError(Exception):
    """Base placement exception."""


class CameraNotFoundError(PlacementError):
    """Raised when a camera reference does not resolve to a known camera."""


class RepositoryUnavailableError(PlacementError):
    """Raised when reading or writing pins/cameras fails."""


class DuplicateDetectionError(PlacementError):
    """Raised when a detection id has already been placed as a pin."""
