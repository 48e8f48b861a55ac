"""Error types raised by the image position finder."""

from pathlib import Path
from typing import Optional, Union


class PositionFinderError(Exception):
    """Base class for position finder errors."""
    pass


class UsageError(PositionFinderError):
    """Wrong command line usage."""
    pass


class InvalidToleranceError(PositionFinderError):
    """Tolerance is not a number in [0, 1]."""
    pass


class ConfigError(PositionFinderError):
    """Configuration file could not be read or is invalid."""
    pass


class ImageDecodeError(PositionFinderError):
    """An image file could not be read or decoded."""

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"Failed to decode image: {self.path}")


class DirectoryScanError(PositionFinderError):
    """A directory could not be listed."""

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"Failed to list directory: {self.path}")


class MatchCancelledError(PositionFinderError):
    """A run was cancelled between pairs or between search phases."""
    pass
