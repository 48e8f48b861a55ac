"""
Image Position Finder

Locates a smaller "needle" image inside a larger "haystack" image using a
coarse sampled scan followed by a localized exhaustive refinement.

Structure:
- matcher: two-phase template matcher and match results
- comparators: pixel tolerance policies
- discovery: image file listing and haystack/needle pairing
- finder: batch orchestration over file pairs
- report: JSON report rendering
- rectangles: black rectangle layout extraction
"""

from .config import FinderConfig, RectangleConfig, PixelModel, ReportMode, FailurePolicy
from .exceptions import (
    PositionFinderError, UsageError, InvalidToleranceError,
    ImageDecodeError, DirectoryScanError, ConfigError, MatchCancelledError
)
from .image_utils import RasterImage, load_image
from .matcher import TemplateMatcher, MatchResult
from .finder import ImagePositionFinder

__version__ = '0.1.0'

__all__ = [
    'FinderConfig', 'RectangleConfig', 'PixelModel', 'ReportMode', 'FailurePolicy',
    'PositionFinderError', 'UsageError', 'InvalidToleranceError',
    'ImageDecodeError', 'DirectoryScanError', 'ConfigError', 'MatchCancelledError',
    'RasterImage', 'load_image',
    'TemplateMatcher', 'MatchResult',
    'ImagePositionFinder',
]
