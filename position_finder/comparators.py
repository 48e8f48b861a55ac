"""
Pixel comparison policies.

Two tolerance models decide whether a haystack pixel matches a needle pixel:
- per-channel absolute tolerance (default, integer in [0, 255])
- normalized average difference (fraction in [0, 1])

Each comparator offers a scalar form for single pixels and a vectorized
form over equally shaped pixel blocks. Both give identical answers.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .config import FinderConfig, PixelModel
from .constants import COLOR_TOLERANCE, DEFAULT_TOLERANCE


def _abs_diff(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    # int16 keeps uint8 subtraction from wrapping
    return np.abs(a.astype(np.int16) - b.astype(np.int16))


class PixelComparator(ABC):
    """Decides whether two RGB pixels match."""

    @abstractmethod
    def match_mask(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Element-wise match of two (..., 3) pixel blocks.

        Returns:
            Boolean array with the leading shape of the inputs
        """
        ...

    def matches(self, rgb1: Sequence[int], rgb2: Sequence[int]) -> bool:
        a = np.asarray(rgb1[:3], dtype=np.int16)
        b = np.asarray(rgb2[:3], dtype=np.int16)
        return bool(self.match_mask(a, b))

    def __call__(self, rgb1: Sequence[int], rgb2: Sequence[int]) -> bool:
        return self.matches(rgb1, rgb2)


class ChannelToleranceComparator(PixelComparator):
    """Match iff every channel differs by at most `channel_tolerance`."""

    def __init__(self, channel_tolerance: int = COLOR_TOLERANCE):
        if not 0 <= channel_tolerance <= 255:
            raise ValueError(f"channel_tolerance must be in [0, 255], got {channel_tolerance}")
        self.channel_tolerance = channel_tolerance

    def match_mask(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        return np.all(_abs_diff(a, b) <= self.channel_tolerance, axis=-1)

    def __repr__(self) -> str:
        return f"ChannelToleranceComparator(channel_tolerance={self.channel_tolerance})"


class AverageDifferenceComparator(PixelComparator):
    """Match iff the mean channel difference, normalized to [0, 1], is within `tolerance`."""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE):
        if not 0.0 <= tolerance <= 1.0:
            raise ValueError(f"tolerance must be in [0, 1], got {tolerance}")
        self.tolerance = tolerance

    def match_mask(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        total = _abs_diff(a, b).sum(axis=-1, dtype=np.int32)
        return total / (3 * 255.0) <= self.tolerance

    def __repr__(self) -> str:
        return f"AverageDifferenceComparator(tolerance={self.tolerance})"


def build_comparator(config: FinderConfig) -> PixelComparator:
    """Create the comparator selected by `config.pixel_model`."""
    if config.pixel_model == PixelModel.AVERAGE:
        return AverageDifferenceComparator(config.tolerance)
    return ChannelToleranceComparator(config.channel_tolerance)
