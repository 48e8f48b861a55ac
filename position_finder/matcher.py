#!/usr/bin/env python3
"""Two-phase template matcher.

Finds where a needle image sits inside a haystack image:
- Coarse scan: every `pixel_step`-th placement, scored on every
  `pixel_step`-th needle pixel
- Refinement: exhaustive scan of a small window around the coarse best,
  scored on every needle pixel

Both phases visit placements in raster order (y outer, x inner), only
replace the best placement on a strictly higher score, and stop as soon as
a placement reaches the early stop threshold.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from .comparators import PixelComparator, build_comparator
from .config import FinderConfig
from .exceptions import MatchCancelledError
from .image_utils import RasterImage

logger = logging.getLogger(__name__)

Placement = Tuple[int, int]


@dataclass(frozen=True)
class MatchResult:
    """Accepted placement of a needle inside a haystack."""
    x: int
    y: int
    width: int
    height: int
    match_percentage: float

    @property
    def position(self) -> Placement:
        return self.x, self.y


class TemplateMatcher:
    """Coarse-to-fine approximate template matcher."""

    def __init__(self, config: Optional[FinderConfig] = None,
                 comparator: Optional[PixelComparator] = None):
        self.config = config or FinderConfig()
        self.comparator = comparator or build_comparator(self.config)

    @staticmethod
    def placement_range(haystack: RasterImage, needle: RasterImage) -> Optional[Placement]:
        """Largest valid (x, y) placement, or None if the needle does not fit."""
        max_x = haystack.width - needle.width
        max_y = haystack.height - needle.height
        if max_x < 0 or max_y < 0:
            return None
        return max_x, max_y

    def match_percentage(self, haystack: RasterImage, needle: RasterImage,
                         x: int, y: int, step: int = 1) -> float:
        """Fraction of sampled needle pixels matching the haystack at (x, y)."""
        sample = needle.region(0, 0, needle.width, needle.height, step)
        return self._score(haystack, sample, needle.width, needle.height, x, y, step)

    def _score(self, haystack: RasterImage, sample: np.ndarray,
               width: int, height: int, x: int, y: int, step: int) -> float:
        window = haystack.region(x, y, width, height, step)
        mask = self.comparator.match_mask(window, sample)
        return np.count_nonzero(mask) / mask.size

    def quick_search(self, haystack: RasterImage, needle: RasterImage) -> Optional[Placement]:
        """Sampled scan over strided placements.

        Returns:
            Best placement found, or None when no placement fits or none
            scored above zero
        """
        bounds = self.placement_range(haystack, needle)
        if bounds is None:
            return None
        max_x, max_y = bounds

        step = self.config.pixel_step
        sample = needle.region(0, 0, needle.width, needle.height, step)
        best_score = 0.0
        best_location = None

        for y in range(0, max_y + 1, step):
            for x in range(0, max_x + 1, step):
                score = self._score(haystack, sample, needle.width, needle.height, x, y, step)
                if score > best_score:
                    best_score = score
                    best_location = (x, y)

                    if best_score >= self.config.early_stop_threshold:
                        logger.debug(f"Coarse scan stopped early at {best_location} ({best_score:.4f})")
                        return best_location

        if best_location is not None:
            logger.debug(f"Coarse scan best {best_location} ({best_score:.4f})")
        return best_location

    def refine(self, haystack: RasterImage, needle: RasterImage,
               start: Placement) -> Optional[MatchResult]:
        """Exhaustive scan of the window around `start`.

        Returns:
            The match if it reaches the early stop threshold or the
            acceptance floor, otherwise None
        """
        bounds = self.placement_range(haystack, needle)
        if bounds is None:
            return None
        max_x, max_y = bounds

        radius = self.config.refine_radius
        start_x = max(0, start[0] - radius)
        start_y = max(0, start[1] - radius)
        end_x = min(max_x, start[0] + radius)
        end_y = min(max_y, start[1] + radius)

        sample = needle.pixels
        best_score = 0.0
        best_location = start

        for y in range(start_y, end_y + 1):
            for x in range(start_x, end_x + 1):
                score = self._score(haystack, sample, needle.width, needle.height, x, y, 1)
                if score > best_score:
                    best_score = score
                    best_location = (x, y)

                    if best_score >= self.config.early_stop_threshold:
                        return self._result(best_location, needle, best_score)

        if best_score >= self.config.acceptance_floor:
            return self._result(best_location, needle, best_score)

        logger.debug(
            f"Best refined score {best_score:.4f} at {best_location} "
            f"below acceptance floor {self.config.acceptance_floor:.4f}"
        )
        return None

    def find_best_match(self, haystack: RasterImage, needle: RasterImage,
                        should_cancel: Optional[Callable[[], bool]] = None) -> Optional[MatchResult]:
        """Locate `needle` in `haystack`.

        Args:
            haystack: Image searched
            needle: Image looked for
            should_cancel: Checked between the coarse and refine phases

        Returns:
            MatchResult, or None if no acceptable match exists

        Raises:
            MatchCancelledError: If `should_cancel` returns True
        """
        candidate = self.quick_search(haystack, needle)
        if candidate is None:
            return None

        if should_cancel is not None and should_cancel():
            raise MatchCancelledError("Matching cancelled before refinement")

        return self.refine(haystack, needle, candidate)

    @staticmethod
    def _result(location: Placement, needle: RasterImage, score: float) -> MatchResult:
        return MatchResult(
            x=location[0],
            y=location[1],
            width=needle.width,
            height=needle.height,
            match_percentage=float(score),
        )
