#!/usr/bin/env python3
"""
Batch orchestration for the image position finder.

Discovers haystack and needle files, pairs them by base name, decodes each
pair and runs the two-phase matcher on it. Pairs are independent, so they
can be matched on a thread pool; results always keep pair order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import FinderConfig, FailurePolicy
from .discovery import MatchPair, list_image_files, pair_images
from .exceptions import ImageDecodeError, MatchCancelledError
from .image_utils import RasterImage, load_image
from .matcher import TemplateMatcher, MatchResult

logger = logging.getLogger(__name__)

ImageLoader = Callable[[Path], RasterImage]


@dataclass(frozen=True)
class PairOutcome:
    """Result of matching one haystack/needle pair."""
    pair: MatchPair
    result: Optional[MatchResult]

    @property
    def found(self) -> bool:
        return self.result is not None


class ImagePositionFinder:
    """Runs the matcher over every haystack/needle pair of two paths."""

    def __init__(self, config: Optional[FinderConfig] = None,
                 loader: ImageLoader = load_image,
                 matcher: Optional[TemplateMatcher] = None,
                 should_cancel: Optional[Callable[[], bool]] = None):
        self.config = config or FinderConfig()
        self.loader = loader
        self.matcher = matcher or TemplateMatcher(self.config)
        self.should_cancel = should_cancel

    def discover_pairs(self, haystack_path: Union[str, Path],
                       needle_path: Union[str, Path]) -> List[MatchPair]:
        """List both sides and pair them by base name."""
        logger.info(f"Scanning: {haystack_path}")
        haystacks = list_image_files(haystack_path)
        logger.info(f"Found {len(haystacks)} full images")

        logger.info(f"Scanning: {needle_path}")
        needles = list_image_files(needle_path)
        logger.info(f"Found {len(needles)} square images")

        return pair_images(haystacks, needles)

    def find_positions(self, haystack_path: Union[str, Path],
                       needle_path: Union[str, Path]) -> List[PairOutcome]:
        """Match every pair found under the two paths.

        Returns:
            One outcome per processed pair, in haystack file name order.
            Pairs skipped under the best effort policy are absent.

        Raises:
            ImageDecodeError: Under the fail fast policy
            DirectoryScanError: If a directory cannot be listed
            MatchCancelledError: If the cancel hook fires
        """
        pairs = self.discover_pairs(haystack_path, needle_path)
        logger.info(f"Starting match search over {len(pairs)} pairs")

        if self.config.workers > 1 and len(pairs) > 1:
            outcomes = self._match_parallel(pairs)
        else:
            outcomes = [self._process_pair(pair) for pair in pairs]

        outcomes = [outcome for outcome in outcomes if outcome is not None]
        found = sum(1 for outcome in outcomes if outcome.found)
        logger.info(f"Found {found} matches")
        return outcomes

    def _match_parallel(self, pairs: List[MatchPair]) -> List[Optional[PairOutcome]]:
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = [executor.submit(self._process_pair, pair) for pair in pairs]
            try:
                # Re-raises the first failure in pair order
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    def _check_cancelled(self) -> None:
        if self.should_cancel is not None and self.should_cancel():
            raise MatchCancelledError("Matching cancelled")

    def _process_pair(self, pair: MatchPair) -> Optional[PairOutcome]:
        self._check_cancelled()
        logger.info(f"Processing main image: {pair.haystack.name}")
        logger.info(f"Found matching secondary image: {pair.needle.name}")

        try:
            haystack = self.loader(pair.haystack)
            needle = self.loader(pair.needle)
        except ImageDecodeError as e:
            if self.config.failure_policy == FailurePolicy.BEST_EFFORT:
                logger.error(f"Skipping {pair.haystack.name}: {e}")
                return None
            raise

        return PairOutcome(pair=pair, result=self.match_images(haystack, needle))

    def match_images(self, haystack: RasterImage, needle: RasterImage) -> Optional[MatchResult]:
        """Match two decoded images and log the outcome."""
        logger.info(
            f"Searching in image {haystack.width}x{haystack.height} "
            f"for an image {needle.width}x{needle.height}"
        )
        result = self.matcher.find_best_match(haystack, needle, should_cancel=self.should_cancel)

        if result is not None:
            logger.info(f"Match found with {result.match_percentage * 100:.2f}% confidence")
        else:
            label = haystack.name or 'image'
            logger.info(f"No match found for {label}")
        return result
