#!/usr/bin/env python3
"""Black rectangle layout extraction.

Finds dark rectangular regions in an image, groups them into columns by
their left edge and writes the layout as JSON next to the image.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import cv2
import numpy as np

from .config import RectangleConfig
from .image_utils import RasterImage, load_image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rectangle:
    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}


@dataclass
class Column:
    """Rectangles sharing roughly the same left edge."""
    x: int
    index: int = 0
    rectangles: List[Rectangle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'col': self.index, 'rectangles': [r.to_dict() for r in self.rectangles]}


def black_mask(image: RasterImage, threshold: int) -> np.ndarray:
    """Boolean mask of pixels whose channels are all below `threshold`."""
    if threshold <= 0:
        return np.zeros((image.height, image.width), dtype=bool)
    upper = min(threshold - 1, 255)
    # OpenCV wants a writable buffer
    pixels = image.pixels.copy()
    return cv2.inRange(pixels, (0, 0, 0), (upper, upper, upper)) > 0


def _run_length(line: np.ndarray) -> int:
    """Number of leading True values."""
    gaps = np.flatnonzero(~line)
    return int(gaps[0]) if gaps.size else int(line.size)


def find_rectangles(image: RasterImage, config: Optional[RectangleConfig] = None) -> List[Rectangle]:
    """Find black rectangles in raster order.

    Each unvisited black pixel starts a rectangle whose width is the black
    run along its row and whose height is the black run down its column.
    """
    config = config or RectangleConfig()
    mask = black_mask(image, config.black_threshold)
    visited = np.zeros_like(mask)
    rectangles = []

    for y in range(image.height):
        for x in np.flatnonzero(mask[y]):
            x = int(x)
            if visited[y, x]:
                continue
            width = _run_length(mask[y, x:])
            height = _run_length(mask[y:, x])
            visited[y:y + height, x:x + width] = True

            if width >= config.min_width and height >= config.min_height:
                rectangles.append(Rectangle(x, y, width, height))

    logger.debug(f"Found {len(rectangles)} rectangles")
    return rectangles


def group_into_columns(rectangles: List[Rectangle],
                       threshold: float = RectangleConfig.column_grouping_threshold) -> List[Column]:
    """Group rectangles by left edge, left to right, each column bottom to top."""
    columns: Dict[int, Column] = {}

    for rect in rectangles:
        for anchor in sorted(columns):
            if abs(anchor - rect.x) <= threshold:
                columns[anchor].rectangles.append(rect)
                break
        else:
            columns[rect.x] = Column(x=rect.x, rectangles=[rect])

    ordered = [columns[anchor] for anchor in sorted(columns)]
    for index, column in enumerate(ordered):
        column.index = index
        column.rectangles.sort(key=lambda r: r.y, reverse=True)
    return ordered


def find_black_rectangles(image_path: Union[str, Path],
                          config: Optional[RectangleConfig] = None) -> List[Column]:
    """Load an image and return its black rectangles grouped into columns."""
    config = config or RectangleConfig()
    image = load_image(image_path)
    rectangles = find_rectangles(image, config)
    return group_into_columns(rectangles, config.column_grouping_threshold)


def columns_to_json(columns: List[Column]) -> str:
    return json.dumps([column.to_dict() for column in columns], indent=4)


def save_layout(image_path: Union[str, Path], columns: List[Column]) -> Path:
    """Write the column layout next to the image, with a .json extension."""
    output_path = Path(image_path).with_suffix('.json')
    with open(output_path, 'w') as f:
        f.write(columns_to_json(columns))
    return output_path
