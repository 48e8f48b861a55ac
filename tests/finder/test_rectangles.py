"""
Tests for black rectangle layout extraction.
"""

import json

import numpy as np

from position_finder.config import RectangleConfig
from position_finder.image_utils import RasterImage
from position_finder.rectangles import (
    Rectangle,
    black_mask,
    find_rectangles,
    group_into_columns,
    find_black_rectangles,
    save_layout,
    columns_to_json,
)

from tests.fixtures.image_helpers import WHITE, solid_array, write_png


def layout_array():
    """White page with three large black rectangles and one speck."""
    array = solid_array(100, 100, WHITE)
    array[5:17, 10:30] = 0    # x=10, y=5, 20x12
    array[10:40, 60:75] = 0   # x=60, y=10, 15x30
    array[40:52, 15:35] = 0   # x=15, y=40, 20x12
    array[80:85, 80:85] = 0   # 5x5 speck
    return array


def test_black_mask_threshold():
    array = solid_array(3, 1, WHITE)
    array[0, 0] = (29, 29, 29)
    array[0, 1] = (30, 0, 0)
    mask = black_mask(RasterImage(array), 30)
    assert mask.tolist() == [[True, False, False]]
    assert not black_mask(RasterImage(array), 0).any()


def test_find_rectangles_in_raster_order():
    rectangles = find_rectangles(RasterImage(layout_array()))
    assert rectangles == [
        Rectangle(10, 5, 20, 12),
        Rectangle(60, 10, 15, 30),
        Rectangle(15, 40, 20, 12),
    ]


def test_small_rectangles_kept_with_lower_minimum():
    config = RectangleConfig(min_width=5, min_height=5)
    rectangles = find_rectangles(RasterImage(layout_array()), config)
    assert Rectangle(80, 80, 5, 5) in rectangles


def test_group_into_columns():
    rectangles = [
        Rectangle(10, 5, 20, 12),
        Rectangle(60, 10, 15, 30),
        Rectangle(15, 40, 20, 12),
    ]
    columns = group_into_columns(rectangles)

    assert [c.index for c in columns] == [0, 1]
    assert [c.x for c in columns] == [10, 60]
    # Bottom to top
    assert columns[0].rectangles == [Rectangle(15, 40, 20, 12), Rectangle(10, 5, 20, 12)]
    assert columns[1].rectangles == [Rectangle(60, 10, 15, 30)]


def test_group_threshold_is_inclusive():
    columns = group_into_columns([Rectangle(0, 0, 10, 10), Rectangle(20, 50, 10, 10)], threshold=20.0)
    assert len(columns) == 1
    columns = group_into_columns([Rectangle(0, 0, 10, 10), Rectangle(21, 50, 10, 10)], threshold=20.0)
    assert len(columns) == 2


def test_find_and_save_layout(tmp_path):
    image_path = write_png(tmp_path / 'page.png', layout_array())
    columns = find_black_rectangles(image_path)
    output_path = save_layout(image_path, columns)

    assert output_path == tmp_path / 'page.json'
    data = json.loads(output_path.read_text())
    assert data == [
        {'col': 0, 'rectangles': [
            {'x': 15, 'y': 40, 'width': 20, 'height': 12},
            {'x': 10, 'y': 5, 'width': 20, 'height': 12},
        ]},
        {'col': 1, 'rectangles': [
            {'x': 60, 'y': 10, 'width': 15, 'height': 30},
        ]},
    ]


def test_empty_layout():
    assert columns_to_json([]) == '[]'
    assert find_rectangles(RasterImage(solid_array(20, 20, WHITE))) == []
