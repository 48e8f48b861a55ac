"""
Tests for the pixel comparison policies.
"""

import pytest
import numpy as np

from position_finder.comparators import (
    ChannelToleranceComparator,
    AverageDifferenceComparator,
    build_comparator,
)
from position_finder.config import FinderConfig, PixelModel


class TestChannelToleranceComparator:
    """Per-channel absolute tolerance."""

    def test_identical_pixels_match(self):
        comparator = ChannelToleranceComparator(0)
        assert comparator.matches((12, 34, 56), (12, 34, 56))

    def test_tolerance_is_inclusive(self):
        comparator = ChannelToleranceComparator(30)
        assert comparator.matches((100, 100, 100), (130, 70, 100))
        assert not comparator.matches((100, 100, 100), (131, 100, 100))

    def test_every_channel_must_be_within(self):
        comparator = ChannelToleranceComparator(30)
        assert not comparator.matches((0, 0, 0), (0, 0, 31))

    def test_no_uint8_wraparound(self):
        comparator = ChannelToleranceComparator(30)
        a = np.array([[[0, 0, 0]]], dtype=np.uint8)
        b = np.array([[[250, 0, 0]]], dtype=np.uint8)
        assert not comparator.match_mask(a, b)[0, 0]

    def test_alpha_is_ignored(self):
        comparator = ChannelToleranceComparator(0)
        assert comparator((10, 20, 30, 0), (10, 20, 30, 255))

    def test_mask_matches_scalar_form(self):
        comparator = ChannelToleranceComparator(30)
        rng = np.random.default_rng(3)
        a = rng.integers(0, 256, size=(6, 5, 3), dtype=np.uint8)
        b = rng.integers(0, 256, size=(6, 5, 3), dtype=np.uint8)
        mask = comparator.match_mask(a, b)
        assert mask.shape == (6, 5)
        for y in range(6):
            for x in range(5):
                assert mask[y, x] == comparator.matches(tuple(a[y, x]), tuple(b[y, x]))

    @pytest.mark.parametrize("value", [-1, 256])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValueError):
            ChannelToleranceComparator(value)


class TestAverageDifferenceComparator:
    """Normalized average-difference tolerance."""

    def test_average_difference_threshold(self):
        comparator = AverageDifferenceComparator(0.1)
        # (30 + 30 + 15) / 765 = 0.098
        assert comparator.matches((100, 100, 100), (130, 70, 115))
        # (60 + 30 + 0) / 765 = 0.1176
        assert not comparator.matches((100, 100, 100), (160, 70, 100))

    def test_one_large_channel_can_pass(self):
        # A single channel off by 60 averages to 0.078
        comparator = AverageDifferenceComparator(0.1)
        assert comparator.matches((0, 0, 0), (60, 0, 0))
        assert not ChannelToleranceComparator(30).matches((0, 0, 0), (60, 0, 0))

    def test_zero_tolerance_requires_equality(self):
        comparator = AverageDifferenceComparator(0.0)
        assert comparator.matches((1, 2, 3), (1, 2, 3))
        assert not comparator.matches((1, 2, 3), (1, 2, 4))

    @pytest.mark.parametrize("value", [-0.01, 1.01])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValueError):
            AverageDifferenceComparator(value)


def test_build_comparator_defaults_to_channel(default_config):
    comparator = build_comparator(default_config)
    assert isinstance(comparator, ChannelToleranceComparator)
    assert comparator.channel_tolerance == 30


def test_build_comparator_average_uses_fractional_tolerance():
    config = FinderConfig(pixel_model=PixelModel.AVERAGE, tolerance=0.25)
    comparator = build_comparator(config)
    assert isinstance(comparator, AverageDifferenceComparator)
    assert comparator.tolerance == 0.25
