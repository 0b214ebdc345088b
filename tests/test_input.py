"""
Unit tests for logo_teaser.input.

Tests:
- Pointer normalization
- Device tilt normalization
- InputSample clamping
- InputGate
"""

import math

import pytest

from logo_teaser.input import (
    InputGate,
    InputSample,
    InputSource,
    clamp,
    normalize_pointer,
    normalize_tilt,
)


class TestClamp:

    def test_inside(self):
        assert clamp(0.3, -1.0, 1.0) == 0.3

    def test_outside(self):
        assert clamp(7.0, -1.0, 1.0) == 1.0
        assert clamp(-7.0, -1.0, 1.0) == -1.0

    def test_nan_reads_as_midpoint(self):
        assert clamp(float('nan'), -1.0, 1.0) == 0.0


class TestNormalizePointer:
    """Tests for pointer position mapping."""

    def test_center_is_zero(self):
        assert normalize_pointer(960, 540, 1920, 1080) == (0.0, 0.0)

    def test_corners(self):
        assert normalize_pointer(0, 0, 1920, 1080) == (-1.0, -1.0)
        assert normalize_pointer(1920, 1080, 1920, 1080) == (1.0, 1.0)

    def test_outside_viewport_clamped(self):
        x, y = normalize_pointer(5000, -300, 1920, 1080)
        assert x == 1.0
        assert y == -1.0

    def test_zero_size_viewport(self):
        x, y = normalize_pointer(0, 0, 0, 0)
        assert -1.0 <= x <= 1.0
        assert -1.0 <= y <= 1.0


class TestNormalizeTilt:
    """Tests for device orientation mapping."""

    def test_neutral(self):
        assert normalize_tilt(45.0, 0.0, range_deg=30.0, neutral_beta_deg=45.0) == (0.0, 0.0)

    def test_half_deflection(self):
        x, y = normalize_tilt(30.0, 15.0, range_deg=30.0, neutral_beta_deg=45.0)
        assert x == pytest.approx(0.5)
        assert y == pytest.approx(-0.5)

    @pytest.mark.parametrize("beta,gamma", [(180.0, 90.0), (-180.0, -90.0), (1e6, -1e6)])
    def test_extremes_clamped(self, beta, gamma):
        x, y = normalize_tilt(beta, gamma)
        assert -1.0 <= x <= 1.0
        assert -1.0 <= y <= 1.0

    def test_missing_angles_neutral(self):
        assert normalize_tilt(None, None) == (0.0, 0.0)
        assert normalize_tilt(math.nan, math.inf) == (0.0, 0.0)

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            normalize_tilt(0.0, 0.0, range_deg=0.0)


class TestInputSample:

    def test_components_clamped(self):
        sample = InputSample(3.0, -4.0, 12.5)
        assert sample.x == 1.0
        assert sample.y == -1.0
        assert sample.timestamp == 12.5
        assert sample.source is InputSource.POINTER

    def test_frozen(self):
        sample = InputSample(0.0, 0.0, 0.0)
        with pytest.raises(AttributeError):
            sample.x = 0.5


class TestInputGate:

    def test_open_without_predicate(self):
        assert InputGate().is_open

    def test_follows_predicate(self):
        blocked = [False]
        gate = InputGate(lambda: blocked[0])
        assert gate.is_open
        blocked[0] = True
        assert not gate.is_open
