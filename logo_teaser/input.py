"""
Input samples: pointer position and device tilt, normalized to [-1, 1].

Both sources produce the same InputSample so the orientation controller
does not care where a reading came from.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from logo_teaser import config as cfg


class InputSource(Enum):
    POINTER = "pointer"
    TILT = "tilt"


@dataclass(frozen=True)
class InputSample:
    """Normalized two-axis reading.

    Attributes:
        x: Horizontal component, -1 (left) .. 1 (right)
        y: Vertical component, -1 (top) .. 1 (bottom)
        timestamp: Milliseconds, same clock as the frame loop
        source: Where the reading came from
    """
    x: float
    y: float
    timestamp: float
    source: InputSource = InputSource.POINTER

    def __post_init__(self):
        object.__setattr__(self, 'x', clamp(self.x, -1.0, 1.0))
        object.__setattr__(self, 'y', clamp(self.y, -1.0, 1.0))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; NaN reads as the midpoint."""
    value = float(value)
    if math.isnan(value):
        return (low + high) / 2
    return max(low, min(high, value))


def normalize_pointer(client_x: float, client_y: float, width: float, height: float) -> Tuple[float, float]:
    """Map a pointer position in pixels to [-1, 1] on both axes.

    The viewport center maps to (0, 0). Positions outside the viewport
    (captured drags, multi-monitor setups) are clamped.
    """
    width = max(1.0, float(width))
    height = max(1.0, float(height))
    x = (client_x / width - 0.5) * 2
    y = (client_y / height - 0.5) * 2
    return clamp(x, -1.0, 1.0), clamp(y, -1.0, 1.0)


def normalize_tilt(
    beta: Optional[float],
    gamma: Optional[float],
    range_deg: float = cfg.TILT_RANGE_DEG,
    neutral_beta_deg: float = cfg.TILT_NEUTRAL_BETA_DEG,
) -> Tuple[float, float]:
    """Map device orientation angles (degrees) to [-1, 1].

    gamma (left/right tilt) drives the horizontal axis; beta (front/back
    tilt) drives the vertical axis relative to the usual hand-held angle.
    Missing angles read as neutral.

    Args:
        beta: Front/back tilt, degrees (-180..180)
        gamma: Left/right tilt, degrees (-90..90)
        range_deg: Tilt that maps to full deflection
        neutral_beta_deg: Beta that maps to 0
    """
    if range_deg <= 0:
        raise ValueError(f"range_deg must be positive, got {range_deg}")

    def _angle(value: Optional[float], neutral: float) -> float:
        if value is None or not math.isfinite(value):
            return neutral
        return float(value)

    x = _angle(gamma, 0.0) / range_deg
    y = (_angle(beta, neutral_beta_deg) - neutral_beta_deg) / range_deg
    return clamp(x, -1.0, 1.0), clamp(y, -1.0, 1.0)


class InputGate:
    """Suppresses input while an overlay is presented.

    Wraps a zero-argument predicate returning True when input must be
    dropped (e.g. HostPage.is_overlay_visible). Without a predicate the
    gate is always open.
    """

    def __init__(self, is_blocked: Optional[Callable[[], bool]] = None):
        self._is_blocked = is_blocked

    @property
    def is_open(self) -> bool:
        return self._is_blocked is None or not self._is_blocked()
