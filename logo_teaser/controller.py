"""
Orientation controller: pointer follow, idle wiggle and rig smoothing.

Input handlers only write the latest target and its timestamp. Once per
frame step_frame() decides the motion mode from the time since the last
sample, computes the desired rig offset for that mode and moves the rig
a fixed fraction of the way there (one-pole low-pass). The same filter
runs in both modes, which keeps ACTIVE <-> IDLE hand-overs continuous.

Axis naming: target_x / target_y are the input axes (horizontal,
vertical). Rig offsets are named by the rig axis they drive: offset_x
rotates about X (nod, driven by vertical input), offset_y about Y
(turn, driven by horizontal input). The Z axis carries a decorative
roll that ignores input.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from logo_teaser import config as cfg
from logo_teaser.input import (
    InputGate,
    InputSample,
    InputSource,
    clamp,
    normalize_pointer,
    normalize_tilt,
)
from logo_teaser.scene import Object3D

logger = logging.getLogger(__name__)


class MotionMode(Enum):
    ACTIVE = "active"
    IDLE = "idle"


@dataclass(frozen=True)
class ControllerSettings:
    """Tuning of the orientation controller.

    Attributes:
        base_orientation: Rig rotation (x, y, z) with zero offset, radians
        follow_strength_pitch: Vertical input -> rig X offset gain
        follow_strength_yaw: Horizontal input -> rig Y offset gain
        pitch_limit: Bound on the ACTIVE rig X offset, radians
        smoothing: Fraction of the remaining distance covered per frame
        idle_timeout_ms: Silence after which the rig goes IDLE
        idle_pitch_amplitude / idle_pitch_frequency: Rig X wiggle (rad, rad/s)
        idle_yaw_amplitude / idle_yaw_frequency: Rig Y wiggle (rad, rad/s)
        roll_amplitude / roll_frequency: Rig Z sway (rad, rad/ms)
        tilt_range_deg / tilt_neutral_beta_deg: Device tilt normalization
    """
    base_orientation: Tuple[float, float, float] = cfg.BASE_ORIENTATION
    follow_strength_pitch: float = cfg.FOLLOW_STRENGTH_PITCH
    follow_strength_yaw: float = cfg.FOLLOW_STRENGTH_YAW
    pitch_limit: float = cfg.PITCH_LIMIT
    smoothing: float = cfg.SMOOTHING
    idle_timeout_ms: float = cfg.IDLE_TIMEOUT_MS
    idle_pitch_amplitude: float = cfg.IDLE_PITCH_AMPLITUDE
    idle_pitch_frequency: float = cfg.IDLE_PITCH_FREQUENCY
    idle_yaw_amplitude: float = cfg.IDLE_YAW_AMPLITUDE
    idle_yaw_frequency: float = cfg.IDLE_YAW_FREQUENCY
    roll_amplitude: float = cfg.ROLL_AMPLITUDE
    roll_frequency: float = cfg.ROLL_FREQUENCY
    tilt_range_deg: float = cfg.TILT_RANGE_DEG
    tilt_neutral_beta_deg: float = cfg.TILT_NEUTRAL_BETA_DEG

    def __post_init__(self):
        if not 0.0 < self.smoothing < 1.0:
            raise ValueError(f"smoothing must be in (0, 1), got {self.smoothing}")
        if self.idle_timeout_ms < 0:
            raise ValueError(f"idle_timeout_ms must be >= 0, got {self.idle_timeout_ms}")
        if self.pitch_limit < 0:
            raise ValueError(f"pitch_limit must be >= 0, got {self.pitch_limit}")
        if not self.tilt_range_deg > 0:
            raise ValueError(f"tilt_range_deg must be positive, got {self.tilt_range_deg}")


@dataclass
class MotionState:
    """Mutable per-view motion state.

    Attributes:
        mode: Current motion mode
        target_x / target_y: Latest normalized input
        last_sample_time: Timestamp of the latest accepted sample (ms)
        hold_offset_x / hold_offset_y: Rig offset captured on entering IDLE
        idle_start_time: Frame time of the latest ACTIVE -> IDLE edge (ms)
    """
    mode: MotionMode = MotionMode.ACTIVE
    target_x: float = 0.0
    target_y: float = 0.0
    last_sample_time: float = 0.0
    hold_offset_x: float = 0.0
    hold_offset_y: float = 0.0
    idle_start_time: float = 0.0


@dataclass(frozen=True)
class RigPose:
    """Result of one step_frame call.

    Attributes:
        x, y, z: Absolute rig rotation written this frame (radians)
        offset_x, offset_y: Rig offset from base after smoothing
        desired_x, desired_y: Offset the filter was pulling toward
        mode: Motion mode for this frame
    """
    x: float
    y: float
    z: float
    offset_x: float
    offset_y: float
    desired_x: float
    desired_y: float
    mode: MotionMode


class OrientationController:
    """Drives the rotation of the rig from input samples.

    One instance per page view. Event handlers and the frame loop share it
    by reference; all mutation happens on the loop's thread.

    Args:
        rig: Rotation-only node parenting the logo
        settings: Tuning (defaults from logo_teaser.config)
        input_gate: Drops samples while closed (modal overlay shown)
        start_time: Clock value at construction; the first idle timeout is
            measured from it
    """

    def __init__(
        self,
        rig: Object3D,
        settings: Optional[ControllerSettings] = None,
        input_gate: Optional[InputGate] = None,
        start_time: float = 0.0,
    ):
        self.rig = rig
        self.settings = settings or ControllerSettings()
        self.input_gate = input_gate or InputGate()
        self.state = MotionState(last_sample_time=float(start_time))
        self.reset_rig()

    @property
    def base(self) -> Tuple[float, float, float]:
        return self.settings.base_orientation

    @property
    def mode(self) -> MotionMode:
        return self.state.mode

    def reset_rig(self) -> None:
        """Put the rig back on its base orientation."""
        self.rig.rotation.set(*self.base)

    # ------------------------------------------------------------------
    # Input ingestion
    # ------------------------------------------------------------------

    def on_input_sample(self, sample: InputSample) -> bool:
        """Record a sample as the latest target.

        Returns:
            False when the input gate dropped the sample
        """
        if not self.input_gate.is_open:
            return False

        state = self.state
        state.target_x = sample.x
        state.target_y = sample.y
        state.last_sample_time = float(sample.timestamp)
        state.mode = MotionMode.ACTIVE
        return True

    def on_pointer_move(
        self,
        client_x: float,
        client_y: float,
        width: float,
        height: float,
        timestamp: float,
    ) -> bool:
        x, y = normalize_pointer(client_x, client_y, width, height)
        return self.on_input_sample(InputSample(x, y, timestamp, InputSource.POINTER))

    def on_device_orientation(
        self,
        beta: Optional[float],
        gamma: Optional[float],
        timestamp: float,
    ) -> bool:
        x, y = normalize_tilt(
            beta, gamma,
            range_deg=self.settings.tilt_range_deg,
            neutral_beta_deg=self.settings.tilt_neutral_beta_deg,
        )
        return self.on_input_sample(InputSample(x, y, timestamp, InputSource.TILT))

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def current_offset(self) -> Tuple[float, float]:
        """Rig X/Y rotation relative to the base orientation."""
        base_x, base_y, _ = self.base
        return self.rig.rotation.x - base_x, self.rig.rotation.y - base_y

    def active_target(self) -> Tuple[float, float]:
        """Offset requested by the latest input sample."""
        s = self.settings
        offset_x = clamp(-self.state.target_y * s.follow_strength_pitch, -s.pitch_limit, s.pitch_limit)
        offset_y = self.state.target_x * s.follow_strength_yaw
        return offset_x, offset_y

    def idle_target(self, now: float) -> Tuple[float, float]:
        """Wiggle around the held pose; zero displacement at the IDLE edge."""
        s = self.settings
        t = (now - self.state.idle_start_time) * 0.001
        offset_x = self.state.hold_offset_x + math.sin(t * s.idle_pitch_frequency) * s.idle_pitch_amplitude
        offset_y = self.state.hold_offset_y + math.sin(t * s.idle_yaw_frequency) * s.idle_yaw_amplitude
        return offset_x, offset_y

    def roll(self, now: float) -> float:
        s = self.settings
        return self.base[2] + math.sin(now * s.roll_frequency) * s.roll_amplitude

    # ------------------------------------------------------------------
    # Frame step
    # ------------------------------------------------------------------

    def _update_mode(self, now: float) -> None:
        state = self.state
        is_idle = now - state.last_sample_time > self.settings.idle_timeout_ms

        if is_idle and state.mode is MotionMode.ACTIVE:
            state.mode = MotionMode.IDLE
            state.idle_start_time = now
            state.hold_offset_x, state.hold_offset_y = self.current_offset()
            logger.debug(
                "Entering idle: hold=(%.4f, %.4f)",
                state.hold_offset_x, state.hold_offset_y,
            )
        elif not is_idle and state.mode is MotionMode.IDLE:
            state.mode = MotionMode.ACTIVE
            logger.debug("Leaving idle")

    def step_frame(self, now: float) -> RigPose:
        """Advance the state machine and smooth the rig toward its target.

        Args:
            now: Frame time in milliseconds

        Returns:
            RigPose written to the rig
        """
        self._update_mode(now)

        if self.state.mode is MotionMode.IDLE:
            desired_x, desired_y = self.idle_target(now)
        else:
            desired_x, desired_y = self.active_target()

        current_x, current_y = self.current_offset()
        k = self.settings.smoothing
        offset_x = current_x + (desired_x - current_x) * k
        offset_y = current_y + (desired_y - current_y) * k

        base_x, base_y, _ = self.base
        self.rig.rotation.set(base_x + offset_x, base_y + offset_y, self.roll(now))

        return RigPose(
            x=self.rig.rotation.x,
            y=self.rig.rotation.y,
            z=self.rig.rotation.z,
            offset_x=offset_x,
            offset_y=offset_y,
            desired_x=desired_x,
            desired_y=desired_y,
            mode=self.state.mode,
        )
