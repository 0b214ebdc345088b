"""
JSON-based project configuration for the logo teaser.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py)
2. User config (~/.teaser.json)
3. Project config (./.teaser.json or next to the model file)
4. CLI arguments

Example .teaser.json:
{
    "camera": {"fov_deg": 35.0, "fit_margin": 1.18},
    "follow": {"strength_pitch": 0.95, "strength_yaw": 0.55},
    "idle": {"timeout_ms": 900.0},
    "rig": {"base_orientation": [1.5708, 3.1416, 0.0]},
    "assets": {"model": "logo.stl", "environment": "studio.hdr"}
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from logo_teaser import config as cfg
from logo_teaser.controller import ControllerSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".teaser.json"


@dataclass
class CameraConfig:
    """Camera and framing."""
    fov_deg: float = cfg.CAMERA_FOV_DEG
    fit_margin: float = cfg.FIT_MARGIN


@dataclass
class FollowConfig:
    """Pointer follow in ACTIVE mode."""
    strength_pitch: float = cfg.FOLLOW_STRENGTH_PITCH
    strength_yaw: float = cfg.FOLLOW_STRENGTH_YAW
    pitch_limit: float = cfg.PITCH_LIMIT
    smoothing: float = cfg.SMOOTHING


@dataclass
class IdleConfig:
    """Idle wiggle and decorative roll."""
    timeout_ms: float = cfg.IDLE_TIMEOUT_MS
    pitch_amplitude: float = cfg.IDLE_PITCH_AMPLITUDE
    pitch_frequency: float = cfg.IDLE_PITCH_FREQUENCY
    yaw_amplitude: float = cfg.IDLE_YAW_AMPLITUDE
    yaw_frequency: float = cfg.IDLE_YAW_FREQUENCY
    roll_amplitude: float = cfg.ROLL_AMPLITUDE
    roll_frequency: float = cfg.ROLL_FREQUENCY


@dataclass
class RigConfig:
    """Base orientation of the rig, corrective flips included (radians)."""
    base_orientation: List[float] = field(default_factory=lambda: list(cfg.BASE_ORIENTATION))


@dataclass
class TiltConfig:
    """Device orientation normalization (degrees)."""
    range_deg: float = cfg.TILT_RANGE_DEG
    neutral_beta_deg: float = cfg.TILT_NEUTRAL_BETA_DEG


@dataclass
class AssetsConfig:
    """Asset locations (paths or file:// URLs)."""
    model: str = ""
    environment: str = ""


@dataclass
class TeaserConfig:
    """Complete teaser configuration."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    follow: FollowConfig = field(default_factory=FollowConfig)
    idle: IdleConfig = field(default_factory=IdleConfig)
    rig: RigConfig = field(default_factory=RigConfig)
    tilt: TiltConfig = field(default_factory=TiltConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TeaserConfig':
        """Create configuration from a dictionary.

        Unknown sections and keys are ignored; keys starting with '_' are
        comments.
        """
        config = cls()
        for section in fields(cls):
            values = data.get(section.name)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section.name)
            for key, value in values.items():
                if key.startswith('_'):
                    continue
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning("Unknown config key: %s.%s", section.name, key)

        base = config.rig.base_orientation
        if len(base) != 3:
            raise ValueError(f"rig.base_orientation needs 3 angles, got {base!r}")
        config.rig.base_orientation = [float(a) for a in base]
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'TeaserConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'TeaserConfig':
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Search order:
    1. Explicit config path (if provided)
    2. .teaser.json in the model file's directory
    3. .teaser.json in current working directory
    4. ~/.teaser.json in user's home directory
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if model_path:
        candidates.append(Path(model_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    model_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> TeaserConfig:
    """Load and validate configuration, falling back to defaults on any problem."""
    config_path = find_config_file(model_path, explicit_config)

    if config_path:
        try:
            config = TeaserConfig.load(config_path)
            validate_config(config)
            return config
        except (json.JSONDecodeError, OSError, ValueError, TypeError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return TeaserConfig()


def merge_configs(base: TeaserConfig, override: TeaserConfig) -> TeaserConfig:
    """Merge two configurations; override values that differ from defaults win."""
    merged = TeaserConfig.from_dict(base.to_dict())
    defaults = TeaserConfig()

    for section in fields(TeaserConfig):
        default_section = asdict(getattr(defaults, section.name))
        target = getattr(merged, section.name)
        for key, value in asdict(getattr(override, section.name)).items():
            if value != default_section[key]:
                setattr(target, key, value)

    return merged


def controller_settings(config: TeaserConfig) -> ControllerSettings:
    """Translate the file-level configuration into controller tuning."""
    return ControllerSettings(
        base_orientation=tuple(config.rig.base_orientation),
        follow_strength_pitch=config.follow.strength_pitch,
        follow_strength_yaw=config.follow.strength_yaw,
        pitch_limit=config.follow.pitch_limit,
        smoothing=config.follow.smoothing,
        idle_timeout_ms=config.idle.timeout_ms,
        idle_pitch_amplitude=config.idle.pitch_amplitude,
        idle_pitch_frequency=config.idle.pitch_frequency,
        idle_yaw_amplitude=config.idle.yaw_amplitude,
        idle_yaw_frequency=config.idle.yaw_frequency,
        roll_amplitude=config.idle.roll_amplitude,
        roll_frequency=config.idle.roll_frequency,
        tilt_range_deg=config.tilt.range_deg,
        tilt_neutral_beta_deg=config.tilt.neutral_beta_deg,
    )


def validate_config(config: TeaserConfig) -> None:
    """Check values that would otherwise fail at runtime.

    Raises:
        ValueError: on an out-of-range value
    """
    camera = config.camera
    if not 0.0 < camera.fov_deg < 180.0:
        raise ValueError(f"camera.fov_deg must be in (0, 180), got {camera.fov_deg}")
    if camera.fit_margin < 1.0:
        raise ValueError(f"camera.fit_margin must be >= 1, got {camera.fit_margin}")
    # Follow, idle and tilt values are checked by ControllerSettings
    controller_settings(config)


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> Path:
    """Write a documented sample configuration file.

    Returns:
        Path of the written file
    """
    sample: Dict[str, Any] = {
        "_comment": "Logo teaser configuration",
        "_version": "1.0",
    }
    for section, values in TeaserConfig().to_dict().items():
        sample[section] = values
    sample["rig"]["_comment"] = "Rotation (x, y, z) in radians that makes the logo face the viewer"
    sample["idle"]["_comment"] = "Frequencies in rad/s; roll_frequency in rad/ms"

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
    return path
