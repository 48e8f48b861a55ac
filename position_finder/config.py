"""
Configuration module for the image position finder.

Provides the settings shared by every component of a run:
- Search parameters (stride, early stop, tolerances)
- Pixel comparison policy
- Report shape and failure policy
- Logging level
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, List
from enum import Enum
import json
import logging

from .constants import (
    DEFAULT_TOLERANCE,
    PIXEL_STEP,
    COLOR_TOLERANCE,
    EARLY_STOP_THRESHOLD,
    REFINE_RADIUS_STEPS,
    RECTANGLE_PARAMS,
)
from .exceptions import ConfigError


class PixelModel(Enum):
    """Available pixel tolerance models."""
    CHANNEL = 'channel'  # Per-channel absolute difference
    AVERAGE = 'average'  # Normalized average difference


class ReportMode(Enum):
    """Shapes of the JSON report."""
    LIST = 'list'  # Array of accepted matches
    OBJECT = 'object'  # {"matches": [...]} including not-found entries


class FailurePolicy(Enum):
    """What to do when an image of a pair cannot be decoded."""
    FAIL_FAST = 'fail_fast'  # Abort the whole run
    BEST_EFFORT = 'best_effort'  # Log and skip the pair


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = 'DEBUG'
    INFO = 'INFO'
    WARNING = 'WARNING'
    ERROR = 'ERROR'


@dataclass
class FinderConfig:
    """Matching and orchestration configuration."""
    # Acceptance
    tolerance: float = DEFAULT_TOLERANCE
    channel_tolerance: int = COLOR_TOLERANCE
    pixel_model: PixelModel = PixelModel.CHANNEL

    # Search
    pixel_step: int = PIXEL_STEP
    early_stop_threshold: float = EARLY_STOP_THRESHOLD

    # Orchestration
    report_mode: ReportMode = ReportMode.LIST
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST
    workers: int = 1

    log_level: LogLevel = LogLevel.INFO

    @property
    def refine_radius(self) -> int:
        """Half-width of the refinement window."""
        return REFINE_RADIUS_STEPS * self.pixel_step

    @property
    def acceptance_floor(self) -> float:
        """Lowest refined score accepted as a match."""
        return 1.0 - self.tolerance

    @classmethod
    def from_file(cls, config_path: str) -> 'FinderConfig':
        """Load configuration from JSON file."""
        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FinderConfig':
        """Create configuration from dictionary."""
        config = cls()
        try:
            config.tolerance = float(data.get('tolerance', DEFAULT_TOLERANCE))
            config.channel_tolerance = int(data.get('channel_tolerance', COLOR_TOLERANCE))
            config.pixel_model = PixelModel(data.get('pixel_model', 'channel'))
            config.pixel_step = int(data.get('pixel_step', PIXEL_STEP))
            config.early_stop_threshold = float(data.get('early_stop_threshold', EARLY_STOP_THRESHOLD))
            config.report_mode = ReportMode(data.get('report_mode', 'list'))
            config.failure_policy = FailurePolicy(data.get('failure_policy', 'fail_fast'))
            config.workers = int(data.get('workers', 1))
            config.log_level = LogLevel(data.get('log_level', 'INFO'))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'tolerance': self.tolerance,
            'channel_tolerance': self.channel_tolerance,
            'pixel_model': self.pixel_model.value,
            'pixel_step': self.pixel_step,
            'early_stop_threshold': self.early_stop_threshold,
            'report_mode': self.report_mode.value,
            'failure_policy': self.failure_policy.value,
            'workers': self.workers,
            'log_level': self.log_level.value,
        }

    def save(self, config_path: str) -> None:
        """Save configuration to JSON file."""
        with open(config_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=4)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not 0.0 <= self.tolerance <= 1.0:
            errors.append(f"tolerance must be in [0, 1], got {self.tolerance}")
        if not 0 <= self.channel_tolerance <= 255:
            errors.append(f"channel_tolerance must be in [0, 255], got {self.channel_tolerance}")
        if self.pixel_step < 1:
            errors.append(f"pixel_step must be at least 1, got {self.pixel_step}")
        if not 0.0 < self.early_stop_threshold <= 1.0:
            errors.append(f"early_stop_threshold must be in (0, 1], got {self.early_stop_threshold}")
        if self.workers < 1:
            errors.append(f"workers must be at least 1, got {self.workers}")

        return errors

    def log_summary(self, logger: Optional[logging.Logger] = None) -> None:
        """Log the effective settings of a run."""
        logger = logger or logging.getLogger(__name__)
        logger.info(f"Tolerance: {self.tolerance}")
        logger.debug(
            f"Pixel model: {self.pixel_model.value}, channel tolerance: {self.channel_tolerance}, "
            f"step: {self.pixel_step}, early stop: {self.early_stop_threshold}"
        )


@dataclass
class RectangleConfig:
    """Black rectangle finder configuration."""
    black_threshold: int = RECTANGLE_PARAMS['BLACK_THRESHOLD']
    min_width: int = RECTANGLE_PARAMS['MIN_RECT_WIDTH']
    min_height: int = RECTANGLE_PARAMS['MIN_RECT_HEIGHT']
    column_grouping_threshold: float = RECTANGLE_PARAMS['COLUMN_GROUPING_THRESHOLD']
