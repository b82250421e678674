"""Configuration loading for tracker presets."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from configs.validator import validate_config
from contracts import DecisionCharacteristics
from exceptions import InvalidConfigError, TrackerConfigurationError
from log_config.logger import add_file_sinks, get_logger, set_level
from track.poly_trackers import ConstantTracker, LinearTracker, ParabolaTracker, PolyTracker
from track.tolerance import Absolute, Absolute2D, Relative, Tolerance
from track.tracker import SimpleTracker

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yaml")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    logs_dir: Optional[str] = None


@dataclass(frozen=True)
class ToleranceConfig:
    kind: str
    value: Optional[float] = None
    dy: Optional[float] = None
    dx: Optional[float] = None


@dataclass(frozen=True)
class DecisionConfig:
    points_matching_next_segment: int
    max_intermediate_points_matching_current_segment: int = 0


@dataclass(frozen=True)
class LeafTrackerConfig:
    kind: str
    degree: Optional[int] = None
    max_data_points: int = 500
    tolerance_points: int = 1


@dataclass(frozen=True)
class TrackerPreset:
    name: str
    tolerance_config: ToleranceConfig
    decision: DecisionConfig
    leaf: LeafTrackerConfig

    def tolerance(self) -> Tolerance:
        cfg = self.tolerance_config
        if cfg.kind == "absolute":
            return Absolute(cfg.value)
        if cfg.kind == "relative":
            return Relative(cfg.value)
        if cfg.kind == "absolute2d":
            return Absolute2D(dy=cfg.dy, dx=cfg.dx)
        raise InvalidConfigError(f"Unknown tolerance kind for tracker '{self.name}': {cfg.kind}")

    def decision_characteristics(self) -> DecisionCharacteristics:
        return DecisionCharacteristics(
            points_matching_next_segment=self.decision.points_matching_next_segment,
            max_intermediate_points_matching_current_segment=(
                self.decision.max_intermediate_points_matching_current_segment
            ),
        )

    def create_leaf_tracker(self) -> SimpleTracker:
        """Build an empty leaf tracker with this preset's tolerance."""
        leaf = self.leaf
        tolerance = self.tolerance()
        if leaf.kind == "constant":
            return ConstantTracker(
                max_data_points=leaf.max_data_points,
                tolerance_points=leaf.tolerance_points,
                tolerance=tolerance,
            )
        if leaf.kind == "linear":
            return LinearTracker(
                max_data_points=leaf.max_data_points,
                tolerance_points=leaf.tolerance_points,
                tolerance=tolerance,
            )
        if leaf.kind == "parabola":
            return ParabolaTracker(
                max_data_points=leaf.max_data_points,
                tolerance_points=leaf.tolerance_points,
                tolerance=tolerance,
            )
        if leaf.kind == "poly":
            return PolyTracker(
                degree=leaf.degree,
                max_data_points=leaf.max_data_points,
                tolerance_points=leaf.tolerance_points,
                tolerance=tolerance,
            )
        raise InvalidConfigError(f"Unknown leaf tracker kind for tracker '{self.name}': {leaf.kind}")


@dataclass(frozen=True)
class EngineConfig:
    trackers: Dict[str, TrackerPreset]
    logging: LoggingConfig

    def preset(self, name: str) -> TrackerPreset:
        try:
            return self.trackers[name]
        except KeyError:
            raise InvalidConfigError(f"No tracker preset named '{name}'") from None


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file (default: configs/default.yaml)

    Returns:
        Validated EngineConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text())
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Configuration file is empty or not a mapping: {path}")

        # Validate against JSON Schema
        validate_config(data)

        logger.debug("Parsing configuration sections")

    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    try:
        trackers = {}
        for name, preset in data["trackers"].items():
            trackers[name] = TrackerPreset(
                name=name,
                tolerance_config=ToleranceConfig(**preset["tolerance"]),
                decision=DecisionConfig(**preset["decision"]),
                leaf=LeafTrackerConfig(**preset["leaf"]),
            )
            # Surface bad parameter combinations at load time
            trackers[name].tolerance()

        config = EngineConfig(
            trackers=trackers,
            logging=LoggingConfig(**data["logging"]),
        )
    except KeyError as e:
        logger.error(f"Missing required configuration key: {e}")
        raise InvalidConfigError(f"Missing required configuration key: {e}")
    except (TypeError, ValueError, TrackerConfigurationError) as e:
        logger.error(f"Invalid configuration value: {e}")
        raise InvalidConfigError(f"Invalid configuration value: {e}")

    logger.info(f"Configuration loaded successfully: {len(config.trackers)} tracker presets ({', '.join(config.trackers)})")
    return config


def apply_logging_config(config: LoggingConfig) -> None:
    """Set the console level and, if configured, add file sinks."""
    set_level(config.level)
    if config.logs_dir:
        add_file_sinks(config.logs_dir)


__all__ = [
    "DecisionConfig",
    "EngineConfig",
    "LeafTrackerConfig",
    "LoggingConfig",
    "ToleranceConfig",
    "TrackerPreset",
    "apply_logging_config",
    "load_config",
]
