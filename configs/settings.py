"""Configuration loading for slide tracker."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

from configs.validator import validate_config
from exceptions import ConfigValidationError, InvalidConfigError
from log_config.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"


@dataclass(frozen=True)
class AutoStopConfig:
    grace_period_s: float = 10.0  # no auto-stop during push-off
    check_interval_s: float = 0.5
    calm_window_s: float = 3.0
    calm_threshold: float = 1.5  # m/s²

    @property
    def required_calm_checks(self) -> int:
        """Number of calm checks that must fill the window before stopping."""
        return int(round(self.calm_window_s / self.check_interval_s))


@dataclass(frozen=True)
class TrimConfig:
    start_threshold: float = 2.0  # m/s²
    pre_roll_samples: int = 5
    end_search_offset: int = 30
    settle_threshold: float = 1.5  # m/s²
    settle_samples: int = 20
    settle_margin: int = 10
    alignment: str = "index"


@dataclass(frozen=True)
class StabilityConfig:
    window_size: int = 5
    axes: Tuple[str, ...] = ("pitch", "roll")  # yaw left out of the score


@dataclass(frozen=True)
class MetricsConfig:
    pushoff_fraction: float = 0.2
    poor_glide_decel: float = 2.0
    excellent_glide_decel: float = 0.5
    very_good_glide_decel: float = 1.0


@dataclass(frozen=True)
class SessionConfig:
    trend_window: int = 3
    trend_margin: float = 5.0
    consistency_cv_scale: float = 10.0
    export_dir: str = "exports"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    auto_stop: AutoStopConfig = field(default_factory=AutoStopConfig)
    trim: TrimConfig = field(default_factory=TrimConfig)
    stability: StabilityConfig = field(default_factory=StabilityConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config() -> AppConfig:
    """Return the built-in configuration."""
    return AppConfig()


def _check_glide_thresholds(metrics: MetricsConfig) -> None:
    if not metrics.excellent_glide_decel <= metrics.very_good_glide_decel <= metrics.poor_glide_decel:
        raise ConfigValidationError(
            "Glide thresholds must satisfy excellent <= very_good <= poor",
            validation_errors=[
                f"metrics: excellent={metrics.excellent_glide_decel}, "
                f"very_good={metrics.very_good_glide_decel}, poor={metrics.poor_glide_decel}"
            ],
        )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load and validate configuration from YAML file.

    Sections and keys missing from the file fall back to the dataclass
    defaults.

    Args:
        path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = Path(path)
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text())
        if data is None:
            data = {}

        # Validate against JSON Schema
        validate_config(data)

        logger.debug("Parsing configuration sections")

    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    try:
        stability_data = dict(data.get("stability", {}))
        if "axes" in stability_data:
            stability_data["axes"] = tuple(stability_data["axes"])

        config = AppConfig(
            auto_stop=AutoStopConfig(**data.get("auto_stop", {})),
            trim=TrimConfig(**data.get("trim", {})),
            stability=StabilityConfig(**stability_data),
            metrics=MetricsConfig(**data.get("metrics", {})),
            session=SessionConfig(**data.get("session", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to construct configuration objects: {e}")
        raise InvalidConfigError(f"Failed to construct configuration: {e}")

    _check_glide_thresholds(config.metrics)

    logger.info(
        f"Configuration loaded successfully: grace={config.auto_stop.grace_period_s}s, "
        f"alignment={config.trim.alignment}, stability axes={','.join(config.stability.axes)}"
    )
    return config
