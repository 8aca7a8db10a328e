from pathlib import Path

import pytest

from configs.settings import DEFAULT_CONFIG_PATH, AppConfig, default_config, load_config
from exceptions import ConfigValidationError, InvalidConfigError


def test_load_config() -> None:
    config = load_config(DEFAULT_CONFIG_PATH)

    assert config.auto_stop.grace_period_s == 10.0
    assert config.auto_stop.required_calm_checks == 6
    assert config.trim.settle_samples == 20
    assert config.stability.axes == ("pitch", "roll")
    assert config.metrics.poor_glide_decel == 2.0
    assert config.session.trend_window == 3


def test_default_yaml_matches_builtin_defaults() -> None:
    assert load_config(DEFAULT_CONFIG_PATH) == default_config()


def test_partial_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "partial.yaml"
    path.write_text("trim:\n  alignment: timestamp\nstability:\n  axes: [pitch, roll, yaw]\n")

    config = load_config(path)

    assert config.trim.alignment == "timestamp"
    assert config.trim.start_threshold == 2.0
    assert config.stability.axes == ("pitch", "roll", "yaw")
    assert config.auto_stop == AppConfig().auto_stop


def test_empty_file_is_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == default_config()


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigError):
        load_config(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("trim: [unclosed\n")
    with pytest.raises(InvalidConfigError):
        load_config(path)


def test_schema_violation(tmp_path: Path) -> None:
    path = tmp_path / "invalid.yaml"
    path.write_text("auto_stop:\n  check_interval_s: 0\n")
    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(path)
    assert any("check_interval_s" in e for e in exc_info.value.validation_errors)


def test_glide_thresholds_must_be_ordered(tmp_path: Path) -> None:
    path = tmp_path / "glide.yaml"
    path.write_text("metrics:\n  excellent_glide_decel: 1.5\n  very_good_glide_decel: 1.0\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)
