"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "auto_stop": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "grace_period_s": {"type": "number", "minimum": 0.0, "maximum": 600.0},
                "check_interval_s": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 10.0},
                "calm_window_s": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 60.0},
                "calm_threshold": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 50.0},
            },
        },
        "trim": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "start_threshold": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 50.0},
                "pre_roll_samples": {"type": "integer", "minimum": 0, "maximum": 1000},
                "end_search_offset": {"type": "integer", "minimum": 0, "maximum": 10000},
                "settle_threshold": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 50.0},
                "settle_samples": {"type": "integer", "minimum": 1, "maximum": 10000},
                "settle_margin": {"type": "integer", "minimum": 0, "maximum": 10000},
                "alignment": {"type": "string", "enum": ["index", "timestamp"]},
            },
        },
        "stability": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "window_size": {"type": "integer", "minimum": 1, "maximum": 101, "not": {"multipleOf": 2}},
                "axes": {
                    "type": "array",
                    "items": {"type": "string", "enum": ["pitch", "roll", "yaw"]},
                    "minItems": 1,
                    "maxItems": 3,
                    "uniqueItems": True,
                },
            },
        },
        "metrics": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "pushoff_fraction": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 1.0},
                "poor_glide_decel": {"type": "number", "minimum": 0.0},
                "excellent_glide_decel": {"type": "number", "minimum": 0.0},
                "very_good_glide_decel": {"type": "number", "minimum": 0.0},
            },
        },
        "session": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "trend_window": {"type": "integer", "minimum": 1, "maximum": 100},
                "trend_margin": {"type": "number", "minimum": 0.0, "maximum": 100.0},
                "consistency_cv_scale": {"type": "number", "minimum": 0.0, "maximum": 100.0},
                "export_dir": {"type": "string"},
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {"type": "string", "enum": ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]},
                "log_dir": {"type": ["string", "null"]},
            },
        },
    },
}


def extend_with_default(validator_class):
    """Extend JSON Schema validator to set default values."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if "default" in subschema:
                instance.setdefault(prop, subschema["default"])

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema.

    Args:
        config: Configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    try:
        validator = DefaultValidatingValidator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.debug("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


__all__ = ["validate_config", "CONFIG_SCHEMA"]
