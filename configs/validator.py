"""Configuration validation using JSON Schema."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import jsonschema
import yaml
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

TOLERANCE_SCHEMA = {
    "type": "object",
    "required": ["kind"],
    "properties": {
        "kind": {"type": "string", "enum": ["absolute", "relative", "absolute2d"]},
        "value": {"type": "number", "minimum": 0.0},
        "dy": {"type": "number", "exclusiveMinimum": 0.0},
        "dx": {"type": "number", "exclusiveMinimum": 0.0},
    },
    "allOf": [
        {
            "if": {"properties": {"kind": {"enum": ["absolute", "relative"]}}},
            "then": {"required": ["value"]},
        },
        {
            "if": {"properties": {"kind": {"const": "absolute2d"}}},
            "then": {"required": ["dy", "dx"]},
        },
    ],
}

DECISION_SCHEMA = {
    "type": "object",
    "required": ["points_matching_next_segment"],
    "properties": {
        "points_matching_next_segment": {"type": "integer", "minimum": 1},
        "max_intermediate_points_matching_current_segment": {"type": "integer", "minimum": 0, "default": 0},
    },
}

LEAF_SCHEMA = {
    "type": "object",
    "required": ["kind"],
    "properties": {
        "kind": {"type": "string", "enum": ["constant", "linear", "parabola", "poly"]},
        "degree": {"type": "integer", "minimum": 0, "maximum": 5},
        "max_data_points": {"type": "integer", "minimum": 1, "default": 500},
        "tolerance_points": {"type": "integer", "minimum": 0, "default": 1},
    },
    "if": {"properties": {"kind": {"const": "poly"}}},
    "then": {"required": ["degree"]},
}

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["trackers"],
    "properties": {
        "logging": {
            "type": "object",
            "default": {},
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
                    "default": "INFO",
                },
                "logs_dir": {"type": ["string", "null"], "default": None},
            },
        },
        "trackers": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": {
                "type": "object",
                "required": ["tolerance", "decision", "leaf"],
                "properties": {
                    "tolerance": TOLERANCE_SCHEMA,
                    "decision": DECISION_SCHEMA,
                    "leaf": LEAF_SCHEMA,
                },
            },
        },
    },
}


def extend_with_default(validator_class):
    """Extend JSON Schema validator to set default values."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        if isinstance(instance, dict):
            for prop, subschema in properties.items():
                if "default" in subschema:
                    instance.setdefault(prop, copy.deepcopy(subschema["default"]))

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema, filling in defaults.

    Args:
        config: Configuration dictionary (modified in place)

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


def validate_config_file(config_path: str) -> None:
    """Validate a YAML configuration file.

    Raises:
        ConfigValidationError: If the file is missing, unparsable or invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigValidationError(f"Configuration file not found: {config_path}")

    try:
        config = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigValidationError(f"Failed to parse configuration file: {e}")

    validate_config(config)


__all__ = ["validate_config", "validate_config_file", "CONFIG_SCHEMA"]
