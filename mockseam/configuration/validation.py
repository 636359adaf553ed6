"""
Configuration validation with JSON Schema and the pydantic models.
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml
from jsonschema import Draft7Validator
from pydantic import ValidationError

from ..infrastructure.exceptions import ConfigurationError
from .models import MockseamSettings


MOCKSEAM_CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "mockseam configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "mocks": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "default_mode": {"type": "string", "enum": ["strict", "lenient", "partial", "STRICT", "LENIENT", "PARTIAL"]},
                "type_checking": {"type": "boolean"},
                "signature_checking": {"type": "boolean"}
            }
        },
        "verification": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "report_invocations": {"type": "boolean"}
            }
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {"type": "string"},
                "format": {"type": "string", "enum": ["text", "json"]},
                "output": {"type": "string", "enum": ["console", "file", "both"]},
                "file_path": {"type": ["string", "null"]}
            }
        }
    }
}


class ConfigurationValidationError(ConfigurationError):
    """Raised when a settings document fails validation."""

    def __init__(self, message: str, validation_errors: List[str], config_path: Union[str, None] = None):
        super().__init__(message, config_path=config_path, validation_errors=validation_errors)

    def get_detailed_message(self) -> str:
        lines = [self.message, "Validation errors:"]
        lines.extend(f"- {error}" for error in self.validation_errors)
        return "\n".join(lines)


class ConfigurationValidator:
    """Validates settings documents and reports every problem at once."""

    @staticmethod
    def validate_with_json_schema(config_data: Dict[str, Any]) -> List[str]:
        validator = Draft7Validator(MOCKSEAM_CONFIG_SCHEMA)
        errors = []
        for error in sorted(validator.iter_errors(config_data), key=lambda e: list(e.path)):
            path = " -> ".join(str(p) for p in error.path) if error.path else "root"
            errors.append(f"{path}: {error.message}")
        return errors

    @staticmethod
    def validate_with_models(config_data: Dict[str, Any]) -> List[str]:
        try:
            MockseamSettings.model_validate(config_data)
        except ValidationError as e:
            return [
                f"{' -> '.join(str(loc) for loc in error['loc']) or 'root'}: {error['msg']}"
                for error in e.errors()
            ]
        return []

    @staticmethod
    def validate_configuration(config_data: Any, config_path: Union[str, None] = None) -> MockseamSettings:
        """Validate ``config_data`` and return the parsed settings.

        Raises:
            ConfigurationValidationError: with every schema and model error.
        """
        if not isinstance(config_data, dict):
            raise ConfigurationValidationError(
                "Configuration must be a mapping",
                [f"root: expected a mapping, got {type(config_data).__name__}"],
                config_path
            )

        errors = ConfigurationValidator.validate_with_json_schema(config_data)
        if not errors:
            errors = ConfigurationValidator.validate_with_models(config_data)
        if errors:
            raise ConfigurationValidationError("Configuration validation failed", errors, config_path)

        return MockseamSettings.model_validate(config_data)

    @staticmethod
    def validate_config_file(config_path: Union[str, Path]) -> Tuple[bool, List[str]]:
        """Validate a settings file.

        Returns:
            Tuple of (is_valid, error_messages).
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            return False, [f"Configuration file not found: {config_path}"]
        except yaml.YAMLError as e:
            return False, [f"Invalid YAML format: {e}"]

        if config is None:
            return False, ["Configuration file is empty"]

        try:
            ConfigurationValidator.validate_configuration(config, str(config_path))
        except ConfigurationValidationError as e:
            return False, e.validation_errors
        return True, []
