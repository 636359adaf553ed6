"""
Configuration Sources

Each source yields a (possibly partial) settings dictionary. Sources are
merged in ascending priority, so environment variables override a YAML file
and explicit overrides win over both.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from ..infrastructure.exceptions import ConfigurationError
from .models import MockseamSettings


class ConfigurationSource(ABC):
    """Base class for configuration sources."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Load configuration data from this source."""
        pass

    @abstractmethod
    def get_priority(self) -> int:
        pass

    def describe(self) -> str:
        return type(self).__name__


class YAMLConfigurationSource(ConfigurationSource):
    """Configuration source that loads from a YAML file."""

    def __init__(self, file_path: Union[str, Path], priority: int = 100, required: bool = True):
        self.file_path = Path(file_path)
        self._priority = priority
        self.required = required

    def load(self) -> Dict[str, Any]:
        if not self.file_path.exists():
            if not self.required:
                return {}
            raise ConfigurationError(
                f"Configuration file not found: {self.file_path}",
                config_path=str(self.file_path)
            )

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {self.file_path}",
                config_path=str(self.file_path),
                validation_errors=[str(e)]
            ) from e

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {self.file_path}",
                config_path=str(self.file_path)
            )
        return config

    def get_priority(self) -> int:
        return self._priority

    def describe(self) -> str:
        return f"yaml:{self.file_path}"


class EnvironmentConfigurationSource(ConfigurationSource):
    """Configuration source that loads from environment variables.

    ``MOCKSEAM_MOCKS__DEFAULT_MODE=strict`` becomes ``{"mocks": {"default_mode": "strict"}}``.
    Variables whose first key is not a settings section, such as
    ``MOCKSEAM_HOME``, are ignored.
    """

    def __init__(
        self,
        prefix: str = "MOCKSEAM_",
        priority: int = 200,
        environ: Optional[Dict[str, str]] = None,
        sections: Optional[Iterable[str]] = None
    ):
        self.prefix = prefix
        self.sections = set(sections if sections is not None else MockseamSettings.model_fields)
        self._priority = priority
        self._environ = environ

    def load(self) -> Dict[str, Any]:
        environ = self._environ if self._environ is not None else os.environ
        config: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(self.prefix):
                continue
            config_key = key[len(self.prefix):].lower()
            keys = [k for k in config_key.split('__') if k]
            if not keys or keys[0] not in self.sections:
                continue
            self._set_nested_value(config, keys, self._parse_value(value))

        return config

    def _parse_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if ',' in value:
            return self._parse_escaped_list(value)

        return value

    def _parse_escaped_list(self, value: str) -> List[str]:
        """Parse comma-separated list; a backslash escapes the next character."""
        items = []
        current_item = ""
        escaped = False

        for char in value:
            if escaped:
                current_item += char
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == ',':
                items.append(current_item.strip())
                current_item = ""
            else:
                current_item += char

        if current_item:
            items.append(current_item.strip())

        return items

    def _set_nested_value(self, config: Dict[str, Any], keys: List[str], value: Any) -> None:
        current = config
        for k in keys[:-1]:
            current = current.setdefault(k, {})
            if not isinstance(current, dict):
                raise ConfigurationError(
                    f"Environment variable {self.prefix}{'__'.join(keys).upper()} conflicts with a scalar setting"
                )
        current[keys[-1]] = value

    def get_priority(self) -> int:
        return self._priority

    def describe(self) -> str:
        return f"env:{self.prefix}*"


class DictConfigurationSource(ConfigurationSource):
    """In-memory overrides, typically passed by a test or a fixture."""

    def __init__(self, data: Dict[str, Any], priority: int = 300):
        self.data = data
        self._priority = priority

    def load(self) -> Dict[str, Any]:
        return dict(self.data)

    def get_priority(self) -> int:
        return self._priority
