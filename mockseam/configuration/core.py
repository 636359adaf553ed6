"""
Core Configuration Management

Merges configuration sources by priority and validates the result.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import MockseamSettings
from .sources import (
    ConfigurationSource, DictConfigurationSource, EnvironmentConfigurationSource,
    YAMLConfigurationSource
)
from .validation import ConfigurationValidator


class MockseamConfiguration:
    """
    Settings assembled from several sources.

    Sources are loaded lowest priority first and deep-merged, so a later
    source only replaces the keys it mentions.
    """

    def __init__(self, sources: Optional[List[ConfigurationSource]] = None):
        self.sources = list(sources or [])
        self._config_data: Dict[str, Any] = {}
        self._settings: Optional[MockseamSettings] = None

    def add_source(self, source: ConfigurationSource) -> 'MockseamConfiguration':
        self.sources.append(source)
        self._settings = None
        return self

    def load(self) -> MockseamSettings:
        merged: Dict[str, Any] = {}
        for source in sorted(self.sources, key=lambda s: s.get_priority()):
            merged = self._deep_merge(merged, source.load())

        self._config_data = merged
        self._settings = ConfigurationValidator.validate_configuration(merged)
        return self._settings

    @property
    def settings(self) -> MockseamSettings:
        if self._settings is None:
            return self.load()
        return self._settings

    def get_raw_config(self) -> Dict[str, Any]:
        return dict(self._config_data)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_settings(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_environment: bool = True
) -> MockseamSettings:
    """Build settings from an optional YAML file, the environment and overrides."""
    configuration = MockseamConfiguration()
    if path is not None:
        configuration.add_source(YAMLConfigurationSource(path))
    if use_environment:
        configuration.add_source(EnvironmentConfigurationSource())
    if overrides:
        configuration.add_source(DictConfigurationSource(overrides))
    return configuration.load()
