"""
Configuration Management

Settings models, sources, validation and loading.
"""

from .models import MockseamSettings, MockSettings, VerificationSettings, LoggingSettings
from .sources import (
    ConfigurationSource, YAMLConfigurationSource, EnvironmentConfigurationSource,
    DictConfigurationSource
)
from .validation import ConfigurationValidator, ConfigurationValidationError, MOCKSEAM_CONFIG_SCHEMA
from .core import MockseamConfiguration, load_settings

__all__ = [
    "MockseamSettings",
    "MockSettings",
    "VerificationSettings",
    "LoggingSettings",
    "ConfigurationSource",
    "YAMLConfigurationSource",
    "EnvironmentConfigurationSource",
    "DictConfigurationSource",
    "ConfigurationValidator",
    "ConfigurationValidationError",
    "MOCKSEAM_CONFIG_SCHEMA",
    "MockseamConfiguration",
    "load_settings",
]
