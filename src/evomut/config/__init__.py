"""Convenience exports for the configuration package."""

from .loader import ConfigError, load_config, parse_config, save_config
from .logging_conf import JSONFormatter, configure_logging
from .schemas import (
    LinkedPolynomialMutationConfig,
    MultiMutationConfig,
    NonUniformMutationConfig,
    PolynomialMutationConfig,
    StrategyWeights,
    UniformMutationConfig,
)
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "ConfigError",
    "load_config",
    "parse_config",
    "save_config",
    "JSONFormatter",
    "configure_logging",
    "LinkedPolynomialMutationConfig",
    "MultiMutationConfig",
    "NonUniformMutationConfig",
    "PolynomialMutationConfig",
    "StrategyWeights",
    "UniformMutationConfig",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
