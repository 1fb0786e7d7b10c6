"""TOML configuration for the Nominatim client."""

from .manager import ConfigManager, loadDotenv, mergeConfigs, substituteEnvVars
from .types import NominatimConfig

__all__ = [
    "ConfigManager",
    "NominatimConfig",
    "loadDotenv",
    "mergeConfigs",
    "substituteEnvVars",
]
