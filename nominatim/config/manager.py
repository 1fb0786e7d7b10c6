"""
Configuration management for the Nominatim client.

Configuration lives in TOML files:

    [nominatim]
    base-url = "http://localhost:8080"
    timeout = 10
    user-agent = "my-app/1.0"
    accept-language = ["en", "pt"]
    abort-on-cancel = false

    [logging]
    level = "INFO"
    console = true

Values may reference environment variables as ``${VAR_NAME}``; variables
from an optional .env file are loaded first.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

from ..constants import DEFAULT_ACCEPT_LANGUAGE, DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from ..exceptions import ConfigurationError
from .types import NominatimConfig

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}")


def loadDotenv(path: str = ".env") -> Dict[str, str]:
    """Load KEY=VALUE pairs from a .env file into os.environ.

    Variables already set in the environment win over the file.
    Missing file is not an error.

    Returns:
        Dictionary of key-value pairs read from the file
    """
    ret: Dict[str, str] = {}
    dotEnvPath = Path(path)
    if not dotEnvPath.is_file():
        return ret

    with open(dotEnvPath, "rt", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            ret[key.strip()] = value.strip().strip('"')

    for key, value in ret.items():
        os.environ.setdefault(key, value)
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret


def substituteEnvVars(value: Any) -> Any:
    """Recursively replace ${VAR_NAME} placeholders with environment values.

    Unset variables are left as-is.
    """
    if isinstance(value, str):
        return ENV_PLACEHOLDER_RE.sub(lambda match: os.getenv(match.group(1), match.group(0)), value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def mergeConfigs(baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge newConfig over baseConfig, dood!"""
    merged = baseConfig.copy()
    for key, value in newConfig.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = mergeConfigs(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Loads configuration from a TOML file and optional config directories.

    Files found in config directories (recursively, sorted by path) are merged
    over the main file, later files winning.
    """

    def __init__(
        self,
        configPath: Optional[str] = "config.toml",
        configDirs: Optional[List[str]] = None,
        dotEnvFile: str = ".env",
    ):
        """Initialize ConfigManager.

        Args:
            configPath: Main config file, may be None if configDirs are given
            configDirs: Directories to scan recursively for *.toml files
            dotEnvFile: .env file to load before substituting ${VAR} placeholders

        Raises:
            ConfigurationError: If no config source exists or a file can't be parsed
        """
        self.configPath = configPath
        self.configDirs = configDirs or []
        loadDotenv(dotEnvFile)
        self.config: Dict[str, Any] = substituteEnvVars(self._loadConfig())

    def _findTomlFiles(self, directory: str) -> List[Path]:
        dirPath = Path(directory)
        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping, dood!")
            return []
        return sorted(path for path in dirPath.rglob("*.toml") if path.is_file())

    def _loadToml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "rb") as f:
                return tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigurationError(f"Failed to parse config file {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    def _loadConfig(self) -> Dict[str, Any]:
        configFile = Path(self.configPath) if self.configPath else None
        hasConfigFile = configFile is not None and configFile.exists()
        if not hasConfigFile and not self.configDirs:
            raise ConfigurationError(f"Configuration file {self.configPath} not found")

        config: Dict[str, Any] = {}
        if hasConfigFile and configFile is not None:
            config = self._loadToml(configFile)
            logger.info(f"Loaded main config from {configFile}")

        for configDir in self.configDirs:
            tomlFiles = self._findTomlFiles(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")
            for tomlFile in tomlFiles:
                config = mergeConfigs(config, self._loadToml(tomlFile))
                logger.debug(f"Merged config from {tomlFile}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get top-level configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.get("logging", {})

    def getNominatimConfig(self) -> NominatimConfig:
        """Get [nominatim] configuration with defaults applied.

        Raises:
            ConfigurationError: If a value has a wrong type
        """
        raw = self.get("nominatim", {})
        if not isinstance(raw, dict):
            raise ConfigurationError("[nominatim] must be a table")

        config: NominatimConfig = {
            "base-url": raw.get("base-url", DEFAULT_BASE_URL),
            "timeout": raw.get("timeout", DEFAULT_TIMEOUT),
            "accept-language": raw.get("accept-language", list(DEFAULT_ACCEPT_LANGUAGE)),
            "abort-on-cancel": raw.get("abort-on-cancel", False),
        }
        if "user-agent" in raw:
            config["user-agent"] = raw["user-agent"]

        if not isinstance(config["base-url"], str) or not config["base-url"]:
            raise ConfigurationError("nominatim.base-url must be a non-empty string")
        if isinstance(config["timeout"], bool) or not isinstance(config["timeout"], (int, float)):
            raise ConfigurationError("nominatim.timeout must be a number of seconds")
        if isinstance(config["accept-language"], str):
            config["accept-language"] = [lang.strip() for lang in config["accept-language"].split(",") if lang.strip()]
        if not isinstance(config["accept-language"], list):
            raise ConfigurationError("nominatim.accept-language must be a list of language tags")
        if not isinstance(config["abort-on-cancel"], bool):
            raise ConfigurationError("nominatim.abort-on-cancel must be a boolean")

        return config
