"""
Logging utilities for the Nominatim client.

Configures stdlib logging from the [logging] table of the TOML config:

    [logging]
    level = "INFO"
    console = true
    file = "logs/nominatim.log"
    rotate = true

    [logging.logger."nominatim.executor"]
    level = "DEBUG"
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers which log every request on INFO/DEBUG
NOISY_LOGGERS = ("httpx", "httpcore")


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get numeric log level by its name, or default for unknown names."""
    level = logging.getLevelName(levelStr.upper())
    if isinstance(level, int):
        return level
    logger.error(f"Invalid log level '{levelStr}'")
    return default


def _handlerLevel(config: Dict[str, Any], key: str, fallback: int) -> int:
    if key not in config:
        return fallback
    level = getLogLevelByStr(config[key], fallback)
    return fallback if level is None else level


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """Configure single logger: level, propagation, console and file handlers."""
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        logLevel = getLogLevelByStr(config["level"])
        if logLevel is not None:
            localLogger.setLevel(logLevel)
    logLevel = localLogger.getEffectiveLevel()

    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))

    # Drop handlers from previous configuration
    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)

    if config.get("console", False):
        consoleHandler = logging.StreamHandler()
        consoleHandler.setLevel(_handlerLevel(config, "console-level", logLevel))
        consoleHandler.setFormatter(formatter)
        localLogger.addHandler(consoleHandler)

    if "file" in config:
        logPath = Path(config["file"])
        try:
            logPath.parent.mkdir(parents=True, exist_ok=True)
            fileHandler: logging.Handler
            if config.get("rotate", False):
                fileHandler = TimedRotatingFileHandler(
                    filename=logPath,
                    when="midnight",
                    interval=1,
                    backupCount=7,
                    encoding="utf-8",
                )
            else:
                fileHandler = logging.FileHandler(logPath, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to setup file logging for {localLogger.name}: {e}")
            return

        fileHandler.setLevel(_handlerLevel(config, "file-level", logLevel))
        fileHandler.setFormatter(formatter)
        localLogger.addHandler(fileHandler)
        logger.info(f"Logging {localLogger.name} to file: {logPath}")


def initLogging(config: Dict[str, Any]) -> None:
    """Configure root logger and per-logger overrides from config, dood!"""
    rootLogger = logging.getLogger()
    rootLogger.setLevel(logging.INFO)
    configureLogger(rootLogger, config)
    logLevel = rootLogger.getEffectiveLevel()

    # httpx logs every request on INFO, keep it quiet unless asked explicitly
    if logLevel < logging.WARNING and not config.get("verbose-http", False):
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    for loggerName, loggerConfig in config.get("logger", {}).items():
        logger.debug(f"Configuring logger '{loggerName}' with config {loggerConfig}")
        configureLogger(logging.getLogger(loggerName), loggerConfig)

    logger.debug(f"Logging configured: root level={logging.getLevelName(logLevel)}")
