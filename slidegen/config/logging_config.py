"""
Environment-specific logging configuration
"""
import logging
import os
from typing import Dict, Any, Optional


# Modules that get chatty during asset resolution and rendering
NOISY_MODULES = [
    "slidegen.services.asset_search",
    "slidegen.agents.assets.asset_agent",
    "slidegen.agents.generation.html_renderer",
]


def _parse_level(level: str) -> int:
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration based on environment"""

    is_production = os.getenv("ENV") == "production"
    is_debug = os.getenv("DEBUG", "false").lower() == "true"

    config = {
        "production": {
            "default_level": "WARNING",
            "console_format": "%(levelname)s - %(message)s",
            "progress_thresholds": [0, 50, 100],
            "suppress_modules": NOISY_MODULES,
        },
        "development": {
            "default_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "console_format": "%(asctime)s - %(levelname)s - %(message)s",
            "progress_thresholds": [0, 25, 50, 75, 100],
            "suppress_modules": [],
        },
        "debug": {
            "default_level": "DEBUG",
            "console_format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            "progress_thresholds": [0, 10, 20, 30, 40, 50, 60, 70, 75, 80, 85, 90, 100],
            "suppress_modules": [],
        },
    }

    if is_debug:
        environment = "debug"
    elif is_production:
        environment = "production"
    else:
        environment = "development"

    selected_config = dict(config[environment])
    selected_config["environment"] = environment
    return selected_config


def apply_logging_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Apply logging configuration to Python's logging system"""
    if config is None:
        config = get_logging_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(_parse_level(config["default_level"]))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(config["console_format"]))

    root_logger.handlers = []
    root_logger.addHandler(console_handler)

    for module in config.get("suppress_modules", []):
        logging.getLogger(module).setLevel(logging.WARNING)

    return config


def should_log_progress(percent: int, config: Optional[Dict[str, Any]] = None) -> bool:
    """Whether a progress checkpoint is worth a log line in this environment."""
    config = config or get_logging_config()
    return percent in config.get("progress_thresholds", [])


def setup_logging(level: Optional[str] = None) -> Dict[str, Any]:
    """Logging setup for library and CLI use.

    - Applies the environment profile when the root logger has no handlers
    - Otherwise only sets the root level, keeping existing handlers
    """
    config = get_logging_config()
    if level:
        config["default_level"] = str(level).upper()

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        return apply_logging_config(config)
    root_logger.setLevel(_parse_level(config["default_level"]))
    return config


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
