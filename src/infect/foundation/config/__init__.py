"""Configuration loading for Infect."""

from infect.foundation.config.loader import (
    ReactorConfig,
    get_config,
    load_config,
    reset_config,
)

__all__ = [
    "ReactorConfig",
    "get_config",
    "load_config",
    "reset_config",
]
