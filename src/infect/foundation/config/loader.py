"""Infect configuration management.

Loads configuration from .infect/config.yaml with sensible defaults.
All settings can be overridden via environment variables (INFECT_REACTOR_*).

Config locations (in priority order):
1. Explicit path passed to load_config()
2. .infect/config.yaml (project-local)
3. ~/.infect/config.yaml (user-global)
4. Built-in defaults

Thread Safety:
    Uses threading.Lock for thread-safe lazy initialization in
    free-threaded Python (3.14t).
"""


import logging
import os
import threading
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from infect.foundation.errors import ErrorCode, InfectError, config_error

logger = logging.getLogger(__name__)

_ENV_PREFIX = "INFECT_REACTOR_"

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True, slots=True)
class ReactorConfig:
    """Configuration for a reactor and its consume loop."""

    channel_capacity: int = 64
    """Bound of the message channel. Messages enqueued beyond it are dropped."""

    idle_poll_interval: float | None = 0.1
    """Seconds between re-checks of outstanding tasks while waiting idle.

    A task may still count as outstanding when the loop has already
    processed its last message. Re-checking lets the loop become idle
    anyway. None waits for the next message without re-checking.
    """

    max_workers: int | None = None
    """Thread count of the default task executor (None = I/O-bound heuristic)."""

    log_level: str = "WARNING"
    """Log level applied by the CLI."""

    def __post_init__(self) -> None:
        if isinstance(self.channel_capacity, bool) or not isinstance(self.channel_capacity, int):
            raise config_error("channel_capacity", "must be an integer")
        if self.channel_capacity < 1:
            raise config_error(
                "channel_capacity",
                f"must be a positive integer, got {self.channel_capacity}",
            )
        if self.idle_poll_interval is not None and self.idle_poll_interval <= 0:
            raise config_error(
                "idle_poll_interval",
                f"must be positive or unset, got {self.idle_poll_interval}",
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise config_error(
                "max_workers",
                f"must be positive or unset, got {self.max_workers}",
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise config_error(
                "log_level",
                f"must be one of {', '.join(sorted(_LOG_LEVELS))}, got {self.log_level!r}",
            )


# Global config instance (lazy-loaded, thread-safe)
_config: ReactorConfig | None = None
_config_lock = threading.Lock()


def _deep_update(base: dict, updates: dict) -> dict:
    """Recursively update a dict with another dict."""
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _coerce(value: str) -> Any:
    """Coerce an environment string into bool, None, int, float or str."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("", "none", "null"):
        return None
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env_overrides(config_dict: dict) -> dict:
    """Apply environment variable overrides.

    Environment variables follow pattern: INFECT_REACTOR_<KEY>

    Examples:
        INFECT_REACTOR_CHANNEL_CAPACITY=256
        INFECT_REACTOR_IDLE_POLL_INTERVAL=0.5
    """
    known_keys = {f.name for f in fields(ReactorConfig)}
    reactor = config_dict.get("reactor") or {}
    if not isinstance(reactor, dict):
        return config_dict
    config_dict["reactor"] = reactor

    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        name = key[len(_ENV_PREFIX):].lower()
        if name not in known_keys:
            logger.debug("Ignoring unknown config override %s", key)
            continue
        reactor[name] = value if name == "log_level" else _coerce(value)

    return config_dict


def _dict_to_config(data: dict) -> ReactorConfig:
    """Convert a dict to ReactorConfig."""
    reactor = data.get("reactor") or {}
    if not isinstance(reactor, dict):
        raise config_error("reactor", "must be a mapping")
    known_keys = {f.name for f in fields(ReactorConfig)}
    unknown = set(reactor) - known_keys
    if unknown:
        raise config_error("reactor", f"unknown keys: {', '.join(sorted(unknown))}")
    return ReactorConfig(**reactor)


def _read_yaml(path: Path) -> dict:
    with open(path) as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise config_error(
            "reactor",
            "top level must be a mapping",
            code=ErrorCode.CONFIG_PARSE_ERROR,
            path=str(path),
        )
    return loaded


def load_config(path: str | Path | None = None) -> ReactorConfig:
    """Load configuration from file with defaults and env overrides.

    Priority (highest to lowest):
    1. Environment variables (INFECT_REACTOR_*)
    2. Explicit path if provided
    3. .infect/config.yaml (project-local)
    4. ~/.infect/config.yaml (user-global)
    5. Built-in defaults

    An explicit path that cannot be parsed raises; broken implicit config
    files are skipped with a warning.

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged ReactorConfig instance.
    """
    global _config

    config_dict: dict[str, Any] = {"reactor": asdict(ReactorConfig())}

    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise config_error("path", "file does not exist", code=ErrorCode.CONFIG_MISSING)
        try:
            _deep_update(config_dict, _read_yaml(explicit))
        except yaml.YAMLError as e:
            raise InfectError(
                ErrorCode.CONFIG_PARSE_ERROR,
                context={"path": str(explicit), "detail": str(e)},
                cause=e,
            ) from e
    else:
        for config_path in (
            Path(".infect/config.yaml"),
            Path.home() / ".infect" / "config.yaml",
        ):
            if not config_path.exists():
                continue
            try:
                _deep_update(config_dict, _read_yaml(config_path))
                break  # Use first found config
            except (yaml.YAMLError, InfectError) as e:
                logger.warning("Skipping invalid config file %s: %s", config_path, e)

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> ReactorConfig:
    """Get the current configuration, loading if needed.

    Thread-safe with double-check locking for free-threaded Python.
    """
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    with _config_lock:
        _config = None
