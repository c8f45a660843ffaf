"""
Configuration — Startup Settings for todoboard
===============================================
Reads the process environment once and hands the result to the views as a
plain object, so no component touches ``os.environ`` on its own.

Settings (all optional):
    TODOBOARD_HOST            Bind address (default 127.0.0.1)
    TODOBOARD_PORT            Port (default 3000)
    TODOBOARD_PUBLIC_PREFIX   Prefix marking client-visible variables
    TODOBOARD_EXPOSE          Comma-separated server-only names served by /api/env
    TODOBOARD_ENV_ENDPOINT    URL the environment page fetches
    TODOBOARD_FETCH_TIMEOUT   Seconds before the environment fetch gives up
    TODOBOARD_MAX_SESSIONS    Live browser sessions kept before eviction
    TODOBOARD_LOG_LEVEL       Logging level name (default WARNING)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_PUBLIC_PREFIX = "TODOBOARD_PUBLIC_"
DEFAULT_FETCH_TIMEOUT = 5.0
DEFAULT_MAX_SESSIONS = 256
DEFAULT_LOG_LEVEL = "WARNING"

PLACEHOLDER_ENTRIES = {
    "MY_VAR_FROM_YAML": "yaml_value (client-side placeholder)",
    "NEW_VAR_FROM_BACKEND": "backend_value (client-side placeholder)",
}


class ConfigError(ValueError):
    """A setting could not be parsed."""


@dataclass
class AppConfig:
    """Everything the server and its views need at runtime."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    public_prefix: str = DEFAULT_PUBLIC_PREFIX
    public_vars: dict[str, str] = field(default_factory=dict)
    server_vars: dict[str, str] = field(default_factory=dict)
    placeholders: dict[str, str] = field(default_factory=lambda: dict(PLACEHOLDER_ENTRIES))
    env_endpoint: str = ""
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_sessions: int = DEFAULT_MAX_SESSIONS
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if not self.env_endpoint:
            self.env_endpoint = f"http://{self.host}:{self.port}/api/env"

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
        """Build a config from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        prefix = env.get("TODOBOARD_PUBLIC_PREFIX", DEFAULT_PUBLIC_PREFIX)
        exposed = [
            name.strip()
            for name in env.get("TODOBOARD_EXPOSE", "").split(",")
            if name.strip()
        ]

        return cls(
            host=env.get("TODOBOARD_HOST", DEFAULT_HOST),
            port=_parse_int(env, "TODOBOARD_PORT", DEFAULT_PORT),
            public_prefix=prefix,
            public_vars=public_subset(env, prefix),
            server_vars={name: env[name] for name in exposed if name in env},
            env_endpoint=env.get("TODOBOARD_ENV_ENDPOINT", ""),
            fetch_timeout=_parse_float(env, "TODOBOARD_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
            max_sessions=_parse_int(env, "TODOBOARD_MAX_SESSIONS", DEFAULT_MAX_SESSIONS),
            log_level=env.get("TODOBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    def seed_entries(self) -> dict[str, str]:
        """Entries shown before the environment fetch completes."""
        seed = dict(self.public_vars)
        seed.update(self.placeholders)
        return seed

    def server_environment(self) -> dict[str, str]:
        """Payload of the /api/env debug endpoint."""
        data = dict(self.public_vars)
        data.update(self.server_vars)
        return data


def public_subset(environ: Mapping[str, str], prefix: str) -> dict[str, str]:
    """Variables whose name carries the client-visible prefix."""
    if not prefix:
        return {}
    return {key: value or "" for key, value in environ.items() if key.startswith(prefix)}


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value
