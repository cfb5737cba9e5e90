"""
Centralized configuration for opsecret.

All configuration is loaded from environment variables (and a ``.env`` file in
the working directory, if present). Real environment variables win over
``.env`` entries.

Usage:
    from opsecret.config import get_config
    cfg = get_config()
    cfg.validate()
    print(cfg.connect.api_url)   # "https://connect.example.com/v1"
    print(cfg.port)              # 3000
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from opsecret.errors import ConfigError
from opsecret.vault.client import normalize_base_url

DEFAULT_BIND = ":3000"
DEFAULT_TIMEOUT = 15.0

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_BARE_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ConnectConfig:
    """1Password Connect server parameters."""

    host: str = ""
    token: str = ""
    timeout: float = DEFAULT_TIMEOUT  # seconds

    @property
    def api_url(self) -> str:
        """Versioned API root derived from ``host``."""
        return normalize_base_url(self.host)


@dataclass(frozen=True)
class Config:
    """Top-level opsecret configuration."""

    bind: str = DEFAULT_BIND
    debug: bool = False
    secret: str = ""  # shared secret the CI server presents
    connect: ConnectConfig = field(default_factory=ConnectConfig)

    @property
    def host(self) -> str:
        host, _, _ = self.bind.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.bind.rpartition(":")
        try:
            return int(port)
        except ValueError as e:
            raise ConfigError(f"invalid DRONE_BIND address: {self.bind!r}") from e

    def validate(self) -> None:
        """Raise ConfigError for the first missing required setting."""
        if not self.secret:
            raise ConfigError("missing secret key (DRONE_SECRET)")
        if not self.connect.host:
            raise ConfigError("missing OP_CONNECT_HOST")
        if not self.connect.token:
            raise ConfigError("missing OP_CONNECT_TOKEN")
        normalize_base_url(self.connect.host)
        self.port  # noqa: B018


# Singleton
_config: Config | None = None


def get_config() -> Config:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> Config:
    """Load configuration from environment variables."""
    load_dotenv(find_dotenv(usecwd=True), override=False)

    connect = ConnectConfig(
        host=os.environ.get("OP_CONNECT_HOST", ""),
        token=os.environ.get("OP_CONNECT_TOKEN", ""),
        timeout=parse_duration(os.environ.get("OP_CONNECT_TIMEOUT", "15s")) or DEFAULT_TIMEOUT,
    )

    return Config(
        bind=os.environ.get("DRONE_BIND", "") or DEFAULT_BIND,
        debug=parse_bool(os.environ.get("DRONE_DEBUG", "")),
        secret=os.environ.get("DRONE_SECRET", ""),
        connect=connect,
    )


def parse_duration(value: str) -> float:
    """Parse ``15s``, ``500ms``, ``1m30s`` or bare seconds into seconds."""
    value = value.strip()
    if not value:
        return 0.0
    if _BARE_NUMBER.fullmatch(value):
        return float(value)
    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(value):
        raise ConfigError(f"invalid duration: {value!r}")
    return total


def parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
