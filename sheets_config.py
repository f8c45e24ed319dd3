"""Server settings read from the environment (and a .env file, if present)"""

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from sheets_errors import ConfigurationError

TRANSPORTS = ("stdio", "http")


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.INFO
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    client_cache_size: int = 0


def _int_setting(env, name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings(env=None, dotenv: bool = True) -> Settings:
    """Build Settings from environment variables"""
    if env is None:
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    level_name = env.get("SHEETS_MCP_LOG_LEVEL", "INFO").strip().upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unknown log level: {level_name}")

    transport = env.get("SHEETS_MCP_TRANSPORT", "stdio").strip().lower()
    if transport not in TRANSPORTS:
        raise ConfigurationError(
            f"SHEETS_MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}"
        )

    return Settings(
        log_level=log_level,
        transport=transport,
        host=env.get("SHEETS_MCP_HOST", "127.0.0.1"),
        port=_int_setting(env, "SHEETS_MCP_PORT", 8000, minimum=1),
        client_cache_size=_int_setting(env, "SHEETS_CLIENT_CACHE_SIZE", 0),
    )
