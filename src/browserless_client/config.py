"""
Environment configuration for processes that host the client.

Variables:
    BROWSERLESS_TOKEN     API token (required)
    BROWSERLESS_PROTOCOL  http or https (default: http)
    BROWSERLESS_HOST      host name (default: localhost)
    BROWSERLESS_PORT      port (default: 3000)
    BROWSERLESS_TIMEOUT   request timeout in seconds (default: 30)
"""
from __future__ import annotations

import os
from typing import Mapping, Optional

from browserless_client.core.errors import BrowserlessConfigError
from browserless_client.core.models import BrowserlessConfig

ENV_PREFIX = "BROWSERLESS_"


def _read_number(environ: Mapping[str, str], name: str, default: str, cast):
    raw = environ.get(ENV_PREFIX + name, default).strip()
    try:
        return cast(raw)
    except ValueError as e:
        raise BrowserlessConfigError(
            f"Invalid value for {ENV_PREFIX}{name}: {raw!r}",
            method="config_from_env",
        ) from e


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> BrowserlessConfig:
    """
    Build a BrowserlessConfig from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        A validated configuration.

    Raises:
        BrowserlessConfigError: If the token is missing or a value is invalid.
    """
    environ = os.environ if environ is None else environ

    token = environ.get(ENV_PREFIX + "TOKEN", "").strip()
    if not token:
        raise BrowserlessConfigError(
            f"{ENV_PREFIX}TOKEN is not set",
            method="config_from_env",
        )

    return BrowserlessConfig(
        token=token,
        protocol=environ.get(ENV_PREFIX + "PROTOCOL", "http").strip().lower(),
        host=environ.get(ENV_PREFIX + "HOST", "localhost").strip(),
        port=_read_number(environ, "PORT", "3000", int),
        timeout=_read_number(environ, "TIMEOUT", "30", float),
    )
