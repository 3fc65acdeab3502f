"""Configuration helpers for the GoTrue client."""

from __future__ import annotations

import os

from .exceptions import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_REFRESH_MARGIN_SECONDS = 60

URL_ENV_VAR = "GOTRUE_URL"


def sanitize_base_url(url: str) -> str:
    """Ensure the base URL never ends with a trailing slash."""

    return url.rstrip("/")


def resolve_base_url(url: str | None = None) -> str:
    """Resolve the service URL: explicit argument, then the GOTRUE_URL env var.

    Raises:
        ConfigurationError: If neither is set.
    """
    url = url or os.environ.get(URL_ENV_VAR)
    if not url or not url.strip():
        raise ConfigurationError(f"No base URL provided. Pass url or set the {URL_ENV_VAR} environment variable.")
    return sanitize_base_url(url.strip())
