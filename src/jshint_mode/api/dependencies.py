from __future__ import annotations

from fastapi import Request

from jshint_mode.core.config import ConfigCache
from jshint_mode.core.ports.linter import Linter


def get_config_cache(request: Request) -> ConfigCache:
    """Return the process-wide config cache stored on the application."""
    cache: ConfigCache = request.app.state.config_cache
    return cache


def get_linters(request: Request) -> dict[str, Linter]:
    linters: dict[str, Linter] = request.app.state.linters
    return linters
