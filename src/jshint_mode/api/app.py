from __future__ import annotations

from fastapi import FastAPI, status

from jshint_mode.api.routes.check import router as check_router
from jshint_mode.api.routes.root import greeting_for_unrouted_method
from jshint_mode.api.routes.root import router as root_router
from jshint_mode.core.config import ConfigCache
from jshint_mode.core.lint import default_linters
from jshint_mode.core.ports.linter import Linter


def create_app(
    config_cache: ConfigCache | None = None,
    linters: dict[str, Linter] | None = None,
) -> FastAPI:
    app = FastAPI(
        title="jshint-mode",
        description="HTTP interface to a JavaScript linter for editor syntax checking.",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Both live for the whole process; the cache is never evicted.
    app.state.config_cache = config_cache if config_cache is not None else ConfigCache()
    app.state.linters = linters if linters is not None else default_linters()

    # /check must be registered before the catch-all greeting route.
    app.include_router(check_router)
    app.include_router(root_router)
    app.add_exception_handler(status.HTTP_405_METHOD_NOT_ALLOWED, greeting_for_unrouted_method)

    return app
