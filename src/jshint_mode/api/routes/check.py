import logging
import time

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

from jshint_mode.api.dependencies import get_config_cache, get_linters
from jshint_mode.api.schemas import CheckForm
from jshint_mode.core.config import ConfigCache
from jshint_mode.core.lint import ANONYMOUS, lintify
from jshint_mode.core.ports.linter import Linter

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/check", response_class=PlainTextResponse)
async def check(
    request: Request,
    cache: ConfigCache = Depends(get_config_cache),
    linters: dict[str, Linter] = Depends(get_linters),
) -> PlainTextResponse:
    try:
        async with request.form() as form:
            # File parts are not supported; only text fields are read.
            fields = {key: value for key, value in form.items() if not isinstance(value, UploadFile)}
    except (ClientDisconnect, HTTPException, MultiPartException) as exc:
        logger.warning("Could not parse form data: %s", exc)
        return PlainTextResponse("could not parse form data", status_code=status.HTTP_400_BAD_REQUEST)

    body = CheckForm.from_fields(fields)
    name = body.filename or ANONYMOUS
    logger.info("Applying '%s' to: %s", body.mode, name)

    started = time.perf_counter()
    config = cache.get(body.jshintrc)
    results = lintify(linters, body.mode, body.source, body.filename, body.show_code, config)
    logger.info("Took %dms to lint %s", (time.perf_counter() - started) * 1000, name)

    return PlainTextResponse(results)
