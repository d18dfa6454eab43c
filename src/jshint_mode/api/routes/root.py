from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()

GREETING = "hello from jshint-mode"

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=_ALL_METHODS, response_class=PlainTextResponse)
async def greeting(path: str) -> PlainTextResponse:
    """Any request other than ``POST /check`` gets the greeting."""
    return PlainTextResponse(GREETING)


async def greeting_for_unrouted_method(_request: Request, _exc: Exception) -> PlainTextResponse:
    """Methods no route lists (TRACE, PROPFIND, ...) get the greeting instead of a 405."""
    return PlainTextResponse(GREETING)
