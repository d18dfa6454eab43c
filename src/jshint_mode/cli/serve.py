"""Server bootstrap: pick the first free port in a range and run uvicorn on it."""

from __future__ import annotations

import copy
import errno
import logging
import socket
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3003
MAX_PORT = 65535
EXIT_NO_PORT = 2
_BACKLOG = 2048


class PortRangeExhaustedError(OSError):
    """Every port between the first and last port is already in use."""


def parse_port(value: str | None, default: int = DEFAULT_PORT) -> int:
    """Parse a port leniently; non-numeric, zero or negative gives ``default``.

    Values above the highest TCP port are clamped to it.
    """
    try:
        port = int(value) if value is not None else 0
    except ValueError:
        return default
    if port < 1:
        return default
    return min(port, MAX_PORT)


def bind_listener(host: str, port: int, last_port: int) -> socket.socket:
    """Bind and listen on the first free port from ``port`` up to ``last_port``.

    Only "address already in use" moves on to the next port; any other bind
    error propagates.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    last_port = min(last_port, MAX_PORT)
    while True:
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            if exc.errno != errno.EADDRINUSE:
                raise
            if port >= last_port:
                raise PortRangeExhaustedError(exc.errno, f"no free port on {host} up to {last_port}") from exc
            logger.debug("Port %d in use, trying %d", port, port + 1)
            port += 1
            continue
        sock.listen(_BACKLOG)
        return sock


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def uvicorn_log_config() -> dict[str, Any]:
    """uvicorn's default logging config with every handler on stderr."""
    from uvicorn.config import LOGGING_CONFIG

    log_config = copy.deepcopy(LOGGING_CONFIG)
    for handler in log_config["handlers"].values():
        handler["stream"] = "ext://sys.stderr"
    return log_config


def _run_server(sock: socket.socket, log_level: str) -> None:
    import uvicorn

    from jshint_mode.api.app import create_app

    config = uvicorn.Config(create_app(), log_level=log_level.lower(), log_config=uvicorn_log_config())
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()


def serve(
    ctx: typer.Context,
    host: Annotated[str, typer.Option(help="Address to listen on.")] = DEFAULT_HOST,
    port: Annotated[str, typer.Option(help="First port to try.")] = str(DEFAULT_PORT),
    lastport: Annotated[str, typer.Option(help="Last port to try.")] = str(DEFAULT_PORT),
    log_level: Annotated[str, typer.Option(help="Logging level (DEBUG, INFO, WARNING, ...).")] = "INFO",
) -> None:
    """Start the lint server on the first free port between --port and --lastport."""
    configure_logging(log_level)
    if ctx.invoked_subcommand is not None:
        return

    host = host or DEFAULT_HOST
    first = parse_port(port)
    last = parse_port(lastport)

    try:
        sock = bind_listener(host, first, last)
    except PortRangeExhaustedError:
        logger.error("Could not bind any port between %d and %d on %s", first, last, host)
        raise typer.Exit(code=EXIT_NO_PORT) from None

    bound_port = sock.getsockname()[1]
    logger.info("Listening on %s:%d", host, bound_port)
    # Editors parse this line to discover the chosen port.
    console.print(f"Started JSHint server at http://{host}:{bound_port}.", markup=False, highlight=False, soft_wrap=True)

    _run_server(sock, log_level)
