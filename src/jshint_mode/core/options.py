"""Option resolution: linter defaults, config file, inline directives."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

_DIRECTIVE_RE = re.compile(r"^/\*\s*(?:jshint|jslint)\b(?P<body>.*?)\*/$", re.DOTALL)
_INT_RE = re.compile(r"^-?\d+$")


def coerce_value(raw: str) -> Any:
    value = raw.strip()
    if value == "true":
        return True
    if value == "false":
        return False
    if _INT_RE.match(value):
        return int(value)
    return value


def parse_directive(comment: str) -> dict[str, Any] | None:
    """Parse ``/* jshint key: value, ... */``; return None for any other comment."""
    match = _DIRECTIVE_RE.match(comment.strip())
    if match is None:
        return None
    options: dict[str, Any] = {}
    for item in match.group("body").split(","):
        key, sep, raw = item.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        options[key] = coerce_value(raw)
    return options


def resolve_options(
    defaults: Mapping[str, Any],
    config: Mapping[str, Any],
    directives: Iterable[Mapping[str, Any]] = (),
) -> dict[str, Any]:
    """Merge option layers; later layers win."""
    options = {**defaults, **config}
    for directive in directives:
        options.update(directive)
    return options


def int_option(options: Mapping[str, Any], key: str, default: int | None = None) -> int | None:
    value = options.get(key, default)
    if isinstance(value, bool):
        return default
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
