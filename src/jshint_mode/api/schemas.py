from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from jshint_mode.core.lint import normalize_mode


class CheckForm(BaseModel):
    """POST /check — form fields after defaulting.

    ``mode`` is ``"jslint"`` only for that exact value, ``show_code`` is true
    only for ``"1"``; an absent ``source`` lints as empty text.
    """

    source: str = ""
    filename: str | None = None
    mode: str = "jshint"
    show_code: bool = False
    jshintrc: str | None = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> CheckForm:
        def _text(name: str) -> str | None:
            value = fields.get(name)
            return value if isinstance(value, str) else None

        return cls(
            source=_text("source") or "",
            filename=_text("filename") or None,
            mode=normalize_mode(_text("mode")),
            show_code=_text("showCode") == "1",
            jshintrc=_text("jshintrc") or None,
        )
