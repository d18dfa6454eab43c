from collections.abc import Mapping
from typing import Any, Protocol

from jshint_mode.models import LintFinding


class Linter(Protocol):
    name: str

    def lint(self, source: str, config: Mapping[str, Any]) -> list[LintFinding]: ...
