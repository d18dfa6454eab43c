import logging
from collections.abc import Mapping, Sequence
from typing import Any

from jshint_mode.core.javascript import JSLINT_DEFAULTS, JavaScriptLinter
from jshint_mode.core.ports.linter import Linter
from jshint_mode.models import LintFinding

logger = logging.getLogger(__name__)

DEFAULT_MODE = "jshint"
JSLINT_MODE = "jslint"
ANONYMOUS = "anonymous"


def default_linters() -> dict[str, Linter]:
    return {
        DEFAULT_MODE: JavaScriptLinter(DEFAULT_MODE),
        JSLINT_MODE: JavaScriptLinter(JSLINT_MODE, JSLINT_DEFAULTS),
    }


def normalize_mode(mode: str | None) -> str:
    """Only the exact string ``"jslint"`` selects JSLint; anything else is JSHint."""
    return JSLINT_MODE if mode == JSLINT_MODE else DEFAULT_MODE


def format_findings(findings: Sequence[LintFinding | None], show_code: bool) -> str:
    output: list[str] = []
    for finding in findings:
        if not finding:
            continue
        output.append(f"Lint at line {finding.line} character {finding.character}: {finding.reason}\n")
        if show_code:
            output.append(f"{(finding.evidence or '').strip()}\n")
            output.append("\n")
    return "".join(output)


def run_lint(
    linters: Mapping[str, Linter],
    mode: str,
    source: str,
    config: Mapping[str, Any],
) -> list[LintFinding]:
    linter = linters.get(mode)
    if linter is None:
        logger.warning("Unknown lint mode %r, using %r", mode, DEFAULT_MODE)
        linter = linters[DEFAULT_MODE]
    return linter.lint(source, config)


def render_report(findings: Sequence[LintFinding | None], filename: str | None, show_code: bool) -> str:
    if not any(findings):
        return f"js: No problems found in {filename or ANONYMOUS}\n"
    return format_findings(findings, show_code)


def lintify(
    linters: Mapping[str, Linter],
    mode: str,
    source: str,
    filename: str | None,
    show_code: bool,
    config: Mapping[str, Any],
) -> str:
    """Run the linter registered for ``mode`` and render a plain-text report."""
    return render_report(run_lint(linters, mode, source, config), filename, show_code)
