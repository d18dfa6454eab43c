"""JavaScript linter built on the tree-sitter JavaScript grammar.

One engine serves both modes; ``jshint`` and ``jslint`` differ only in their
default options. Options follow JSHint naming: enforcing options (``eqeqeq``,
``curly``, ...) add warnings when true, relaxing options (``asi``, ``debug``,
``evil``, ``withstmt``) silence warnings when true.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from jshint_mode.core.options import int_option, parse_directive, resolve_options
from jshint_mode.models import LintFinding

JSHINT_DEFAULTS: dict[str, Any] = {
    "asi": False,
    "bitwise": False,
    "curly": False,
    "debug": False,
    "eqeqeq": False,
    "evil": False,
    "maxerr": 50,
    "noempty": False,
    "plusplus": False,
    "withstmt": False,
}

JSLINT_DEFAULTS: dict[str, Any] = {
    **JSHINT_DEFAULTS,
    "bitwise": True,
    "curly": True,
    "eqeqeq": True,
    "noempty": True,
    "plusplus": True,
}

_SEMICOLON_STATEMENTS = frozenset(
    {
        "break_statement",
        "continue_statement",
        "debugger_statement",
        "do_statement",
        "expression_statement",
        "import_statement",
        "lexical_declaration",
        "return_statement",
        "throw_statement",
        "variable_declaration",
    }
)

_EXPORTED_BLOCKS = frozenset({"class", "function", "function_expression", "generator_function"})

_LOOP_STATEMENTS = frozenset({"do_statement", "for_in_statement", "for_statement", "while_statement"})

_FUNCTION_NODES = frozenset(
    {
        "arrow_function",
        "class_static_block",
        "function_declaration",
        "function_expression",
        "generator_function",
        "generator_function_declaration",
        "method_definition",
    }
)

_BITWISE_OPERATORS = frozenset({"&", "|", "^", "<<", ">>", ">>>", "~", "&=", "|=", "^=", "<<=", ">>=", ">>>="})

_TOKEN_PREVIEW_WIDTH = 20


class _Report:
    """Collects findings for one lint run, converting tree-sitter points."""

    def __init__(self, lines: list[bytes]) -> None:
        self.lines = lines
        self.findings: list[LintFinding] = []

    def evidence(self, row: int) -> str | None:
        if row >= len(self.lines):
            return None
        return self.lines[row].decode("utf-8", errors="replace").rstrip("\r")

    def add(self, row: int, column: int, reason: str) -> None:
        # tree-sitter columns are byte offsets; report code points.
        prefix = self.lines[row][:column] if row < len(self.lines) else b""
        character = len(prefix.decode("utf-8", errors="replace")) + 1
        self.findings.append(
            LintFinding(line=row + 1, character=character, reason=reason, evidence=self.evidence(row))
        )

    def add_at(self, node: Node, reason: str) -> None:
        self.add(node.start_point[0], node.start_point[1], reason)


def _text(node: Node) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _first_leaf(node: Node) -> Node:
    while node.child_count > 0:
        node = node.children[0]
    return node


def _token_preview(node: Node) -> str:
    text = _text(_first_leaf(node)).splitlines()
    if not text or not text[0]:
        return "(end)"
    return text[0][:_TOKEN_PREVIEW_WIDTH]


def _last_code_child(node: Node) -> Node | None:
    for child in reversed(node.children):
        if child.type != "comment":
            return child
    return None


def _semicolon_gap(node: Node) -> Node | None:
    """Return the node a missing semicolon is reported after, or None."""
    kind = node.type
    if kind == "field_definition":
        # Class fields end in a semicolon that belongs to the class body.
        sibling = node.next_sibling
        while sibling is not None and sibling.type == "comment":
            sibling = sibling.next_sibling
        return node if sibling is None or sibling.type != ";" else None
    if kind == "export_statement":
        if node.child_by_field_name("declaration") is not None:
            return None
        value = node.child_by_field_name("value")
        if value is not None and value.type in _EXPORTED_BLOCKS:
            return None
    elif kind not in _SEMICOLON_STATEMENTS:
        return None
    last = _last_code_child(node)
    return last if last is not None and last.type != ";" else None


def _operator(node: Node) -> Node | None:
    op = node.child_by_field_name("operator")
    if op is not None:
        return op
    for child in node.children:
        if not child.is_named:
            return child
    return None


def _iter_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def collect_directives(root: Node) -> list[dict[str, Any]]:
    """Return the inline ``/* jshint ... */`` option blocks in source order."""
    directives = []
    for node in _iter_nodes(root):
        if node.type == "comment":
            parsed = parse_directive(_text(node))
            if parsed:
                directives.append(parsed)
    return directives


class JavaScriptLinter:
    """Lint JavaScript source with a fixed set of default options."""

    def __init__(self, name: str, defaults: Mapping[str, Any] | None = None) -> None:
        self.name = name
        self.defaults = dict(JSHINT_DEFAULTS if defaults is None else defaults)
        self._parser: Parser | None = None

    def __repr__(self) -> str:
        return f"JavaScriptLinter(name={self.name!r})"

    @property
    def parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser("javascript")
        return self._parser

    def lint(self, source: str, config: Mapping[str, Any]) -> list[LintFinding]:
        source_bytes = (source or "").encode("utf-8")
        tree = self.parser.parse(source_bytes)
        root = tree.root_node
        options = resolve_options(self.defaults, config, collect_directives(root))

        report = _Report(source_bytes.split(b"\n"))
        self._walk(root, options, report)
        self._check_line_length(options, report)

        findings = sorted(report.findings, key=lambda f: (f.line, f.character))
        maxerr = max(1, int_option(options, "maxerr", 50) or 50)
        if len(findings) > maxerr:
            findings = findings[:maxerr]
            last = findings[-1]
            findings.append(
                LintFinding(line=last.line, character=last.character, reason="Too many errors.", evidence=last.evidence)
            )
        return findings

    def _walk(self, root: Node, options: Mapping[str, Any], report: _Report) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_missing:
                report.add_at(node, f"Expected '{node.type}'.")
                continue
            if node.is_error:
                report.add_at(node, f"Unexpected '{_token_preview(node)}'.")
                continue
            self._check_node(node, options, report)
            stack.extend(reversed(node.children))

    def _check_node(self, node: Node, options: Mapping[str, Any], report: _Report) -> None:
        kind = node.type

        if not options.get("asi") and not node.has_error:
            gap = _semicolon_gap(node)
            if gap is not None:
                report.add(gap.end_point[0], gap.end_point[1], "Missing semicolon.")

        if kind == "binary_expression":
            op = _operator(node)
            if op is not None:
                if options.get("eqeqeq") and op.type in ("==", "!="):
                    report.add_at(op, f"Expected '{op.type}=' and instead saw '{op.type}'.")
                if options.get("bitwise") and op.type in _BITWISE_OPERATORS:
                    report.add_at(op, f"Unexpected use of '{op.type}'.")
        elif kind in ("unary_expression", "augmented_assignment_expression"):
            op = _operator(node)
            if options.get("bitwise") and op is not None and op.type in _BITWISE_OPERATORS:
                report.add_at(op, f"Unexpected use of '{op.type}'.")
        elif kind == "update_expression":
            op = _operator(node)
            if options.get("plusplus") and op is not None:
                report.add_at(op, f"Unexpected use of '{op.type}'.")
        elif kind == "debugger_statement":
            if not options.get("debug"):
                report.add_at(node, "Forgotten 'debugger' statement?")
        elif kind == "with_statement":
            if not options.get("withstmt"):
                report.add_at(node, "Don't use 'with'.")
        elif kind == "call_expression":
            func = node.child_by_field_name("function")
            if not options.get("evil") and func is not None and func.type == "identifier" and _text(func) == "eval":
                report.add_at(func, "eval can be harmful.")
        elif kind == "statement_block":
            if options.get("noempty") and node.parent is not None and node.parent.type not in _FUNCTION_NODES:
                if not any(child.type != "comment" for child in node.named_children):
                    report.add_at(node, "Empty block.")

        if options.get("curly"):
            self._check_curly(node, report)

    def _check_curly(self, node: Node, report: _Report) -> None:
        body: Node | None = None
        if node.type == "if_statement":
            body = node.child_by_field_name("consequence")
        elif node.type in _LOOP_STATEMENTS:
            body = node.child_by_field_name("body")
        elif node.type == "else_clause":
            body = _last_code_child(node)
            if body is not None and body.type == "if_statement":
                body = None
        if body is not None and body.type != "statement_block" and not body.is_missing:
            report.add_at(body, f"Expected '{{' and instead saw '{_token_preview(body)}'.")

    def _check_line_length(self, options: Mapping[str, Any], report: _Report) -> None:
        maxlen = int_option(options, "maxlen")
        if not maxlen or maxlen < 1:
            return
        for row in range(len(report.lines)):
            line = report.evidence(row) or ""
            if len(line) > maxlen:
                report.findings.append(
                    LintFinding(line=row + 1, character=len(line), reason="Line is too long.", evidence=line)
                )
