"""Render an evaluation trace as human-readable text for condition authors."""

from __future__ import annotations

from typing import Any, List

from .comparators import is_empty, to_text
from .models import Comparator, LogicOperator, TraceKind, TraceNode

VACUOUS_TRUTH_MESSAGE = "No conditions set. Defaults to TRUE."
EMPTY_VALUE = "(empty)"
INDENT = "   "

CHECK = "✓"
CROSS = "✗"


def _mark(result: bool) -> str:
    return CHECK if result else CROSS


def _bool_text(result: bool) -> str:
    return "TRUE" if result else "FALSE"


def format_value(value: Any) -> str:
    if is_empty(value):
        return EMPTY_VALUE
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(v) for v in value)
    return to_text(value)


def _quoted(value: Any) -> str:
    text = format_value(value)
    return text if text == EMPTY_VALUE else f'"{text}"'


def _result_line(node: TraceNode, label: str) -> str:
    line = f"{label}: {_bool_text(node.result)}"
    if node.negated:
        line += f" (was {_bool_text(node.raw_result)}, inverted by NOT)"
    return line


def _indent(lines: List[str]) -> List[str]:
    return [INDENT + line if line else line for line in lines]


def render_statement(node: TraceNode) -> List[str]:
    not_text = "NOT " if node.negated else ""
    label = node.comparator_label or node.comparator or ""
    if node.comparator == Comparator.BETWEEN.value:
        compared = f"{format_value(node.value)} and {format_value(node.second_value)}"
    else:
        compared = _quoted(node.value)
    lines = [
        f'{_mark(node.result)} {not_text}"{node.question_title}" {label} {compared}',
        f"{INDENT}Your answer: {_quoted(node.answer)}",
        INDENT + _result_line(node, "Result"),
    ]
    if node.note:
        lines.append(f"{INDENT}Note: {node.note}")
    return lines


def _group_rule(operator: str) -> str:
    if operator == LogicOperator.AND.value:
        return "All of these must be true"
    return "At least one of these must be true"


def render_group(node: TraceNode) -> List[str]:
    not_text = "NOT " if node.negated else ""
    lines = [f"{_mark(node.result)} {not_text}Group ({_group_rule(node.operator or '')}):"]
    if node.children:
        for child in node.children:
            lines.extend(_indent(render_node(child)))
    else:
        lines.append(f"{INDENT}(no conditions in this group)")
    if node.note:
        lines.append(f"{INDENT}Note: {node.note}")
    lines.append(INDENT + _result_line(node, "Group Result"))
    return lines


def render_node(node: TraceNode) -> List[str]:
    if node.kind == TraceKind.STATEMENT:
        return render_statement(node)
    return render_group(node)


def render_explanation(trace: TraceNode) -> str:
    """Render the root trace: combining rule, one block per item, overall result."""
    if trace.kind != TraceKind.CONDITION:
        return "\n".join(render_node(trace))
    if not trace.children:
        return trace.note or VACUOUS_TRUTH_MESSAGE

    if trace.operator == LogicOperator.AND.value:
        rule = "All conditions must be true"
    else:
        rule = "At least one condition must be true"

    blocks = ["\n".join(render_node(child)) for child in trace.children]
    parts = [f"{rule}:"]
    if trace.note:
        parts.append(f"Note: {trace.note}")
    parts.append("\n\n".join(blocks))
    parts.append(f"{_mark(trace.result)} Overall Result: {_bool_text(trace.result)}")
    return "\n\n".join(parts)
