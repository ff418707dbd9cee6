"""Comparator semantics for condition statements.

Answers come out of dynamic form inputs, so every comparator coerces instead of
raising: numeric comparators work on floats (missing or non-numeric input becomes
NaN, and every comparison against NaN is false), text comparators work on strings
(a missing answer becomes ""), and choice comparators work on lists (a missing
answer becomes []). A missing expected value is not blanked the same way: it reads
as "undefined" for text and as [None] for choices, so it never matches by default.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from .models import Comparator, QuestionType

CompareFn = Callable[[Any, Any, Any], bool]

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def to_number(value: Any) -> float:
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if _NUMBER_RE.match(text):
            return float(text)
        if _INFINITY_RE.match(text):
            return -math.inf if text.startswith("-") else math.inf
        return math.nan
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return to_number(value[0])
    return math.nan


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-Infinity" if value < 0 else "Infinity"
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    return str(value)


def to_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def value_text(value: Any) -> str:
    # A missing expected value is never "", which every string contains.
    if value is None:
        return "undefined"
    return to_text(value)


def value_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _loose_number(value: Any) -> float:
    # A blank string equals 0 when compared against a number or boolean.
    if isinstance(value, str) and not value.strip():
        return 0.0
    return to_number(value)


def loose_equals(left: Any, right: Any) -> bool:
    """Equality that tolerates mixed string/number/boolean form input.

    ``1 == "1"`` and ``True == "1"`` hold, ``None`` only equals ``None``, lists are
    compared element-wise and are joined with commas when compared to a scalar.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(loose_equals(a, b) for a, b in zip(left, right))
    if isinstance(left, (list, tuple)):
        return loose_equals(to_text(left), right)
    if isinstance(right, (list, tuple)):
        return loose_equals(left, to_text(right))

    if isinstance(left, dict) or isinstance(right, dict):
        return left == right

    if isinstance(left, str) and isinstance(right, str):
        return left == right

    if isinstance(left, bool) or isinstance(right, bool) or _is_number(left) or _is_number(right):
        return _loose_number(left) == _loose_number(right)

    return left == right


def same_value(left: Any, right: Any) -> bool:
    """Strict membership equality used by the choice comparators."""
    if _is_number(left) and _is_number(right):
        if isinstance(left, float) and isinstance(right, float) and math.isnan(left) and math.isnan(right):
            return True
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _contains(items: Iterable[Any], needle: Any) -> bool:
    return any(same_value(item, needle) for item in items)


def _numeric(op: Callable[[float, float], bool]) -> CompareFn:
    def _compare(answer: Any, value: Any, second_value: Any) -> bool:
        left = to_number(answer)
        right = to_number(value)
        if math.isnan(left) or math.isnan(right):
            return False
        return op(left, right)

    return _compare


def _between(answer: Any, value: Any, second_value: Any) -> bool:
    if value is None or second_value is None:
        return False
    num = to_number(answer)
    low = to_number(value)
    high = to_number(second_value)
    if math.isnan(num) or math.isnan(low) or math.isnan(high):
        return False
    return low <= num <= high


def _contains_all(answer: Any, value: Any, second_value: Any) -> bool:
    answers = to_list(answer)
    return all(_contains(answers, expected) for expected in value_list(value))


def _contains_any(answer: Any, value: Any, second_value: Any) -> bool:
    answers = to_list(answer)
    return any(_contains(answers, expected) for expected in value_list(value))


@dataclass(frozen=True)
class ComparatorSpec:
    comparator: Comparator
    label: str
    ui_label: str
    compare: CompareFn
    needs_second_value: bool = False


class ComparatorRegistry:
    def __init__(self):
        self._specs: Dict[str, ComparatorSpec] = {}

    def register(self, spec: ComparatorSpec) -> None:
        token = spec.comparator.value
        if token in self._specs:
            raise ValueError(f"Duplicate comparator registered: {token}")
        self._specs[token] = spec

    def get(self, token: str) -> Optional[ComparatorSpec]:
        return self._specs.get(token)

    def all(self) -> List[ComparatorSpec]:
        return list(self._specs.values())


registry = ComparatorRegistry()

for _spec in (
    ComparatorSpec(Comparator.EQUALS, "equals", "Equals", lambda a, v, s: loose_equals(a, v)),
    ComparatorSpec(Comparator.NOT_EQUALS, "does not equal", "Not Equals", lambda a, v, s: not loose_equals(a, v)),
    ComparatorSpec(Comparator.CONTAINS, "contains", "Contains", lambda a, v, s: value_text(v) in to_text(a)),
    ComparatorSpec(
        Comparator.STARTS_WITH, "starts with", "Starts With", lambda a, v, s: to_text(a).startswith(value_text(v))
    ),
    ComparatorSpec(
        Comparator.ENDS_WITH, "ends with", "Ends With", lambda a, v, s: to_text(a).endswith(value_text(v))
    ),
    ComparatorSpec(Comparator.GREATER_THAN, "is greater than", "Greater Than", _numeric(lambda a, b: a > b)),
    ComparatorSpec(
        Comparator.GREATER_THAN_OR_EQUAL,
        "is greater than or equal to",
        "Greater Than or Equal",
        _numeric(lambda a, b: a >= b),
    ),
    ComparatorSpec(Comparator.LESS_THAN, "is less than", "Less Than", _numeric(lambda a, b: a < b)),
    ComparatorSpec(
        Comparator.LESS_THAN_OR_EQUAL,
        "is less than or equal to",
        "Less Than or Equal",
        _numeric(lambda a, b: a <= b),
    ),
    ComparatorSpec(Comparator.BETWEEN, "is between", "Between", _between, needs_second_value=True),
    ComparatorSpec(Comparator.CONTAINS_ALL, "contains all of", "Contains All", _contains_all),
    ComparatorSpec(Comparator.CONTAINS_ANY, "contains any of", "Contains Any", _contains_any),
):
    registry.register(_spec)


_TEXT_COMPARATORS = [
    Comparator.EQUALS,
    Comparator.NOT_EQUALS,
    Comparator.CONTAINS,
    Comparator.STARTS_WITH,
    Comparator.ENDS_WITH,
]
_NUMBER_COMPARATORS = [
    Comparator.EQUALS,
    Comparator.NOT_EQUALS,
    Comparator.GREATER_THAN,
    Comparator.GREATER_THAN_OR_EQUAL,
    Comparator.LESS_THAN,
    Comparator.LESS_THAN_OR_EQUAL,
    Comparator.BETWEEN,
]
_CHOICE_COMPARATORS = [Comparator.EQUALS, Comparator.CONTAINS_ALL, Comparator.CONTAINS_ANY]

COMPARATORS_BY_QUESTION_TYPE: Dict[str, List[Comparator]] = {
    QuestionType.TEXT.value: _TEXT_COMPARATORS,
    QuestionType.BARCODE.value: _TEXT_COMPARATORS,
    QuestionType.OCR.value: _TEXT_COMPARATORS,
    QuestionType.NUMBER.value: _NUMBER_COMPARATORS,
    QuestionType.BOOLEAN.value: [Comparator.EQUALS],
    QuestionType.SINGLE_CHOICE.value: _CHOICE_COMPARATORS,
    QuestionType.MULTI_CHOICE.value: _CHOICE_COMPARATORS,
}


def comparators_for_question_type(question_type: str) -> List[Comparator]:
    key = question_type.value if isinstance(question_type, QuestionType) else str(question_type or "")
    return list(COMPARATORS_BY_QUESTION_TYPE.get(key, [Comparator.EQUALS]))


def comparator_label(token: str) -> str:
    spec = registry.get(token)
    return spec.label if spec is not None else token


def compare(token: str, answer: Any, value: Any, second_value: Any = None) -> Optional[bool]:
    """Apply a comparator; returns None when the token is not a known comparator."""
    spec = registry.get(token)
    if spec is None:
        return None
    return spec.compare(answer, value, second_value)
