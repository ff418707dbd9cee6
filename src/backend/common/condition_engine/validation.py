"""Author-facing checks for condition trees.

Validation is advisory: the evaluator tolerates every problem reported here, but a
condition with ERROR-level issues will rarely behave the way its author intended.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel

from .comparators import comparators_for_question_type, registry as comparator_registry, to_number
from .config import get_engine_settings
from .evaluator import ConditionLike, QuestionLike, as_condition, as_questions
from .models import AvailableQuestion, Comparator, Group, LogicOperator, Statement


class IssueSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class IssueCode(str, Enum):
    MISSING_QUESTION = "MISSING_QUESTION"
    UNKNOWN_QUESTION = "UNKNOWN_QUESTION"
    SAME_BLOCK_REFERENCE = "SAME_BLOCK_REFERENCE"
    QUESTION_TYPE_MISMATCH = "QUESTION_TYPE_MISMATCH"
    UNKNOWN_COMPARATOR = "UNKNOWN_COMPARATOR"
    COMPARATOR_NOT_ALLOWED = "COMPARATOR_NOT_ALLOWED"
    MISSING_SECOND_VALUE = "MISSING_SECOND_VALUE"
    INVERTED_RANGE = "INVERTED_RANGE"
    EMPTY_GROUP = "EMPTY_GROUP"
    NESTING_TOO_DEEP = "NESTING_TOO_DEEP"
    NESTING_LEVEL_MISMATCH = "NESTING_LEVEL_MISMATCH"
    DUPLICATE_ID = "DUPLICATE_ID"
    CYCLE = "CYCLE"
    UNKNOWN_OPERATOR = "UNKNOWN_OPERATOR"


class ConditionIssue(BaseModel):
    item_id: str
    code: IssueCode
    severity: IssueSeverity
    message: str


def is_valid(issues: Iterable[ConditionIssue]) -> bool:
    return not any(issue.severity == IssueSeverity.ERROR for issue in issues)


class _Validator:
    def __init__(self, questions: List[AvailableQuestion], max_nesting_level: int):
        self.questions: Dict[str, AvailableQuestion] = {q.id: q for q in questions}
        self.max_nesting_level = max_nesting_level
        self.issues: List[ConditionIssue] = []
        self._seen_ids: Set[str] = set()

    def add(self, item_id: str, code: IssueCode, severity: IssueSeverity, message: str) -> None:
        self.issues.append(ConditionIssue(item_id=item_id, code=code, severity=severity, message=message))

    def check_operator(self, item_id: str, operator: str) -> None:
        if operator not in (LogicOperator.AND.value, LogicOperator.OR.value):
            self.add(
                item_id,
                IssueCode.UNKNOWN_OPERATOR,
                IssueSeverity.ERROR,
                f"Operator '{operator}' is not AND or OR; it will be combined as OR.",
            )

    def check_id(self, item_id: str) -> None:
        if not item_id:
            return
        if item_id in self._seen_ids:
            self.add(item_id, IssueCode.DUPLICATE_ID, IssueSeverity.WARNING, f"Item id '{item_id}' is used more than once.")
        self._seen_ids.add(item_id)

    def visit_items(self, items, *, level: int, path: Set[int]) -> None:
        for item in items:
            if isinstance(item, Group):
                self.visit_group(item, level=level, path=path)
            else:
                self.visit_statement(item)

    def visit_group(self, group: Group, *, level: int, path: Set[int]) -> None:
        if id(group) in path:
            self.add(group.id, IssueCode.CYCLE, IssueSeverity.ERROR, "Group contains itself.")
            return
        self.check_id(group.id)
        self.check_operator(group.id, group.operator)

        if level > self.max_nesting_level:
            self.add(
                group.id,
                IssueCode.NESTING_TOO_DEEP,
                IssueSeverity.ERROR,
                f"Group is at nesting level {level}; the maximum is {self.max_nesting_level}.",
            )
        if group.nesting_level != level:
            self.add(
                group.id,
                IssueCode.NESTING_LEVEL_MISMATCH,
                IssueSeverity.WARNING,
                f"Group declares nesting level {group.nesting_level} but sits at level {level}.",
            )
        if not group.items:
            outcome = "TRUE" if group.operator == LogicOperator.AND.value else "FALSE"
            self.add(
                group.id,
                IssueCode.EMPTY_GROUP,
                IssueSeverity.WARNING,
                f"Group has no conditions and always evaluates to {outcome} before negation.",
            )

        path.add(id(group))
        try:
            self.visit_items(group.items, level=level + 1, path=path)
        finally:
            path.discard(id(group))

    def visit_statement(self, statement: Statement) -> None:
        self.check_id(statement.id)
        question_type = statement.question_type

        if not statement.question_id:
            self.add(statement.id, IssueCode.MISSING_QUESTION, IssueSeverity.ERROR, "No question selected.")
        else:
            question = self.questions.get(statement.question_id)
            if question is None:
                self.add(
                    statement.id,
                    IssueCode.UNKNOWN_QUESTION,
                    IssueSeverity.ERROR,
                    f"Question '{statement.question_id}' is not available to this condition.",
                )
            else:
                if question.is_from_current_block:
                    self.add(
                        statement.id,
                        IssueCode.SAME_BLOCK_REFERENCE,
                        IssueSeverity.ERROR,
                        f"Question '{question.title}' belongs to the block this condition controls.",
                    )
                if question.type != statement.question_type:
                    self.add(
                        statement.id,
                        IssueCode.QUESTION_TYPE_MISMATCH,
                        IssueSeverity.WARNING,
                        f"Statement declares type '{statement.question_type}' but question "
                        f"'{question.title}' is '{question.type}'.",
                    )
                question_type = question.type

        spec = comparator_registry.get(statement.comparator)
        if spec is None:
            self.add(
                statement.id,
                IssueCode.UNKNOWN_COMPARATOR,
                IssueSeverity.ERROR,
                f"Comparator '{statement.comparator}' is not supported and always evaluates to FALSE.",
            )
            return

        allowed = comparators_for_question_type(question_type)
        if spec.comparator not in allowed:
            self.add(
                statement.id,
                IssueCode.COMPARATOR_NOT_ALLOWED,
                IssueSeverity.ERROR,
                f"Comparator '{statement.comparator}' cannot be used with '{question_type}' questions "
                f"(allowed: {', '.join(c.value for c in allowed)}).",
            )

        if spec.comparator == Comparator.BETWEEN:
            self.check_range(statement)

    def check_range(self, statement: Statement) -> None:
        if statement.value is None or statement.second_value is None:
            self.add(
                statement.id,
                IssueCode.MISSING_SECOND_VALUE,
                IssueSeverity.ERROR,
                "'between' needs both a lower bound (value) and an upper bound (secondValue).",
            )
            return
        low = to_number(statement.value)
        high = to_number(statement.second_value)
        if not math.isnan(low) and not math.isnan(high) and low > high:
            self.add(
                statement.id,
                IssueCode.INVERTED_RANGE,
                IssueSeverity.WARNING,
                f"Lower bound {statement.value} is greater than upper bound {statement.second_value}; "
                "the statement can never be true.",
            )


def validate_condition(
    condition: ConditionLike,
    available_questions: Optional[Iterable[QuestionLike]] = None,
    *,
    max_nesting_level: Optional[int] = None,
) -> List[ConditionIssue]:
    cond = as_condition(condition)
    if max_nesting_level is None:
        max_nesting_level = get_engine_settings().max_nesting_level

    validator = _Validator(as_questions(available_questions), max_nesting_level)
    validator.check_operator(cond.id, cond.operator)
    validator.visit_items(cond.items, level=0, path={id(cond)})
    return validator.issues
