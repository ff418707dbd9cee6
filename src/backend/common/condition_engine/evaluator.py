"""Evaluate a condition tree against a set of checklist answers.

The evaluator is a pure function of (condition, answers, available questions). It
never raises for incomplete or mistyped answers: every statement is reduced to a
boolean and every node of the tree is mirrored by a ``TraceNode`` so the outcome can
be audited. Rendering the trace to text lives in ``explain``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Set, Union

from .comparators import compare, comparator_label, is_empty
from .config import EngineSettings, get_engine_settings
from .explain import VACUOUS_TRUTH_MESSAGE, render_explanation
from .models import (
    AvailableQuestion,
    Condition,
    EvaluationResult,
    Group,
    LogicOperator,
    Statement,
    TraceKind,
    TraceNode,
)

logger = logging.getLogger(__name__)

ConditionLike = Union[Condition, Mapping[str, Any]]
QuestionLike = Union[AvailableQuestion, Mapping[str, Any]]


def as_condition(condition: ConditionLike) -> Condition:
    if isinstance(condition, Condition):
        return condition
    return Condition.model_validate(condition)


def as_questions(questions: Optional[Iterable[QuestionLike]]) -> List[AvailableQuestion]:
    out: List[AvailableQuestion] = []
    for q in questions or ():
        out.append(q if isinstance(q, AvailableQuestion) else AvailableQuestion.model_validate(q))
    return out


def combine(operator: str, results: List[bool]) -> bool:
    if operator == LogicOperator.AND.value:
        return all(results)
    return any(results)


class ConditionEvaluator:
    def __init__(
        self,
        available_questions: Optional[Iterable[QuestionLike]] = None,
        *,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_engine_settings()
        self._titles = {q.id: q.title for q in as_questions(available_questions)}

    def question_title(self, question_id: str) -> str:
        return self._titles.get(question_id) or self.settings.unknown_question_title

    def evaluate(self, condition: ConditionLike, answers: Optional[Mapping[str, Any]]) -> EvaluationResult:
        cond = as_condition(condition)
        if answers is None:
            answers = {}
        elif not isinstance(answers, Mapping):
            logger.warning(
                "Answers for condition %s are not a mapping (%s); treating as empty.", cond.id, type(answers).__name__
            )
            answers = {}

        if not cond.items:
            trace = TraceNode(
                kind=TraceKind.CONDITION,
                item_id=cond.id,
                result=True,
                raw_result=True,
                operator=cond.operator,
                note=VACUOUS_TRUTH_MESSAGE,
            )
            return EvaluationResult(result=True, explanation=VACUOUS_TRUTH_MESSAGE, trace=trace)

        children = self._evaluate_items(cond.items, answers, depth=1, active={id(cond)})
        result = combine(cond.operator, [c.result for c in children])
        trace = TraceNode(
            kind=TraceKind.CONDITION,
            item_id=cond.id,
            result=result,
            raw_result=result,
            operator=cond.operator,
            note=self._operator_note(cond.operator, cond.id),
            children=children,
        )
        logger.debug("Condition %s evaluated to %s over %d item(s).", cond.id, result, len(children))
        return EvaluationResult(result=result, explanation=render_explanation(trace), trace=trace)

    def evaluate_statement(self, statement: Statement, answers: Mapping[str, Any]) -> TraceNode:
        answer = answers.get(statement.question_id)
        outcome = compare(statement.comparator, answer, statement.value, statement.second_value)
        note = None
        if outcome is None:
            logger.warning(
                "Unknown comparator %r in statement %s; evaluating as false.", statement.comparator, statement.id
            )
            note = f"Unknown comparator '{statement.comparator}'"
            outcome = False

        result = not outcome if statement.is_negated else outcome
        return TraceNode(
            kind=TraceKind.STATEMENT,
            item_id=statement.id,
            result=result,
            raw_result=outcome,
            negated=statement.is_negated,
            question_id=statement.question_id,
            question_title=self.question_title(statement.question_id),
            comparator=statement.comparator,
            comparator_label=comparator_label(statement.comparator),
            value=statement.value,
            second_value=statement.second_value,
            answer=answer,
            answer_present=not is_empty(answer),
            note=note,
        )

    def evaluate_group(self, group: Group, answers: Mapping[str, Any]) -> TraceNode:
        return self._evaluate_group(group, answers, depth=1, active=set())

    def _evaluate_items(self, items, answers: Mapping[str, Any], *, depth: int, active: Set[int]) -> List[TraceNode]:
        # Every child is evaluated (no short-circuit) so the trace is complete.
        out: List[TraceNode] = []
        for item in items:
            if isinstance(item, Group):
                out.append(self._evaluate_group(item, answers, depth=depth, active=active))
            else:
                out.append(self.evaluate_statement(item, answers))
        return out

    def _evaluate_group(self, group: Group, answers: Mapping[str, Any], *, depth: int, active: Set[int]) -> TraceNode:
        if id(group) in active:
            logger.warning("Group %s contains itself; evaluating the repeated reference as false.", group.id)
            return self._cut_off(group, "Cyclic reference to this group; evaluated as FALSE")
        if depth > self.settings.max_eval_depth:
            logger.warning(
                "Group %s is nested deeper than %d levels; evaluating as false.", group.id, self.settings.max_eval_depth
            )
            return self._cut_off(group, f"Nested deeper than {self.settings.max_eval_depth} levels; evaluated as FALSE")

        active.add(id(group))
        try:
            children = self._evaluate_items(group.items, answers, depth=depth + 1, active=active)
        finally:
            active.discard(id(group))

        raw = combine(group.operator, [c.result for c in children])
        result = not raw if group.is_negated else raw
        return TraceNode(
            kind=TraceKind.GROUP,
            item_id=group.id,
            result=result,
            raw_result=raw,
            negated=group.is_negated,
            operator=group.operator,
            note=self._operator_note(group.operator, group.id),
            children=children,
        )

    def _cut_off(self, group: Group, note: str) -> TraceNode:
        return TraceNode(
            kind=TraceKind.GROUP,
            item_id=group.id,
            result=False,
            raw_result=False,
            operator=group.operator,
            note=note,
        )

    @staticmethod
    def _operator_note(operator: str, item_id: str) -> Optional[str]:
        if operator in (LogicOperator.AND.value, LogicOperator.OR.value):
            return None
        logger.warning("Unknown logic operator %r on %s; combining as OR.", operator, item_id)
        return f"Unknown operator '{operator}', combined as OR"


def evaluate_condition(
    condition: ConditionLike,
    answers: Optional[Mapping[str, Any]],
    available_questions: Optional[Iterable[QuestionLike]] = None,
    *,
    settings: Optional[EngineSettings] = None,
) -> EvaluationResult:
    return ConditionEvaluator(available_questions, settings=settings).evaluate(condition, answers)
