from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .config import EngineSettings
from .evaluator import ConditionEvaluator, QuestionLike, as_questions
from .models import (
    AvailableQuestion,
    BlockEvaluation,
    Branch,
    ConditionalBlock,
    ConditionRunReport,
    EvaluationResult,
)

logger = logging.getLogger(__name__)


def _block_evaluation(block: ConditionalBlock, evaluation: EvaluationResult) -> BlockEvaluation:
    return BlockEvaluation(
        block_id=block.id,
        block_title=block.title,
        result=evaluation.result,
        branch=Branch.IF_TRUE if evaluation.result else Branch.IF_FALSE,
        explanation=evaluation.explanation,
        trace=evaluation.trace,
    )


def preview_conditional_block(
    block: ConditionalBlock,
    available_questions: Optional[Iterable[QuestionLike]] = None,
    *,
    current_block_id: Optional[str] = None,
    test_data: Optional[Mapping[str, Any]] = None,
    settings: Optional[EngineSettings] = None,
) -> BlockEvaluation:
    """Evaluate a conditional block against sample answers while it is being authored.

    Questions from the block the condition lives in are not offered as references, so
    they are dropped from the display catalog before evaluating.
    """
    questions = [
        q
        for q in as_questions(available_questions)
        if not q.is_from_current_block and (current_block_id is None or q.block_id != current_block_id)
    ]
    answers = dict(block.test_data) if test_data is None else test_data
    evaluation = ConditionEvaluator(questions, settings=settings).evaluate(block.condition, answers)
    return _block_evaluation(block, evaluation)


class ConditionRunner:
    def __init__(
        self,
        available_questions: Optional[Iterable[QuestionLike]] = None,
        *,
        settings: Optional[EngineSettings] = None,
    ):
        self._questions: list[AvailableQuestion] = as_questions(available_questions)
        self._evaluator = ConditionEvaluator(self._questions, settings=settings)

    def run(
        self,
        blocks: Iterable[ConditionalBlock],
        answers: Mapping[str, Any],
        *,
        block_ids: Optional[set[str]] = None,
    ) -> ConditionRunReport:
        results = []
        for block in blocks:
            if block_ids is not None and block.id not in block_ids:
                continue
            evaluation = self._evaluator.evaluate(block.condition, answers)
            results.append(_block_evaluation(block, evaluation))

        totals: dict[str, int] = {"TRUE": 0, "FALSE": 0}
        for res in results:
            key = "TRUE" if res.result else "FALSE"
            totals[key] += 1

        logger.debug("Evaluated %d conditional block(s): %s", len(results), totals)
        return ConditionRunReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            results=results,
            totals=totals,
        )
