"""Conditional logic engine for dynamic inspection checklists.

This package intentionally contains only evaluation logic:
- Inputs are a condition tree, an answer map and the catalog of questions it may reference.
- No persistence, checklist mutation, or network calls live here.
"""

from .comparators import comparator_label, comparators_for_question_type
from .evaluator import ConditionEvaluator, evaluate_condition
from .explain import render_explanation
from .models import (
    AvailableQuestion,
    Comparator,
    Condition,
    ConditionalBlock,
    ConditionalContent,
    EvaluationResult,
    Group,
    LogicOperator,
    QuestionType,
    Statement,
    TraceNode,
)
from .runner import ConditionRunner, preview_conditional_block
from .validation import ConditionIssue, is_valid, validate_condition
