from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from common.condition_engine.catalog import ComparatorCatalogEntry, build_comparator_catalog
from common.condition_engine.evaluator import evaluate_condition
from common.condition_engine.models import AvailableQuestion, Condition, EvaluationResult
from common.condition_engine.validation import ConditionIssue, is_valid, validate_condition


router = APIRouter(prefix="/conditions", tags=["conditions"])


class EvaluateConditionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    condition: Condition
    answers: Dict[str, Any] = Field(default_factory=dict)
    available_questions: List[AvailableQuestion] = Field(default_factory=list, alias="availableQuestions")


class ValidateConditionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    condition: Condition
    available_questions: List[AvailableQuestion] = Field(default_factory=list, alias="availableQuestions")


class ValidateConditionResponse(BaseModel):
    valid: bool
    issues: List[ConditionIssue] = Field(default_factory=list)


@router.post("/evaluate", response_model=EvaluationResult)
def evaluate(body: EvaluateConditionRequest) -> EvaluationResult:
    return evaluate_condition(body.condition, body.answers, body.available_questions)


@router.post("/validate", response_model=ValidateConditionResponse)
def validate(body: ValidateConditionRequest) -> ValidateConditionResponse:
    issues = validate_condition(body.condition, body.available_questions)
    return ValidateConditionResponse(valid=is_valid(issues), issues=issues)


@router.get("/comparators", response_model=List[ComparatorCatalogEntry])
def comparators(question_type: Optional[str] = Query(None, alias="questionType")) -> List[ComparatorCatalogEntry]:
    return build_comparator_catalog(question_type)
