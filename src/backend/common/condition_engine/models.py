from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


class QuestionType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    PHOTO = "photo"
    BARCODE = "barcode"
    OCR = "ocr"


class LogicOperator(str, Enum):
    AND = "AND"
    OR = "OR"


class Comparator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    BETWEEN = "between"
    CONTAINS_ALL = "contains_all"
    CONTAINS_ANY = "contains_any"


class _CamelModel(BaseModel):
    # Stored condition trees use camelCase keys; python code uses snake_case.
    model_config = ConfigDict(populate_by_name=True)


def _token(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class Statement(_CamelModel):
    id: str = ""
    type: str = "statement"
    question_id: str = Field(default="", alias="questionId")
    # Raw tokens: unknown values must survive parsing and reach the evaluator.
    question_type: str = Field(default=QuestionType.TEXT.value, alias="questionType")
    comparator: str = Comparator.EQUALS.value
    value: Any = None
    second_value: Any = Field(default=None, alias="secondValue")
    is_negated: bool = Field(default=False, alias="isNegated")

    @field_validator("question_type", "comparator", mode="before")
    @classmethod
    def normalize_tokens(cls, value: Any) -> Any:
        return _token(value)


class Group(_CamelModel):
    id: str = ""
    type: str = "group"
    operator: str = LogicOperator.AND.value
    items: List["ConditionItem"] = Field(default_factory=list)
    is_negated: bool = Field(default=False, alias="isNegated")
    nesting_level: int = Field(default=0, alias="nestingLevel")

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, value: Any) -> Any:
        return _token(value)


def _item_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
        if kind in ("statement", "group"):
            return kind
        return "group" if "items" in value else "statement"
    if isinstance(value, Group):
        return "group"
    return "statement"


ConditionItem = Annotated[
    Union[Annotated[Statement, Tag("statement")], Annotated[Group, Tag("group")]],
    Discriminator(_item_kind),
]


class Condition(_CamelModel):
    id: str = ""
    operator: str = LogicOperator.AND.value
    items: List[ConditionItem] = Field(default_factory=list)

    @field_validator("operator", mode="before")
    @classmethod
    def normalize_operator(cls, value: Any) -> Any:
        return _token(value)


Group.model_rebuild()
Condition.model_rebuild()


class AvailableQuestion(_CamelModel):
    id: str
    block_id: str = Field(default="", alias="blockId")
    block_title: str = Field(default="", alias="blockTitle")
    block_index: int = Field(default=0, alias="blockIndex")
    title: str = ""
    type: str = QuestionType.TEXT.value
    is_from_current_block: bool = Field(default=False, alias="isFromCurrentBlock")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return _token(value)


class TraceKind(str, Enum):
    STATEMENT = "statement"
    GROUP = "group"
    CONDITION = "condition"


class TraceNode(BaseModel):
    kind: TraceKind
    item_id: str = ""
    result: bool
    # Outcome before the node's own negation was applied.
    raw_result: bool
    negated: bool = False

    operator: Optional[str] = None

    question_id: Optional[str] = None
    question_title: Optional[str] = None
    comparator: Optional[str] = None
    comparator_label: Optional[str] = None
    value: Any = None
    second_value: Any = None
    answer: Any = None
    answer_present: bool = False

    note: Optional[str] = None
    children: List["TraceNode"] = Field(default_factory=list)


TraceNode.model_rebuild()


class EvaluationResult(BaseModel):
    result: bool
    explanation: str
    trace: TraceNode


class ConditionalContent(_CamelModel):
    existing_block_ids: List[str] = Field(default_factory=list, alias="existingBlockIds")
    existing_question_ids: List[str] = Field(default_factory=list, alias="existingQuestionIds")
    new_blocks: List[Any] = Field(default_factory=list, alias="newBlocks")
    new_questions: List[Any] = Field(default_factory=list, alias="newQuestions")


class ConditionalBlock(_CamelModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    condition: Condition = Field(default_factory=Condition)
    if_true: ConditionalContent = Field(default_factory=ConditionalContent, alias="ifTrue")
    if_false: ConditionalContent = Field(default_factory=ConditionalContent, alias="ifFalse")
    test_data: Dict[str, Any] = Field(default_factory=dict, alias="testData")


class Branch(str, Enum):
    IF_TRUE = "if_true"
    IF_FALSE = "if_false"


class BlockEvaluation(BaseModel):
    block_id: str
    block_title: str = ""
    result: bool
    branch: Branch
    explanation: str
    trace: TraceNode


class ConditionRunReport(BaseModel):
    run_id: str
    generated_at: datetime

    results: List[BlockEvaluation] = Field(default_factory=list)
    totals: Dict[str, int] = Field(default_factory=dict)

    def get(self, block_id: str) -> Optional[BlockEvaluation]:
        for res in self.results:
            if res.block_id == block_id:
                return res
        return None
