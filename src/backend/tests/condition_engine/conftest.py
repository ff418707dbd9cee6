import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.condition_engine.config import EngineSettings
from common.condition_engine.models import AvailableQuestion, Condition, Group, Statement


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def make_statement():
    counter = {"n": 0}

    def _make(
        question_id: str,
        comparator: str,
        value=None,
        *,
        second_value=None,
        negated: bool = False,
        question_type: str = "text",
        id: str | None = None,
    ) -> Statement:
        counter["n"] += 1
        return Statement(
            id=id or f"stmt_{counter['n']}",
            question_id=question_id,
            question_type=question_type,
            comparator=comparator,
            value=value,
            second_value=second_value,
            is_negated=negated,
        )

    return _make


@pytest.fixture
def make_group():
    counter = {"n": 0}

    def _make(operator: str, items, *, negated: bool = False, nesting_level: int = 0, id: str | None = None) -> Group:
        counter["n"] += 1
        return Group(
            id=id or f"grp_{counter['n']}",
            operator=operator,
            items=list(items),
            is_negated=negated,
            nesting_level=nesting_level,
        )

    return _make


@pytest.fixture
def make_condition():
    def _make(operator: str, items, *, id: str = "cond_1") -> Condition:
        return Condition(id=id, operator=operator, items=list(items))

    return _make


@pytest.fixture
def questions() -> list[AvailableQuestion]:
    return [
        AvailableQuestion(
            id="hasLicense",
            block_id="blk_1",
            block_title="Operator",
            block_index=0,
            title="Operator holds a valid licence",
            type="boolean",
        ),
        AvailableQuestion(
            id="age", block_id="blk_1", block_title="Operator", block_index=0, title="Operator age", type="number"
        ),
        AvailableQuestion(
            id="country", block_id="blk_1", block_title="Operator", block_index=0, title="Country", type="text"
        ),
        AvailableQuestion(
            id="hazards",
            block_id="blk_2",
            block_title="Product",
            block_index=1,
            title="Hazards observed",
            type="multi_choice",
        ),
    ]
