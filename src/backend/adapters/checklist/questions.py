from __future__ import annotations

from typing import Any

from common.condition_engine.models import AvailableQuestion, QuestionType


class ChecklistAdapterError(ValueError):
    pass


def _blocks_from_payload(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, list):
        return [b for b in payload if isinstance(b, dict)]
    if not isinstance(payload, dict):
        raise ChecklistAdapterError("Checklist payload must be a JSON object or a list of blocks.")

    container = payload
    if isinstance(payload.get("jsonSchema"), dict):
        container = payload["jsonSchema"]
    blocks = container.get("blocks")
    if not isinstance(blocks, list):
        return []
    return [b for b in blocks if isinstance(b, dict)]


def available_questions_for_block(payload: Any, current_block_index: int) -> list[AvailableQuestion]:
    """
    Build the questions a conditional block at ``current_block_index`` may reference.

    Only blocks that come before the current one contribute. Supports:
    - {"blocks": [ ... ]}
    - {"jsonSchema": {"blocks": [ ... ]}}   (stored checklist record)
    - [ { ... }, { ... } ]                  (raw list of blocks)
    """
    out: list[AvailableQuestion] = []
    for block_index, block in enumerate(_blocks_from_payload(payload)):
        if block_index >= current_block_index:
            break
        block_id = str(block.get("id") or "")
        block_title = str(block.get("title") or "")
        questions = block.get("questions")
        if not isinstance(questions, list):
            continue
        for question in questions:
            if not isinstance(question, dict):
                continue
            question_id = question.get("id")
            if not isinstance(question_id, str) or not question_id.strip():
                continue
            out.append(
                AvailableQuestion(
                    id=question_id,
                    block_id=block_id,
                    block_title=block_title,
                    block_index=block_index,
                    title=str(question.get("title") or ""),
                    type=str(question.get("type") or QuestionType.TEXT.value),
                    is_from_current_block=False,
                )
            )
    return out
