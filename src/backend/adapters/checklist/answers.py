from __future__ import annotations

from typing import Any

from .questions import ChecklistAdapterError


def answers_from_payload(payload: Any) -> dict[str, Any]:
    """
    Build a questionId -> value mapping from a checklist run.

    Supports:
    - {"q1": "value", ...}                                    (plain answer map)
    - {"answersJson": {"q1": "value", ...}}                   (stored inspection record)
    - [{"questionId": "q1", "value": "value"}, ...]           (list of responses)
    """
    if payload is None:
        return {}
    if isinstance(payload, list):
        out: dict[str, Any] = {}
        for response in payload:
            if not isinstance(response, dict):
                continue
            question_id = response.get("questionId", response.get("question_id"))
            if isinstance(question_id, str) and question_id:
                out[question_id] = response.get("value")
        return out
    if not isinstance(payload, dict):
        raise ChecklistAdapterError("Answers payload must be a JSON object or a list of responses.")
    if isinstance(payload.get("answersJson"), dict):
        return dict(payload["answersJson"])
    return dict(payload)
