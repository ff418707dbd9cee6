from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

DEFAULT_MAX_NESTING_LEVEL = 2
DEFAULT_MAX_EVAL_DEPTH = 100
DEFAULT_UNKNOWN_QUESTION_TITLE = "Unknown Question"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class EngineSettings:
    max_nesting_level: int = DEFAULT_MAX_NESTING_LEVEL
    max_eval_depth: int = DEFAULT_MAX_EVAL_DEPTH
    unknown_question_title: str = DEFAULT_UNKNOWN_QUESTION_TITLE
    log_level: str = DEFAULT_LOG_LEVEL


def get_engine_settings() -> EngineSettings:
    """
    Load engine settings from environment variables (a local .env is honoured).

    Reads:
      CONDITION_MAX_NESTING_LEVEL, CONDITION_MAX_EVAL_DEPTH,
      CONDITION_UNKNOWN_QUESTION_TITLE, CONDITION_LOG_LEVEL
    """
    title = os.getenv("CONDITION_UNKNOWN_QUESTION_TITLE", "").strip() or DEFAULT_UNKNOWN_QUESTION_TITLE
    return EngineSettings(
        max_nesting_level=_int_env("CONDITION_MAX_NESTING_LEVEL", DEFAULT_MAX_NESTING_LEVEL, minimum=0),
        max_eval_depth=_int_env("CONDITION_MAX_EVAL_DEPTH", DEFAULT_MAX_EVAL_DEPTH, minimum=1),
        unknown_question_title=title,
        log_level=_log_level_env("CONDITION_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )


def _int_env(name: str, default: int, *, minimum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}.")
    return value


def _log_level_env(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip().upper()
    if not raw:
        return default
    if raw not in _LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(_LOG_LEVELS)}, got {raw!r}.")
    return raw
