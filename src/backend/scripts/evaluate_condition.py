from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml


EXIT_TRUE = 0
EXIT_FALSE = 1
EXIT_INPUT_ERROR = 2


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _load_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def _write_issues(issues, stream) -> None:
    if not issues:
        print("Validation: no issues found.", file=stream)
        return
    print("Validation issues:", file=stream)
    for issue in issues:
        print(f"- [{issue.severity.value}] {issue.code.value} ({issue.item_id or '-'}): {issue.message}", file=stream)


def run(args: argparse.Namespace) -> int:
    _ensure_backend_on_path()
    from adapters.checklist.answers import answers_from_payload
    from adapters.checklist.questions import available_questions_for_block
    from common.condition_engine.evaluator import as_condition, as_questions, evaluate_condition
    from common.condition_engine.validation import validate_condition

    try:
        condition = as_condition(_load_document(Path(args.condition)))
        answers = answers_from_payload(_load_document(Path(args.answers))) if args.answers else {}
        if args.checklist:
            questions = available_questions_for_block(_load_document(Path(args.checklist)), args.block_index)
        elif args.questions:
            questions = as_questions(_load_document(Path(args.questions)))
        else:
            questions = []
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # pydantic ValidationError and ChecklistAdapterError are ValueErrors.
        print(f"Input error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    issues = validate_condition(condition, questions) if args.validate else None
    evaluation = evaluate_condition(condition, answers, questions)

    if args.format == "json":
        payload: dict[str, Any] = evaluation.model_dump(mode="json")
        if issues is not None:
            payload["issues"] = [i.model_dump(mode="json") for i in issues]
        print(json.dumps(payload, indent=2))
    else:
        if issues is not None:
            _write_issues(issues, sys.stdout)
            print()
        print(evaluation.explanation)

    return EXIT_TRUE if evaluation.result else EXIT_FALSE


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Evaluate a checklist condition against a set of answers and explain the outcome."
    )
    parser.add_argument("--condition", required=True, help="Path to the condition tree (JSON or YAML).")
    parser.add_argument(
        "--answers",
        default=None,
        help="Path to the answers (plain map, inspection record with answersJson, or list of responses).",
    )
    parser.add_argument(
        "--questions",
        default=None,
        help="Path to a list of available questions used for display titles.",
    )
    parser.add_argument(
        "--checklist",
        default=None,
        help="Path to a checklist payload; questions are taken from blocks before --block-index.",
    )
    parser.add_argument(
        "--block-index",
        type=int,
        default=0,
        help="Index of the block the condition belongs to (used with --checklist).",
    )
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Output format (default: text).")
    parser.add_argument("--validate", action="store_true", help="Also report authoring issues in the condition.")
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to CONDITION_LOG_LEVEL).")
    args = parser.parse_args(argv)

    _ensure_backend_on_path()
    from common.condition_engine.logging_setup import configure_logging

    configure_logging(args.log_level)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
