from __future__ import annotations

import argparse
import json
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field

from .comparators import COMPARATORS_BY_QUESTION_TYPE, comparators_for_question_type, registry
from .models import QuestionType


class ComparatorCatalogEntry(BaseModel):
    comparator: str
    label: str
    ui_label: str
    needs_second_value: bool = False
    question_types: List[str] = Field(default_factory=list)


def build_comparator_catalog(question_type: Optional[str] = None) -> List[ComparatorCatalogEntry]:
    """One entry per comparator, optionally restricted to those legal for ``question_type``."""
    allowed = None
    if question_type:
        allowed = {c.value for c in comparators_for_question_type(question_type)}

    entries: List[ComparatorCatalogEntry] = []
    for spec in registry.all():
        token = spec.comparator.value
        if allowed is not None and token not in allowed:
            continue
        entries.append(
            ComparatorCatalogEntry(
                comparator=token,
                label=spec.label,
                ui_label=spec.ui_label,
                needs_second_value=spec.needs_second_value,
                question_types=sorted(
                    qt for qt, comparators in COMPARATORS_BY_QUESTION_TYPE.items() if spec.comparator in comparators
                ),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List condition comparators and the question types they apply to.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    parser.add_argument(
        "--question-type",
        choices=[qt.value for qt in QuestionType],
        default=None,
        help="Only list comparators legal for this question type.",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_comparator_catalog(args.question_type)]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
