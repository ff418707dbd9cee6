import math

import pytest

from common.condition_engine.comparators import (
    comparator_label,
    comparators_for_question_type,
    compare,
    loose_equals,
    to_list,
    to_number,
    to_text,
)
from common.condition_engine.models import Comparator, QuestionType


@pytest.mark.parametrize(
    "left,right",
    [(1, "1"), ("1", 1), (1.0, 1), (True, 1), (True, "1"), (False, 0), ("", 0), ("a", "a"), (None, None)],
)
def test_loose_equals_accepts_mixed_form_input(left, right):
    assert loose_equals(left, right) is True


@pytest.mark.parametrize(
    "left,right",
    [("true", True), (None, 0), (None, ""), ("a", "A"), (1, "1.5"), ("abc", 0), (math.nan, math.nan)],
)
def test_loose_equals_rejects(left, right):
    assert loose_equals(left, right) is False


def test_loose_equals_lists():
    assert loose_equals(["a", "b"], ["a", "b"]) is True
    assert loose_equals(["a", "b"], ["b", "a"]) is False
    assert loose_equals(["a"], "a") is True
    assert loose_equals("a,b", ["a", "b"]) is True


def test_to_number_coercion():
    assert to_number("42") == 42.0
    assert to_number(" 2.5 ") == 2.5
    assert to_number(True) == 1.0
    assert to_number(["7"]) == 7.0
    assert to_number("-Infinity") == -math.inf
    for missing in (None, "", "   ", "abc", [], [1, 2], {"a": 1}, "nan"):
        assert math.isnan(to_number(missing))


def test_to_text_and_to_list():
    assert to_text(None) == ""
    assert to_text(5.0) == "5"
    assert to_text(False) == "false"
    assert to_text(["a", 1]) == "a,1"
    assert to_list(None) == []
    assert to_list("a") == ["a"]
    assert to_list(("a", "b")) == ["a", "b"]


@pytest.mark.parametrize(
    "comparator,answer,value,expected",
    [
        ("equals", "1", 1, True),
        ("not_equals", "1", 1, False),
        ("not_equals", "MT", "IT", True),
        ("contains", "Malta Customs", "Customs", True),
        ("contains", None, "x", False),
        ("contains", "anything", "", True),
        ("starts_with", "MT-123", "MT", True),
        ("starts_with", None, "MT", False),
        ("ends_with", "report.pdf", ".pdf", True),
        ("contains", 12345, 234, True),
        ("greater_than", "20", 18, True),
        ("greater_than", 18, 18, False),
        ("greater_than_or_equal", 18, "18", True),
        ("less_than", 3, 5, True),
        ("less_than", None, 5, False),
        ("less_than", "", 5, False),
        ("less_than_or_equal", 5, 5, True),
        ("less_than_or_equal", "n/a", 5, False),
        ("greater_than", 5, None, False),
    ],
)
def test_compare(comparator, answer, value, expected):
    assert compare(comparator, answer, value) is expected


@pytest.mark.parametrize("answer,expected", [(4, False), (5, True), (7.5, True), (10, True), (11, False), ("10", True)])
def test_between_is_inclusive(answer, expected):
    assert compare("between", answer, 5, 10) is expected


def test_between_requires_both_bounds():
    assert compare("between", 7, 5, None) is False
    assert compare("between", 7, None, 10) is False
    assert compare("between", None, 5, 10) is False


def test_contains_any_normalizes_scalars():
    assert compare("contains_any", ["a", "b"], "a") is True
    assert compare("contains_any", "a", ["a", "b"]) is True
    assert compare("contains_any", ["c"], ["a", "b"]) is False
    assert compare("contains_any", None, ["a"]) is False


def test_contains_all_normalizes_scalars():
    assert compare("contains_all", ["a", "b", "c"], ["a", "c"]) is True
    assert compare("contains_all", ["a"], ["a", "c"]) is False
    assert compare("contains_all", "a", "a") is True
    assert compare("contains_all", None, ["a"]) is False


@pytest.mark.parametrize(
    "comparator,answer,expected",
    [
        ("equals", "anything", False),
        ("not_equals", "anything", True),
        ("contains", "anything", False),
        ("starts_with", "anything", False),
        ("ends_with", "anything", False),
        ("greater_than", 5, False),
        ("greater_than_or_equal", 5, False),
        ("less_than", 5, False),
        ("less_than_or_equal", 5, False),
        ("between", 5, False),
        ("contains_all", ["a"], False),
        ("contains_any", ["a"], False),
    ],
)
def test_missing_expected_value(comparator, answer, expected):
    assert compare(comparator, answer, None, None) is expected


def test_missing_expected_value_is_not_blank_text():
    assert compare("contains", "", None) is False
    assert compare("starts_with", "abc", None) is False
    assert compare("ends_with", "abc", None) is False
    # A blank expected value is still a substring of everything.
    assert compare("contains", "abc", "") is True


def test_missing_expected_value_is_a_single_choice():
    assert compare("contains_all", ["a"], None) is False
    assert compare("contains_all", [], None) is False
    assert compare("contains_any", ["a", "b"], None) is False
    assert compare("contains_all", ["a"], []) is True
    assert compare("contains_any", ["a"], []) is False


def test_choice_membership_is_strict():
    assert compare("contains_any", [1, 2], "1") is False
    assert compare("contains_any", [True], 1) is False
    assert compare("contains_any", [1.0], 1) is True


def test_unknown_comparator_returns_none():
    assert compare("regex_match", "abc", "a.c") is None
    assert comparator_label("regex_match") == "regex_match"
    assert comparator_label("greater_than") == "is greater than"


def test_comparators_for_question_type():
    assert comparators_for_question_type("text") == [
        Comparator.EQUALS,
        Comparator.NOT_EQUALS,
        Comparator.CONTAINS,
        Comparator.STARTS_WITH,
        Comparator.ENDS_WITH,
    ]
    assert comparators_for_question_type("barcode") == comparators_for_question_type("ocr")
    assert Comparator.BETWEEN in comparators_for_question_type(QuestionType.NUMBER)
    assert comparators_for_question_type("boolean") == [Comparator.EQUALS]
    assert comparators_for_question_type("multi_choice") == [
        Comparator.EQUALS,
        Comparator.CONTAINS_ALL,
        Comparator.CONTAINS_ANY,
    ]
    assert comparators_for_question_type("photo") == [Comparator.EQUALS]
    assert comparators_for_question_type("something_new") == [Comparator.EQUALS]
