import pytest

from app.models.exam.autofill import AssignmentType
from app.services.exam.assignment_resolver import (
    parse_exam_assignment,
    get_autofill_strategy,
    get_autofill_strategy_for_identifier,
    split_composite_id
)


def test_plain_id_is_main_only():
    parsed = parse_exam_assignment("1")
    assert parsed.assignment_type == AssignmentType.MAIN_ONLY
    assert parsed.main_exam_id == "1"
    assert parsed.sub_exam_id is None


def test_dash_pair_is_specific_subexam():
    parsed = parse_exam_assignment("1-5")
    assert parsed.assignment_type == AssignmentType.SPECIFIC_SUBEXAM
    assert parsed.main_exam_id == "1"
    assert parsed.sub_exam_id == "5"


def test_prefixed_identifier_is_assignment_based():
    parsed = parse_exam_assignment("assignment-abc123")
    assert parsed.assignment_type == AssignmentType.ASSIGNMENT_BASED
    assert parsed.main_exam_id == ""
    assert parsed.assignment_id == "assignment-abc123"


def test_prefix_rule_wins_over_dash_rule():
    # "assignment-7" also has exactly one dash
    parsed = parse_exam_assignment("assignment-7")
    assert parsed.assignment_type == AssignmentType.ASSIGNMENT_BASED


@pytest.mark.parametrize("identifier", ["1-2-3", "1-", "-5", "", "abc"])
def test_anything_else_is_main_only(identifier):
    parsed = parse_exam_assignment(identifier)
    assert parsed.assignment_type == AssignmentType.MAIN_ONLY
    assert parsed.main_exam_id == identifier


def test_custom_prefix():
    parsed = parse_exam_assignment("task-42", assignment_prefix="task-")
    assert parsed.assignment_type == AssignmentType.ASSIGNMENT_BASED
    assert parse_exam_assignment("assignment-42", assignment_prefix="task-").assignment_type == (
        AssignmentType.SPECIFIC_SUBEXAM
    )


def test_main_only_strategy():
    strategy = get_autofill_strategy(AssignmentType.MAIN_ONLY)
    assert strategy.should_fill_main_exam is True
    assert strategy.should_fill_sub_exams is False
    assert strategy.specific_sub_exam_only is False


def test_specific_subexam_strategy_carries_sub_id():
    strategy = get_autofill_strategy(AssignmentType.SPECIFIC_SUBEXAM, "5")
    assert strategy.should_fill_main_exam is True
    assert strategy.should_fill_sub_exams is True
    assert strategy.specific_sub_exam_only is True
    assert strategy.sub_exam_id == "5"


def test_assignment_based_strategy():
    strategy = get_autofill_strategy(AssignmentType.ASSIGNMENT_BASED, "3")
    assert strategy.should_fill_main_exam is True
    assert strategy.should_fill_sub_exams is True
    assert strategy.specific_sub_exam_only is False


@pytest.mark.parametrize("kind", ["unknown", None, "MAIN_ONLY"])
def test_unknown_type_fills_nothing(kind):
    strategy = get_autofill_strategy(kind)
    assert not strategy.should_fill_main_exam
    assert not strategy.should_fill_sub_exams
    assert not strategy.specific_sub_exam_only


@pytest.mark.parametrize("kind", list(AssignmentType))
def test_specific_only_flag_matches_type(kind):
    strategy = get_autofill_strategy(kind, "1")
    assert strategy.specific_sub_exam_only == (kind == AssignmentType.SPECIFIC_SUBEXAM)


def test_strategy_for_identifier():
    strategy = get_autofill_strategy_for_identifier("2-3")
    assert strategy.specific_sub_exam_only is True
    assert strategy.sub_exam_id == "3"


def test_composite_sub_id_overrides_main_id():
    assert split_composite_id("9", "1-3") == ("1", "3")
    assert split_composite_id("2", "3") == ("2", "3")
    assert split_composite_id("2", None) == ("2", None)
