"""
Resolve exam identifiers and decide what gets auto-filled.

Identifier formats:
- "1" = main exam 1, no specific sub-exam (fill main info only)
- "1-5" = main exam 1, specific sub-exam 5 (fill main + that sub-exam)
- "assignment-abc123" = assignment reference (exam ids come from the assignment)
"""
from typing import Optional, Union

from app.models.exam.autofill import AssignmentType, ParsedExamAssignment, AutoFillStrategy

DEFAULT_ASSIGNMENT_PREFIX = "assignment-"
SEPARATOR = "-"


def parse_exam_assignment(identifier: str, assignment_prefix: str = DEFAULT_ASSIGNMENT_PREFIX) -> ParsedExamAssignment:
    """Parse an identifier into (main exam id, sub-exam id, assignment type). First matching rule wins."""
    if assignment_prefix and identifier.startswith(assignment_prefix):
        return ParsedExamAssignment(
            assignment_type=AssignmentType.ASSIGNMENT_BASED,
            main_exam_id="",
            assignment_id=identifier
        )

    if identifier.count(SEPARATOR) == 1:
        main_id, sub_id = identifier.split(SEPARATOR)
        if main_id and sub_id:
            return ParsedExamAssignment(
                assignment_type=AssignmentType.SPECIFIC_SUBEXAM,
                main_exam_id=main_id,
                sub_exam_id=sub_id
            )

    return ParsedExamAssignment(
        assignment_type=AssignmentType.MAIN_ONLY,
        main_exam_id=identifier
    )


def get_autofill_strategy(
    assignment_type: Union[AssignmentType, str, None],
    sub_exam_id: Optional[str] = None
) -> AutoFillStrategy:
    """Decide which form sections to pre-populate. Unknown types fill nothing."""
    try:
        kind = AssignmentType(assignment_type)
    except ValueError:
        return AutoFillStrategy()

    if kind == AssignmentType.MAIN_ONLY:
        return AutoFillStrategy(
            should_fill_main_exam=True,
            should_fill_sub_exams=False,
            specific_sub_exam_only=False
        )

    if kind == AssignmentType.SPECIFIC_SUBEXAM:
        return AutoFillStrategy(
            should_fill_main_exam=True,
            should_fill_sub_exams=True,
            specific_sub_exam_only=True,
            sub_exam_id=sub_exam_id
        )

    # ASSIGNMENT_BASED: the sub-exam is known once the assignment is looked up
    return AutoFillStrategy(
        should_fill_main_exam=True,
        should_fill_sub_exams=True,
        specific_sub_exam_only=False,
        sub_exam_id=sub_exam_id
    )


def get_autofill_strategy_for_identifier(
    identifier: str,
    assignment_prefix: str = DEFAULT_ASSIGNMENT_PREFIX
) -> AutoFillStrategy:
    parsed = parse_exam_assignment(identifier, assignment_prefix)
    return get_autofill_strategy(parsed.assignment_type, parsed.sub_exam_id)


def split_composite_id(main_exam_id: str, sub_exam_id: Optional[str]):
    """
    Assignments may carry the sub-exam as "<main>-<sub>".
    The composite form wins for both ids.
    """
    if sub_exam_id and SEPARATOR in str(sub_exam_id):
        parsed = parse_exam_assignment(str(sub_exam_id), assignment_prefix="")
        if parsed.assignment_type == AssignmentType.SPECIFIC_SUBEXAM:
            return parsed.main_exam_id, parsed.sub_exam_id
    return main_exam_id, sub_exam_id
