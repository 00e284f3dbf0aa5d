from datetime import datetime

from app.services.training.quality import (
    QualityService,
    calculate_completeness,
    calculate_field_stats,
    calculate_submission_trends,
    count_fields,
    week_of_month_key
)
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.submission import SubmissionService


def test_count_fields_walks_nested_leaves():
    assert count_fields({"a": "x", "b": [1, None], "c": {"d": ""}, "e": []}) == (4, 2)


def test_completeness_fully_filled():
    submission = {"form_data": {"a": "x", "b": {"c": 1}, "metadata": {"intern_id": None}}}
    assert calculate_completeness(submission) == 1.0


def test_completeness_all_blank():
    assert calculate_completeness({"form_data": {"a": None, "b": ""}}) == 0.0


def test_completeness_without_form_data():
    assert calculate_completeness({}) is None
    assert calculate_completeness({"form_data": {}}) is None


def test_completeness_metadata_only_is_zero():
    assert calculate_completeness({"form_data": {"metadata": {"version": 1}}}) == 0.0


def test_field_stats_use_rendered_paths():
    submissions = [
        {"form_data": {"exam_code": "SSC", "subExams": [{"gender": "Male"}], "metadata": {"version": 1}}},
        {"form_data": {"exam_code": "SSC", "subExams": [{"gender": None}]}},
        {"form_data": {"exam_code": "Banking"}},
        {"status": "submitted"}
    ]

    stats = calculate_field_stats(submissions)

    assert set(stats) == {"exam_code", "subExams[0].gender"}
    assert stats["exam_code"].fill_rate == 1.0
    assert stats["exam_code"].unique_values == 2
    assert stats["subExams[0].gender"].fill_rate == 0.5
    assert stats["subExams[0].gender"].null_rate == 0.5
    assert stats["subExams[0].gender"].unique_values == 1


def test_week_of_month_key():
    assert week_of_month_key(datetime(2024, 3, 15)) == "2024-03-W2"
    assert week_of_month_key(datetime(2024, 3, 3)) == "2024-03-W0"
    assert week_of_month_key(datetime(2024, 12, 31)) == "2024-12-W4"


def test_submission_trends():
    submissions = [
        {"created_at": datetime(2024, 3, 15, 9, 0)},
        {"created_at": datetime(2024, 3, 15, 17, 30)},
        {"created_at": "2024-03-16T08:00:00"},
        {"form_data": {"metadata": {"created_at": datetime(2024, 4, 1)}}},
        {"created_at": "not a date"}
    ]

    trends = calculate_submission_trends(submissions)

    assert trends.by_day == {"2024-03-15": 2, "2024-03-16": 1, "2024-04-01": 1}
    assert trends.by_week == {"2024-03-W2": 3, "2024-04-W0": 1}


async def test_stats_for_empty_dataset(store):
    stats = await QualityService(store).generate_data_quality_stats()

    assert stats.total_submissions == 0
    assert stats.approved_submissions == 0
    assert stats.completeness_rate == 0.0
    assert stats.average_quality_score is None
    assert stats.version_stats.average_versions == 0.0
    assert stats.version_stats.max_versions == 0
    assert stats.field_stats == {}


async def test_stats_over_submissions(store, due_date, sample_form):
    assignment_id = await AssignmentService(store).create_assignment("2", "intern-1", "admin-1", due_date)
    service = SubmissionService(store)
    approved_id = await service.submit_exam_form(assignment_id, sample_form, "intern-1")
    await service.submit_exam_form(assignment_id, {"exam_code": "Banking"}, "intern-1")
    await service.approve_submission(approved_id, "admin-1", quality_score=8)

    stats = await QualityService(store).generate_data_quality_stats()

    assert stats.total_submissions == 2
    assert stats.approved_submissions == 1
    assert stats.pending_submissions == 1
    assert stats.version_stats.max_versions == 2
    assert stats.version_stats.average_versions == 1.5
    assert 0.0 < stats.completeness_rate <= 1.0
    assert stats.field_stats["exam_code"].fill_rate == 1.0
    assert sum(stats.submission_trends.by_day.values()) == 2
