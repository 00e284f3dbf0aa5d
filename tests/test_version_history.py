import pytest

from app.core.errors import NotFoundError
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.submission import SubmissionService
from app.services.workflow.version_history import VersionHistoryService, find_changes


async def _submitted(store, due_date, form):
    assignment_id = await AssignmentService(store).create_assignment("1", "intern-1", "admin-1", due_date)
    return await SubmissionService(store).submit_exam_form(assignment_id, form, "intern-1")


def test_find_changes_identical_is_none():
    value = {"a": 1, "b": {"x": [1, 2]}}
    assert find_changes(value, dict(value)) is None


def test_find_changes_ignores_key_order_in_nested_values():
    assert find_changes({"a": {"x": 1, "y": 2}}, {"a": {"y": 2, "x": 1}}) is None


def test_find_changes_missing_side_is_full_change():
    assert find_changes(None, {"a": 1}) == {"full_change": True}
    assert find_changes({"a": 1}, None) == {"full_change": True}


def test_find_changes_reports_added_removed_and_changed():
    changes = find_changes({"a": 1, "b": 2, "n": [1]}, {"a": 1, "c": 3, "n": [1, 2]})

    assert set(changes) == {"b", "c", "n"}
    assert changes["b"] == {"added": False, "removed": True, "old_value": 2, "new_value": None}
    assert changes["c"] == {"added": True, "removed": False, "old_value": None, "new_value": 3}
    assert changes["n"] == {"changed": True, "old_value": [1], "new_value": [1, 2]}


def test_find_changes_empty_dicts():
    assert find_changes({}, {}) is None


async def test_each_update_archives_previous_version(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    service = SubmissionService(store)

    for status in ["in-review", "rejected", "in-review"]:
        await service.update_submission(submission_id, status, "admin-1")

    records = await VersionHistoryService(store).get_submission_version_history(submission_id)
    assert sorted(r.version_number for r in records) == [1, 2, 3]
    assert all(r.version_data is None for r in records)
    assert (await service.get_submission(submission_id)).version == 4


async def test_history_is_newest_first(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    service = SubmissionService(store)
    await service.update_submission(submission_id, "in-review", "admin-1")
    await service.update_submission(submission_id, "rejected", "admin-1")

    records = await VersionHistoryService(store).get_submission_version_history(submission_id)
    archived = [r.archived_at for r in records]
    assert archived == sorted(archived, reverse=True)


async def test_archive_unknown_submission(store):
    with pytest.raises(NotFoundError):
        await VersionHistoryService(store).archive_submission_version("missing", "admin-1", "test")


async def test_compare_versions(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    service = SubmissionService(store)
    history = VersionHistoryService(store)

    await service.update_submission(submission_id, "in-review", "admin-1")
    await service.update_submission(submission_id, "rejected", "admin-1", feedback_notes="Age limits missing")

    records = {r.version_number: r for r in await history.get_submission_version_history(submission_id)}
    comparison = await history.compare_submission_versions(records[1].id, records[2].id)

    assert comparison.version_info["v1"].version_number == 1
    assert comparison.version_info["v2"].version_number == 2
    assert comparison.status_changes is True
    assert comparison.notes_changes.feedback_notes is False
    assert comparison.notes_changes.intern_notes is False
    # Form fields are untouched, only the metadata block moved on
    assert set(comparison.changes) == {"metadata"}
    assert comparison.metadata_changes["version"]["old_value"] == 1
    assert comparison.metadata_changes["version"]["new_value"] == 2


async def test_compare_version_with_itself(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    await SubmissionService(store).update_submission(submission_id, "in-review", "admin-1")

    record = (await VersionHistoryService(store).get_submission_version_history(submission_id))[0]
    comparison = await VersionHistoryService(store).compare_submission_versions(record.id, record.id)

    assert comparison.changes is None
    assert comparison.metadata_changes is None
    assert comparison.status_changes is False


async def test_compare_missing_version(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    await SubmissionService(store).update_submission(submission_id, "in-review", "admin-1")
    record = (await VersionHistoryService(store).get_submission_version_history(submission_id))[0]

    with pytest.raises(NotFoundError, match="One or both version records not found"):
        await VersionHistoryService(store).compare_submission_versions(record.id, "missing")


async def test_get_version(store, due_date, sample_form):
    submission_id = await _submitted(store, due_date, sample_form)
    await SubmissionService(store).update_submission(submission_id, "in-review", "admin-1")
    record = (await VersionHistoryService(store).get_submission_version_history(submission_id))[0]

    full = await VersionHistoryService(store).get_version(record.id)
    assert full.version_data["id"] == submission_id

    with pytest.raises(NotFoundError):
        await VersionHistoryService(store).get_version("missing")
