import pytest

from app.core.errors import UnsupportedExportFormatError
from app.services.training.export import ExportService, hash_id
from app.services.training.training_data import TrainingDataService
from app.services.workflow.assignment import AssignmentService
from app.services.workflow.submission import SubmissionService
from app.store.memory import InMemoryDocumentStore


@pytest.fixture
async def approved(store, due_date, sample_form):
    """(submission id, final submission id) of one approved submission plus one pending"""
    assignment_id = await AssignmentService(store).create_assignment("2", "intern-1", "admin-1", due_date)
    service = SubmissionService(store)
    submission_id = await service.submit_exam_form(assignment_id, sample_form, "intern-1")
    await service.submit_exam_form(assignment_id, {"exam_code": "Banking"}, "intern-1")
    final_id = await service.approve_submission(submission_id, "admin-1", quality_score=9)
    return submission_id, final_id


async def test_unsupported_format_fails_before_fetching():
    # An uninitialized store would raise a different error if it were touched
    service = ExportService(InMemoryDocumentStore())

    with pytest.raises(UnsupportedExportFormatError):
        await service.export_training_data("csv")
    with pytest.raises(UnsupportedExportFormatError):
        await service.export_form_data_for_training("csv")


async def test_export_training_data(store, approved):
    records = await ExportService(store).export_training_data()

    assert len(records) == 1
    record = records[0]
    assert "metadata" not in record.form_data
    assert record.form_data["subExams"][0]["short_code"] == "BNK-IBPSPO"
    assert record.metadata["quality_score"] == 9
    assert record.quality["verified"] is True
    assert record.timestamp.startswith("20")


async def test_export_empty(store):
    assert await ExportService(store).export_training_data() == []


async def test_export_for_training_anonymized(store, approved):
    records = await ExportService(store).export_form_data_for_training(anonymize=True)

    assert len(records) == 1
    metadata = records[0]["metadata"]
    assert metadata["intern_id"] == hash_id("intern-1")
    assert metadata["approved_by"] == hash_id("admin-1")
    assert "intern-1" not in str(metadata)
    assert records[0]["quality_metrics"]["approved"] is True
    assert records[0]["quality_metrics"]["quality_score"] == 9


async def test_export_for_training_all_submissions(store, approved):
    records = await ExportService(store).export_form_data_for_training(only_approved=False, limit=1)
    assert len(records) == 1

    records = await ExportService(store).export_form_data_for_training(only_approved=False)
    assert len(records) == 2


def test_hash_id_is_stable():
    assert hash_id("intern-1") == hash_id("intern-1")
    assert hash_id("intern-1") != hash_id("intern-2")
    assert hash_id("intern-1").startswith("anon_")
    assert len(hash_id("intern-1")) == len("anon_") + 12


async def test_training_submission_lookup_prefers_final(store, approved):
    submission_id, final_id = approved
    service = TrainingDataService(store)

    final = await service.get_training_submission_by_id(final_id)
    assert final["submission_id"] == submission_id
    assert final["training_metadata"]["quality_score"] == 9

    live = await service.get_training_submission_by_id(submission_id)
    assert live["status"] == "approved"

    assert await service.get_training_submission_by_id("missing") is None


async def test_training_data_views(store, approved):
    service = TrainingDataService(store)

    approved_only = await service.get_training_data_submissions(only_approved=True, include_metadata=True)
    assert len(approved_only) == 1
    assert "metadata" not in approved_only[0]["clean_data"]

    everything = await service.get_training_data_submissions()
    assert len(everything) == 2
    assert "training_metadata" not in everything[0]
