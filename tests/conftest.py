"""Shared fixtures: an initialized in-memory store, the bundled catalog and an API client."""
import pytest
import pytest_asyncio
from datetime import datetime, timedelta
from fastapi.testclient import TestClient

from app.core.config import Settings, DEFAULT_CATALOG_PATH
from app.main import create_app
from app.services.exam.catalog import ExamCatalog
from app.store.memory import InMemoryDocumentStore

ADMIN_HEADERS = {"X-Actor-Id": "admin-1", "X-Actor-Role": "admin"}
INTERN_HEADERS = {"X-Actor-Id": "intern-1", "X-Actor-Role": "intern"}
OTHER_INTERN_HEADERS = {"X-Actor-Id": "intern-2", "X-Actor-Role": "intern"}


@pytest_asyncio.fixture
async def store():
    store = InMemoryDocumentStore()
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def catalog():
    return ExamCatalog.from_file(DEFAULT_CATALOG_PATH)


@pytest.fixture
def due_date():
    return datetime.utcnow() + timedelta(days=7)


@pytest.fixture
def sample_form():
    """A partly filled exam form as the front end sends it"""
    return {
        "main_exam_name": "Banking Exams",
        "exam_code": "Banking",
        "conducting_body": "Institute of Banking Personnel Selection (IBPS)",
        "exam_sector": "Banking & Financial Services",
        "subExams": [
            {
                "sub_exam_name": "IBPS PO",
                "short_code": "BNK-IBPSPO",
                "gender": "",
                "has_age_limit": True,
                "lower_age_limit": 20,
                "upper_age_limit": 30,
                "nationality": ["Indian", ""],
                "notes": ""
            }
        ]
    }


@pytest.fixture
def settings():
    return Settings(document_store="memory", debug=True, log_level="WARNING")


@pytest.fixture
def client(settings):
    app = create_app(settings, store=InMemoryDocumentStore())
    with TestClient(app) as test_client:
        yield test_client
