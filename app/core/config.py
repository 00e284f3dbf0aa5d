"""
Application settings.

Values come from the environment (optionally a local .env file) and are read
once at import time. Tests build their own Settings instances.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "exams.json"


class Settings:
    """Runtime configuration for the exam data service"""

    def __init__(self, **overrides):
        self.app_name = overrides.get("app_name", os.getenv("APP_NAME", "ExamData"))
        self.app_version = overrides.get("app_version", os.getenv("APP_VERSION", "1.0.0"))
        self.debug = overrides.get("debug", os.getenv("DEBUG", "True").lower() == "true")
        self.frontend_url = overrides.get("frontend_url", os.getenv("FRONTEND_URL", "http://localhost:3000"))

        # Persistence
        self.document_store = overrides.get("document_store", os.getenv("DOCUMENT_STORE", "mongo")).lower()
        self.mongodb_url = overrides.get("mongodb_url", os.getenv("MONGODB_URL", "mongodb://localhost:27017"))
        self.database_name = overrides.get("database_name", os.getenv("DATABASE_NAME", "examdata"))

        # Reference data
        self.exam_catalog_path = Path(
            overrides.get("exam_catalog_path", os.getenv("EXAM_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))
        )

        # Identifiers starting with this prefix are direct assignment references
        self.assignment_id_prefix = overrides.get(
            "assignment_id_prefix", os.getenv("ASSIGNMENT_ID_PREFIX", "assignment-")
        )

        self.log_level = overrides.get("log_level", os.getenv("LOG_LEVEL", "INFO")).upper()


settings = Settings()
