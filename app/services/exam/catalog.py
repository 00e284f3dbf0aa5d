"""
Static exam catalog.

Loaded once at startup from a JSON document of the form
{"exams": [{"id", "name", "code", "sub_exams": [{"id", "name", "code"}]}]}
and never mutated afterwards.
"""
import json
import logging
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

from app.models.exam.catalog import ExamCatalogEntry, SubExam, ExamOption, ExamOptions

logger = logging.getLogger(__name__)

# Maps exam codes to the sector shown on the form
EXAM_SECTOR_MAP: Dict[str, str] = {
    "SSC": "Government - Staff Selection Commission",
    "Banking": "Banking & Financial Services",
    "Civil Services": "Civil Services",
    "Railway": "Railway Services",
    "Defence": "Defence Services",
    "Insurance": "Insurance Sector",
    "Nursing": "Healthcare - Nursing",
    "PG": "Post Graduate Entrance",
    "Campus Placement": "Campus Recruitment",
    "MBA": "Management Entrance",
    "Accounting": "Accounting & Finance",
    "Judiciary": "Judicial Services",
    "Banking & Finance": "Banking & Financial Services",
    "UG Entrance": "Under Graduate Entrance"
}

# Maps exam codes to conducting bodies
CONDUCTING_BODY_MAP: Dict[str, str] = {
    "SSC": "Staff Selection Commission",
    "Banking": "Institute of Banking Personnel Selection (IBPS)",
    "Civil Services": "Union Public Service Commission (UPSC)",
    "Railway": "Railway Recruitment Board (RRB)",
    "Defence": "Ministry of Defence",
    "Insurance": "National Insurance Academy",
    "Nursing": "National Board of Examinations",
    "PG": "National Testing Agency (NTA)",
    "Campus Placement": "Various Organizations",
    "MBA": "National Testing Agency (NTA)",
    "Accounting": "Institute of Chartered Accountants of India (ICAI)",
    "Judiciary": "High Court / Supreme Court",
    "Banking & Finance": "Institute of Banking Personnel Selection (IBPS)",
    "UG Entrance": "National Testing Agency (NTA)"
}

DEFAULT_CONDUCTING_BODY = "Not Specified"
DEFAULT_EXAM_SECTOR = "Other"


def conducting_body_for(code: str) -> str:
    return CONDUCTING_BODY_MAP.get(code, DEFAULT_CONDUCTING_BODY)


def exam_sector_for(code: str) -> str:
    return EXAM_SECTOR_MAP.get(code, DEFAULT_EXAM_SECTOR)


def parse_catalog_id(value: Union[str, int, None]) -> Optional[int]:
    """Numeric catalog id from a string or int; None for anything else"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ExamCatalog:
    """Read-only lookup table of main exams and their sub-exams"""

    def __init__(self, exams: List[ExamCatalogEntry]):
        self._exams = tuple(exams)
        self._by_id = {exam.id: exam for exam in self._exams}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamCatalog":
        return cls([ExamCatalogEntry.model_validate(exam) for exam in data.get("exams", [])])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExamCatalog":
        with open(path, "r", encoding="utf-8") as f:
            catalog = cls.from_dict(json.load(f))
        logger.info("[CATALOG] Loaded %d main exams from %s", len(catalog), path)
        return catalog

    def __len__(self) -> int:
        return len(self._exams)

    @property
    def exams(self) -> List[ExamCatalogEntry]:
        return list(self._exams)

    def get_main_exam(self, main_exam_id: Union[str, int, None]) -> Optional[ExamCatalogEntry]:
        exam_id = parse_catalog_id(main_exam_id)
        if exam_id is None:
            return None
        return self._by_id.get(exam_id)

    def get_sub_exam(
        self,
        main_exam: ExamCatalogEntry,
        sub_exam_id: Union[str, int, None]
    ) -> Optional[SubExam]:
        sub_id = parse_catalog_id(sub_exam_id)
        if sub_id is None:
            return None
        return next((sub for sub in main_exam.sub_exams if sub.id == sub_id), None)

    def get_available_exam_options(self) -> ExamOptions:
        """Main exams plus the known sector and conducting body names"""
        return ExamOptions(
            main_exams=[ExamOption(id=e.id, name=e.name, code=e.code) for e in self._exams],
            exam_sectors=list(dict.fromkeys(EXAM_SECTOR_MAP.values())),
            conducting_bodies=list(dict.fromkeys(CONDUCTING_BODY_MAP.values()))
        )
