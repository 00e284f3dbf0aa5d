"""
Auto-fill service for intern exam forms.

Maps an exam identifier or an assignment onto catalog data and produces the
initial form values. A lookup miss is never an error: the caller gets None
(or an empty sub-exam list) and the form stays in its manual default state.
"""
import copy
import logging
from typing import Optional, Dict, Any, Union

from app.core.errors import NotFoundError
from app.models.exam.autofill import (
    AssignmentType,
    AutoFillStrategy,
    AutoFillResult,
    ExamAutoFillData,
    SubExamSeed
)
from app.models.workflow.assignment import Assignment
from app.services.exam.catalog import ExamCatalog, conducting_body_for, exam_sector_for
from app.services.exam.assignment_resolver import (
    DEFAULT_ASSIGNMENT_PREFIX,
    parse_exam_assignment,
    get_autofill_strategy,
    split_composite_id
)
from app.services.workflow.assignment import AssignmentService
from app.store.base import DocumentStore

logger = logging.getLogger(__name__)

# Dependent sub-exam fields always start from these values, never from the catalog
SUB_EXAM_FORM_DEFAULTS: Dict[str, Any] = {
    "gender": "",
    "marital_status": "",
    "pwd_eligible": False,
    "eligible_disability_types": [],
    "has_age_limit": False,
    "lower_age_limit": None,
    "upper_age_limit": None,
    "educationRequirements": [],
    "nationality": [],
    "domicile": [],
    "has_category_relaxation": False,
    "categoryRelaxations": [],
    "exam_subjects": [],
    "exam_medium": [],
    "notes": ""
}


def build_autofill_data(
    catalog: ExamCatalog,
    main_exam_id: Union[str, int, None],
    sub_exam_id: Union[str, int, None],
    strategy: AutoFillStrategy
) -> Optional[ExamAutoFillData]:
    """Combine catalog lookups with a strategy. Returns None when there is nothing to fill."""
    if not strategy.should_fill_main_exam:
        return None

    main_exam = catalog.get_main_exam(main_exam_id)
    if main_exam is None:
        logger.warning("[AUTOFILL] Main exam with ID %r not found in catalog", main_exam_id)
        return None

    data = ExamAutoFillData(
        main_exam_name=main_exam.name,
        exam_code=main_exam.code,
        conducting_body=conducting_body_for(main_exam.code),
        exam_sector=exam_sector_for(main_exam.code),
        main_exam_id=main_exam.id
    )

    if strategy.should_fill_sub_exams and sub_exam_id not in (None, ""):
        sub_exam = catalog.get_sub_exam(main_exam, sub_exam_id)
        if sub_exam is not None:
            data.sub_exams = [SubExamSeed(sub_exam_name=sub_exam.name, short_code=sub_exam.code)]
            data.sub_exam_id = sub_exam.id
        else:
            logger.warning(
                "[AUTOFILL] Sub-exam %r not found under main exam %s", sub_exam_id, main_exam.id
            )
    else:
        logger.info("[AUTOFILL] No specific sub-exam assigned, sub-exams left for manual selection")

    return data


def build_form_values(data: ExamAutoFillData) -> Dict[str, Any]:
    """Map auto-fill data onto the exam form field structure"""
    return {
        "main_exam_name": data.main_exam_name,
        "exam_code": data.exam_code,
        "conducting_body": data.conducting_body,
        "exam_sector": data.exam_sector,
        "subExams": [
            {
                "sub_exam_name": seed.sub_exam_name,
                "short_code": seed.short_code,
                **copy.deepcopy(SUB_EXAM_FORM_DEFAULTS)
            }
            for seed in data.sub_exams
        ]
    }


class AutoFillService:
    """Resolves identifiers (including assignment references) into initial form values"""

    def __init__(
        self,
        store: DocumentStore,
        catalog: ExamCatalog,
        assignment_prefix: str = DEFAULT_ASSIGNMENT_PREFIX
    ):
        self.catalog = catalog
        self.assignment_prefix = assignment_prefix
        self.assignment_service = AssignmentService(store)

    async def _find_assignment(self, reference: str) -> Optional[Assignment]:
        candidates = [reference]
        if self.assignment_prefix and reference.startswith(self.assignment_prefix):
            candidates.append(reference[len(self.assignment_prefix):])

        for assignment_id in candidates:
            try:
                return await self.assignment_service.get_assignment(assignment_id)
            except NotFoundError:
                continue
        return None

    async def resolve(self, identifier: str) -> AutoFillResult:
        """Resolver -> strategy -> builder for a single identifier"""
        parsed = parse_exam_assignment(identifier, self.assignment_prefix)
        main_exam_id, sub_exam_id = parsed.main_exam_id, parsed.sub_exam_id

        if parsed.assignment_type == AssignmentType.ASSIGNMENT_BASED:
            assignment = await self._find_assignment(parsed.assignment_id)
            if assignment is None:
                logger.warning("[AUTOFILL] Assignment %s not found, nothing to auto-fill", parsed.assignment_id)
                return AutoFillResult(
                    identifier=identifier,
                    parsed=parsed,
                    strategy=get_autofill_strategy(parsed.assignment_type)
                )
            main_exam_id, sub_exam_id = split_composite_id(assignment.main_exam_id, assignment.sub_exam_id)

        strategy = get_autofill_strategy(parsed.assignment_type, sub_exam_id)
        data = build_autofill_data(self.catalog, main_exam_id, sub_exam_id, strategy)

        return AutoFillResult(
            identifier=identifier,
            parsed=parsed,
            strategy=strategy,
            form_values=build_form_values(data) if data else None
        )

    async def get_autofilled_form_values(self, assignment: Assignment) -> Optional[Dict[str, Any]]:
        """Initial form state for an assignment record"""
        if not assignment.main_exam_id:
            return None

        main_exam_id, sub_exam_id = split_composite_id(assignment.main_exam_id, assignment.sub_exam_id)
        kind = AssignmentType.SPECIFIC_SUBEXAM if sub_exam_id else AssignmentType.MAIN_ONLY
        data = build_autofill_data(
            self.catalog,
            main_exam_id,
            sub_exam_id,
            get_autofill_strategy(kind, sub_exam_id)
        )
        return build_form_values(data) if data else None
