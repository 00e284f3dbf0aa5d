from fastapi import APIRouter, Depends

from app.routes.auth.dependencies import get_catalog
from app.services.exam.catalog import ExamCatalog
from app.utils.response import success_response, error_response

router = APIRouter(prefix="/catalog", tags=["Exam Catalog"])


@router.get("/exams")
async def list_main_exams(catalog: ExamCatalog = Depends(get_catalog)):
    """List every main exam with its sub-exams"""
    return success_response(
        message="Exams retrieved successfully",
        data={"exams": catalog.exams, "total": len(catalog)}
    )


@router.get("/exams/{main_exam_id}")
async def get_main_exam(main_exam_id: str, catalog: ExamCatalog = Depends(get_catalog)):
    """Get one main exam by its numeric id"""
    exam = catalog.get_main_exam(main_exam_id)

    if not exam:
        return error_response(message="Exam not found", status_code=404)

    return success_response(message="Exam retrieved successfully", data={"exam": exam})


@router.get("/options")
async def get_exam_options(catalog: ExamCatalog = Depends(get_catalog)):
    """Main exams, sector names and conducting bodies for form dropdowns"""
    return success_response(
        message="Exam options retrieved successfully",
        data=catalog.get_available_exam_options()
    )
