from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import get_current_user
from app.core.responses import ApiResponse
from app.modules.courses.schemas import EnrollmentResponse
from app.modules.enrollments.service import EnrollmentService
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


def get_enrollment_service(supabase: Client = Depends(get_supabase)) -> EnrollmentService:
    return EnrollmentService(supabase)


@router.get("", response_model=ApiResponse[List[EnrollmentResponse]])
async def my_enrollments(
    current_user: Dict = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """Courses the authenticated user is enrolled in"""
    return ApiResponse[List[EnrollmentResponse]](data=service.list_user_enrollments(current_user["id"]))
