from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import get_current_user, require_roles, ensure_owner_or_admin
from app.core.responses import ApiResponse, PaginatedResponse, parse_paging
from app.modules.courses.schemas import (
    CourseCreate, CourseUpdate, CourseResponse, CourseDetailResponse,
    EnrollmentResponse, Level
)
from app.modules.courses.service import CourseService
from app.modules.enrollments.service import EnrollmentService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/courses", tags=["courses"])


def get_course_service(supabase: Client = Depends(get_supabase)) -> CourseService:
    return CourseService(supabase)


def get_enrollment_service(supabase: Client = Depends(get_supabase)) -> EnrollmentService:
    return EnrollmentService(supabase)


@router.get("", response_model=PaginatedResponse[CourseResponse])
async def list_courses(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[Level] = None,
    search: Optional[str] = None,
    instructor_id: Optional[str] = None,
    service: CourseService = Depends(get_course_service),
):
    """List courses (public). Filter by category, level, instructor, or free-text search on title/description."""
    page, limit = parse_paging(page, limit)
    result = service.list_courses(
        page=page,
        limit=limit,
        category=category,
        level=level,
        search=search,
        instructor_id=instructor_id,
    )
    return PaginatedResponse[CourseResponse](data=result.items, pagination=result.pagination)


@router.get("/{course_id}", response_model=ApiResponse[CourseDetailResponse])
async def get_course(
    course_id: str,
    service: CourseService = Depends(get_course_service),
):
    """Get course by ID (public), with enrolled student count"""
    return ApiResponse[CourseDetailResponse](data=service.get_course_detail(course_id))


@router.post("", response_model=ApiResponse[CourseResponse], status_code=201)
async def create_course(
    course_data: CourseCreate,
    user_data: Dict = Depends(require_roles("instructor", "admin")),
    service: CourseService = Depends(get_course_service),
):
    """Create a course owned by the caller (instructor or admin)"""
    course = service.create_course(course_data, user_data["id"])
    return ApiResponse[CourseResponse](message="Course created successfully", data=course)


@router.put("/{course_id}", response_model=ApiResponse[CourseResponse])
async def update_course(
    course_id: str,
    course_data: CourseUpdate,
    user_data: Dict = Depends(require_roles("instructor", "admin")),
    service: CourseService = Depends(get_course_service),
):
    """Update course (owning instructor or admin)"""
    course = service.get_course_by_id(course_id)
    ensure_owner_or_admin(course.instructor_id, user_data, action="update")
    updated = service.update_course(course_id, course_data)
    return ApiResponse[CourseResponse](message="Course updated successfully", data=updated)


@router.delete("/{course_id}", response_model=ApiResponse)
async def delete_course(
    course_id: str,
    user_data: Dict = Depends(require_roles("instructor", "admin")),
    service: CourseService = Depends(get_course_service),
):
    """Delete course (owning instructor or admin)"""
    course = service.get_course_by_id(course_id)
    ensure_owner_or_admin(course.instructor_id, user_data, action="delete")
    service.delete_course(course_id)
    return ApiResponse(message="Course deleted successfully")


@router.post("/{course_id}/enroll", response_model=ApiResponse[EnrollmentResponse], status_code=201)
async def enroll(
    course_id: str,
    user_data: Dict = Depends(get_current_user),
    courses: CourseService = Depends(get_course_service),
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    """Enroll the caller in a course"""
    courses.get_course_by_id(course_id)
    enrollment = enrollments.enroll(user_data["id"], course_id)
    return ApiResponse[EnrollmentResponse](message="Enrolled successfully", data=enrollment)


@router.delete("/{course_id}/enroll", response_model=ApiResponse)
async def unenroll(
    course_id: str,
    user_data: Dict = Depends(get_current_user),
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    """Remove the caller's enrollment"""
    enrollments.unenroll(user_data["id"], course_id)
    return ApiResponse(message="Unenrolled successfully")
