from supabase import Client
from app.core.responses import Page, build_pagination, page_range
from app.database.supabase_client import is_valid_id
from app.modules.courses.models import COURSES_TABLE, ENROLLMENTS_TABLE
from app.modules.courses.schemas import CourseCreate, CourseUpdate, CourseResponse, CourseDetailResponse
from typing import Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging
import re

logger = logging.getLogger(__name__)

# Characters that carry meaning inside a PostgREST or=(...) filter
_FILTER_SYNTAX = re.compile(r"[,()*%\\]")


class CourseService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_by_id(self, course_id: str) -> Optional[CourseResponse]:
        if not is_valid_id(course_id):
            return None
        try:
            result = self.supabase.table(COURSES_TABLE)\
                .select("*")\
                .eq("id", course_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error finding course {course_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return CourseResponse(**result.data[0]) if result.data else None

    def get_course_by_id(self, course_id: str) -> CourseResponse:
        course = self.find_by_id(course_id)
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    def get_course_detail(self, course_id: str) -> CourseDetailResponse:
        """Course plus the number of enrolled students"""
        course = self.get_course_by_id(course_id)
        return CourseDetailResponse(
            **course.model_dump(),
            enrolled_students_count=self.get_enrolled_count(course_id),
        )

    def list_courses(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        level: Optional[str] = None,
        search: Optional[str] = None,
        instructor_id: Optional[str] = None,
    ) -> Page[CourseResponse]:
        """Filtered page of courses, newest first"""
        if instructor_id and not is_valid_id(instructor_id):
            # No instructor can own a non-uuid id
            return Page[CourseResponse](items=[], pagination=build_pagination(page, limit, 0))

        start, end = page_range(page, limit)
        try:
            query = self.supabase.table(COURSES_TABLE)\
                .select("*", count="exact")\
                .order("created_at", desc=True)

            term = _FILTER_SYNTAX.sub(" ", search).strip() if search else ""
            if term:
                query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")
            if category:
                query = query.eq("category", category)
            if level:
                query = query.eq("level", level)
            if instructor_id:
                query = query.eq("instructor_id", instructor_id)

            result = query.range(start, end).execute()
        except Exception as e:
            logger.error(f"Error listing courses: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return Page[CourseResponse](
            items=[CourseResponse(**row) for row in (result.data or [])],
            pagination=build_pagination(page, limit, result.count or 0),
        )

    def create_course(self, course_data: CourseCreate, instructor_id: str) -> CourseResponse:
        insert_data = course_data.model_dump()
        insert_data["instructor_id"] = instructor_id
        try:
            result = self.supabase.table(COURSES_TABLE).insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create course")
            course = CourseResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating course: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        logger.info(f"Course {course.id} created by instructor {instructor_id}")
        return course

    def update_course(self, course_id: str, course_data: CourseUpdate) -> CourseResponse:
        """Apply only the fields present in the request"""
        update_data = course_data.model_dump(exclude_unset=True)
        # description is the only nullable column
        update_data = {k: v for k, v in update_data.items() if v is not None or k == "description"}
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(COURSES_TABLE)\
                .update(update_data)\
                .eq("id", course_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Course not found")
            return CourseResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating course {course_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_course(self, course_id: str) -> bool:
        try:
            result = self.supabase.table(COURSES_TABLE)\
                .delete()\
                .eq("id", course_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            logger.error(f"Error deleting course {course_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_enrolled_count(self, course_id: str) -> int:
        try:
            result = self.supabase.table(ENROLLMENTS_TABLE)\
                .select("id", count="exact")\
                .eq("course_id", course_id)\
                .execute()
            return result.count or 0
        except Exception as e:
            logger.error(f"Error counting enrollments for course {course_id}: {e}")
            return 0
