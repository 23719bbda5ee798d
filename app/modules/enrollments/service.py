from supabase import Client
from app.database.supabase_client import is_valid_id
from app.modules.courses.models import ENROLLMENTS_TABLE
from app.modules.courses.schemas import EnrollmentResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class EnrollmentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def is_enrolled(self, user_id: str, course_id: str) -> bool:
        try:
            result = self.supabase.table(ENROLLMENTS_TABLE)\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("course_id", course_id)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            logger.error(f"Error checking enrollment: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def enroll(self, user_id: str, course_id: str) -> EnrollmentResponse:
        """Enroll a user; the (user_id, course_id) pair is unique"""
        if self.is_enrolled(user_id, course_id):
            raise HTTPException(status_code=400, detail="Already enrolled in this course")
        try:
            result = self.supabase.table(ENROLLMENTS_TABLE).insert({
                "user_id": user_id,
                "course_id": course_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to enroll in course")
            return EnrollmentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            # Lost a race against a concurrent enroll for the same pair
            if "duplicate" in error_message.lower() or "23505" in error_message:
                raise HTTPException(status_code=400, detail="Already enrolled in this course")
            logger.error(f"Error enrolling user {user_id} in course {course_id}: {error_message}")
            raise HTTPException(status_code=500, detail=error_message)

    def unenroll(self, user_id: str, course_id: str) -> bool:
        if not is_valid_id(course_id):
            raise HTTPException(status_code=404, detail="Enrollment not found")
        try:
            result = self.supabase.table(ENROLLMENTS_TABLE)\
                .delete()\
                .eq("user_id", user_id)\
                .eq("course_id", course_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error unenrolling user {user_id} from course {course_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Enrollment not found")
        return True

    def list_user_enrollments(self, user_id: str) -> List[EnrollmentResponse]:
        """A user's enrollments with the course embedded"""
        try:
            result = self.supabase.table(ENROLLMENTS_TABLE)\
                .select("*, course:courses(*)")\
                .eq("user_id", user_id)\
                .order("enrolled_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing enrollments for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return [EnrollmentResponse(**row) for row in (result.data or [])]
