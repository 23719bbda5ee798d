from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

Level = Literal["beginner", "intermediate", "advanced"]


class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    level: Level
    price: float = Field(default=0, ge=0)
    duration: int = Field(gt=0)  # minutes


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    level: Optional[Level] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    is_published: Optional[bool] = None


class CourseResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    category: str
    level: Level
    price: float = 0
    duration: int
    instructor_id: Optional[str] = None
    is_published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CourseDetailResponse(CourseResponse):
    enrolled_students_count: int = 0


class EnrollmentResponse(BaseModel):
    id: str
    user_id: str
    course_id: str
    enrolled_at: Optional[datetime] = None
    course: Optional[CourseResponse] = None

    class Config:
        from_attributes = True
