"""
Seed Data Script
Creates an admin account and a few sample courses owned by it.
Safe to run repeatedly: existing rows are left untouched.

Usage: python -m app.scripts.seed_data
"""

import logging
from typing import Any, Dict, List

from supabase import Client

from app.config.settings import settings
from app.core.security import hash_password
from app.database.supabase_client import get_supabase
from app.modules.courses.models import COURSES_TABLE
from app.modules.users.models import USERS_TABLE

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_COURSES: List[Dict[str, Any]] = [
    {
        "title": "Introduction to Python",
        "description": "Variables, control flow, functions and modules for absolute beginners.",
        "category": "programming",
        "level": "beginner",
        "price": 0,
        "duration": 240,
        "is_published": True,
    },
    {
        "title": "REST APIs with FastAPI",
        "description": "Routing, dependency injection, validation and JWT authentication.",
        "category": "programming",
        "level": "intermediate",
        "price": 29.99,
        "duration": 360,
        "is_published": True,
    },
    {
        "title": "Postgres Row Level Security",
        "description": "Designing per-row access policies for multi-tenant applications.",
        "category": "database",
        "level": "advanced",
        "price": 49.0,
        "duration": 180,
        "is_published": False,
    },
]


def seed_admin(supabase: Client, email: str, password: str, name: str = "Administrator") -> str:
    """Return the admin's id, creating the account if needed"""
    email = email.lower()
    existing = supabase.table(USERS_TABLE)\
        .select("id")\
        .eq("email", email)\
        .limit(1)\
        .execute()
    if existing.data:
        logger.info(f"Admin {email} already exists, skipping")
        return existing.data[0]["id"]

    profile = {"name": name, "email": email, "role": "admin"}
    if settings.uses_local_auth:
        profile["password_hash"] = hash_password(password)
    else:
        auth_response = supabase.auth.admin.create_user({
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"name": name, "role": "admin"},
        })
        profile["id"] = auth_response.user.id

    result = supabase.table(USERS_TABLE).insert(profile).execute()
    logger.info(f"Created admin {email}")
    return result.data[0]["id"]


def seed_courses(supabase: Client, instructor_id: str) -> int:
    """Insert sample courses whose title does not exist yet"""
    created_count = 0
    skipped_count = 0

    for course in SAMPLE_COURSES:
        try:
            existing = supabase.table(COURSES_TABLE)\
                .select("id")\
                .eq("title", course["title"])\
                .limit(1)\
                .execute()
            if existing.data:
                skipped_count += 1
                logger.debug(f"Skipped existing course: {course['title']}")
                continue
            supabase.table(COURSES_TABLE).insert({**course, "instructor_id": instructor_id}).execute()
            created_count += 1
            logger.debug(f"Created course: {course['title']}")
        except Exception as e:
            logger.error(f"Error seeding course {course['title']}: {e}")

    logger.info(f"Courses seeded: {created_count} created, {skipped_count} skipped")
    return created_count


def main():
    email = settings.seed_admin_email
    password = settings.seed_admin_password
    if not email or not password:
        raise SystemExit("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
    if len(password) < 6:
        raise SystemExit("SEED_ADMIN_PASSWORD must be at least 6 characters")

    supabase = get_supabase()
    admin_id = seed_admin(supabase, email, password, settings.seed_admin_name)
    seed_courses(supabase, admin_id)
    logger.info("Seeding complete")


if __name__ == "__main__":
    main()
