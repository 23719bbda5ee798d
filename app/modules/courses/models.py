# Supabase tables: courses, enrollments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

courses:
- id: uuid (primary key, default gen_random_uuid())
- title: text (not null)
- description: text (nullable)
- category: text (not null)
- level: text (not null) - one of beginner, intermediate, advanced
- price: numeric (not null, default 0, check price >= 0)
- duration: integer (not null, check duration > 0) - minutes
- instructor_id: uuid (foreign key to users.id, on delete set null)
- is_published: boolean (not null, default false)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

enrollments:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (foreign key to users.id, on delete cascade)
- course_id: uuid (foreign key to courses.id, on delete cascade)
- enrolled_at: timestamp (default: now())
- unique constraint on (user_id, course_id)

RLS is enabled on both tables; the API uses the service role key and
enforces ownership itself.
"""

COURSES_TABLE = "courses"
ENROLLMENTS_TABLE = "enrollments"
LEVELS = ("beginner", "intermediate", "advanced")
