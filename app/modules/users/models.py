# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, default gen_random_uuid(); equals auth.users.id when AUTH_MODE=supabase)
- name: text (not null)
- email: text (unique, not null)
- role: text (not null, default 'student') - one of student, instructor, admin
- password_hash: text (nullable) - bcrypt hash, only populated when AUTH_MODE=local
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

password_hash is never selected into API responses; UserResponse has no such field.
"""

USERS_TABLE = "users"
ROLES = ("student", "instructor", "admin")
