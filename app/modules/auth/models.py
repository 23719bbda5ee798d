# Credential storage
# Which store holds passwords depends on AUTH_MODE

"""
AUTH_MODE=supabase (default):
- Credentials live in Supabase Auth (auth.users), created with
  auth.admin.create_user() and checked with auth.sign_in_with_password().
- The public users row shares the auth user's id and carries name and role.

AUTH_MODE=local:
- The bcrypt hash is stored in users.password_hash and verified in-process.

Either way the API issues its own HS256 token (JWT_SECRET) with the claims
id, email and role, valid for JWT_EXPIRES_DAYS days.
"""
