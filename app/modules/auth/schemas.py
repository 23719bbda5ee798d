from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from app.modules.users.schemas import Role, UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)
    role: Optional[Role] = None


class AuthData(BaseModel):
    user: UserResponse
    token: str
