from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.core.enums import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserInfo(BaseModel):
    id: UUID
    full_name: str
    email: EmailStr
    role: UserRole
    student_id: Optional[str] = None
    department: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
    issued_at: datetime


class UserProvisionRequest(BaseModel):
    """Admin-only: create a portal user and their zero-balance account."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    student_id: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def check_student_id(self) -> "UserProvisionRequest":
        if self.role == UserRole.STUDENT and not (self.student_id and self.student_id.strip()):
            raise ValueError("student_id is required for students")
        return self


class CurrentUser(BaseModel):
    """Lightweight representation of the authenticated user for RBAC checks."""

    id: UUID
    role: str
    full_name: str
    student_id: Optional[str] = None
