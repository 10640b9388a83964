from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.schema.common import CamelModel


class RegisterUser(CamelModel):
    """Self-registration. Admin accounts are provisioned, not registered."""
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    name: str = Field(..., min_length=1, max_length=200)
    role: Literal["STUDENT", "MENTOR"] = "STUDENT"
    city: Optional[str] = Field(None, max_length=100)
    interests: Optional[str] = None
    linkedin_url: Optional[str] = Field(None, max_length=500)
    portfolio_url: Optional[str] = Field(None, max_length=500)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserSummary(CamelModel):
    id: UUID
    name: str
    email: str


class UserResponse(CamelModel):
    id: UUID
    email: str
    name: str
    role: str
    city: Optional[str] = None
    interests: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    created_at: Optional[datetime] = None
