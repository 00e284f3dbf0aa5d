from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from enum import Enum


class UserRole(str, Enum):
    """Role that decides which views a user gets"""
    ADMIN = "admin"
    INTERN = "intern"
    GUEST = "guest"


class UserCreate(BaseModel):
    """Schema for adding a user to the directory"""
    id: str = Field(..., min_length=1)
    email: EmailStr
    role: UserRole = UserRole.INTERN
    name: Optional[str] = None


class UserRoleUpdate(BaseModel):
    role: UserRole


class User(BaseModel):
    """Directory entry as stored"""
    id: str
    email: str
    role: UserRole
    name: Optional[str] = None
