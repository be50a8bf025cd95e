from pydantic import BaseModel, EmailStr, ConfigDict, field_validator
from typing import Optional
from datetime import date, datetime

from app.core.constants import RoleEnum, GenderEnum

class UserBase(BaseModel):
    """Base user schema with common fields."""
    name: str
    email: EmailStr
    photo: str
    gender: GenderEnum
    dob: date

class UserCreate(UserBase):
    """Schema for registering a user under an externally issued id."""
    id: str

    @field_validator("id", "name", "photo")
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Please enter all fields")
        return v.strip()

class User(UserBase):
    """Main user schema for reading user data."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: RoleEnum
    age: int
    created_at: Optional[datetime] = None

class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    photo: Optional[str] = None
