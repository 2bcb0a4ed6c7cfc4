from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.networks import validate_email

# Ids and ages live in 64-bit SQLite INTEGER columns
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class StudentBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    age: int = Field(..., ge=INT64_MIN, le=INT64_MAX)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    """
    Partial update. Missing, null, empty or zero fields mean "leave unchanged",
    so age can never be set to 0 through a patch.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(None, ge=INT64_MIN, le=INT64_MAX)

    @field_validator("email")
    @classmethod
    def validate_email_when_set(cls, v: Optional[str]) -> Optional[str]:
        if v:
            _, v = validate_email(v)
        return v


class Student(BaseModel):
    id: int
    name: str
    email: str
    age: int

    model_config = ConfigDict(from_attributes=True)


class StudentCreated(BaseModel):
    id: int


class StatusResponse(BaseModel):
    status: str = "success"
