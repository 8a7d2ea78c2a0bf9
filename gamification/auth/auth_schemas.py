from typing import Optional

from pydantic import EmailStr, Field

from gamification.core.validation import RequestSchema

# ==================== REQUEST SCHEMAS ====================

class RegisterRequest(RequestSchema):
    messages = {
        "email": "Please provide a valid email address",
        "username": "Username is a required field",
        "password": "Password must be at least 8 characters",
    }

    email: EmailStr
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    phone: Optional[str] = None
    year_of_experience: Optional[int] = Field(None, alias="yearOfExperience")
    highest_education_level: Optional[str] = Field(None, alias="highestEducationLevel")
    gender: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")


class CreateAdminRequest(RegisterRequest):
    pass


class LoginRequest(RequestSchema):
    messages = {
        "email": "Please provide a valid email address",
        "password": "Password is a required field",
    }

    email: EmailStr
    password: str = Field(..., min_length=1)
