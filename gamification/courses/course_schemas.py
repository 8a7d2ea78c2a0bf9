from typing import List, Optional, Union

from fastapi import Request
from pydantic import Field, StrictBool, field_validator

from gamification.core.database import is_object_id
from gamification.core.validation import (
    RequestSchema, ValidatedRequest, decode_json_field, form_bool, object_id_error, read_body, validate_payload
)

# ==================== REQUEST SCHEMAS ====================

class CourseCreate(RequestSchema):
    messages = {
        "title": "Please provide the title of the course",
        "objective": "Objective must be a string",
        "price": "Price must be a number",
        "duration": "Duration must be a string",
        "lessonFormat": "Lesson format must be a string",
    }

    title: str = Field(..., min_length=1)
    objective: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = None
    lesson_format: Optional[str] = Field(None, alias="lessonFormat")

    @field_validator("duration", mode="before")
    @classmethod
    def duration_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class CourseContentCreate(RequestSchema):
    messages = {
        "title": "Please provide the title of the course content",
        "objectives": "Objectives must be a string",
        "link": "Link must be a string",
    }

    title: str = Field(..., min_length=1)
    objectives: Optional[str] = None
    link: Optional[str] = None


class AnnouncementCreate(RequestSchema):
    messages = {
        "title": "Please provide the title of the announcement",
        "details": "Please provide the details of the announcement",
        "courseList": "Course list must be an array of course ids",
        "sendEmail": "sendEmail must be a boolean",
    }

    title: str = Field(..., min_length=1)
    details: str = Field(..., min_length=1)
    course_list: List[str] = Field(default_factory=list, alias="courseList")
    send_email: StrictBool = Field(False, alias="sendEmail")

    @field_validator("send_email", mode="before")
    @classmethod
    def send_email_from_form(cls, v):
        return form_bool(v)

    @field_validator("course_list", mode="before")
    @classmethod
    def decode_course_list(cls, v: Union[str, list]):
        v = decode_json_field(v)
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("course_list")
    @classmethod
    def course_ids_valid(cls, v: List[str]):
        if not all(is_object_id(course_id) for course_id in v):
            raise ValueError("Course list must contain valid course ids")
        return v

# ==================== ROUTE VALIDATORS ====================

async def validate_create_course_content(courseId: str, request: Request) -> ValidatedRequest:
    data, files = await read_body(request)
    errors = object_id_error(courseId, "courseId", "Invalid course id")
    payload = validate_payload(CourseContentCreate, data, errors)
    return ValidatedRequest(payload=payload, files=files.get("files", []) + files.get("file", []))


async def validate_create_announcement(courseId: str, request: Request) -> ValidatedRequest:
    data, _ = await read_body(request)
    errors = object_id_error(courseId, "courseId", "Invalid course id")
    return ValidatedRequest(payload=validate_payload(AnnouncementCreate, data, errors))
