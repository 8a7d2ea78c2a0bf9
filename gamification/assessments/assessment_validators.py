"""
Assessment route validators

Each validator runs after auth and before the handler: the attached file is
checked first, then path ids and body fields are validated together.
"""

from typing import Any, Optional

from fastapi import Request
from pydantic import Field, StrictBool, field_validator

from gamification.assessments.assessment_models import MarkingGuide
from gamification.core.errors import ValidationFailed
from gamification.core.validation import (
    RequestSchema, ValidatedRequest, check_file_type, decode_json_field, form_bool,
    object_id_error, read_body, validate_payload
)


def check_marking_guide(value: Any) -> Any:
    """Checks run in order; the first failure is the field's only error"""
    value = decode_json_field(value)

    if not isinstance(value, dict):
        raise ValueError("Marking guide must be an object")

    question = value.get("question")
    if not question or not isinstance(question, str):
        raise ValueError("Marking guide must contain a valid question")

    expected_answer = value.get("expectedAnswer")
    if not expected_answer or not isinstance(expected_answer, str):
        raise ValueError("Marking guide must contain a valid expectedAnswer")

    keywords = value.get("keywords")
    if not isinstance(keywords, list):
        raise ValueError("Keywords must be an array of strings")

    for keyword in keywords:
        if not isinstance(keyword, str):
            raise ValueError("All keywords must be valid strings")

    return value


def reject_bool(value: Any, message: str) -> Any:
    if isinstance(value, bool):
        raise ValueError(message)
    return value

# ==================== REQUEST SCHEMAS ====================

class AssessmentCreate(RequestSchema):
    messages = {
        "title": "Please provide the title of the assessment",
        "question": "Question is a required field",
        "highestAttainableScore": "Please provide the highest attainable score as a number",
    }

    title: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    highest_attainable_score: float = Field(..., alias="highestAttainableScore", allow_inf_nan=False)
    marking_guide: Optional[MarkingGuide] = Field(None, alias="markingGuide")

    @field_validator("highest_attainable_score", mode="before")
    @classmethod
    def score_not_bool(cls, v):
        return reject_bool(v, cls.messages["highestAttainableScore"])

    @field_validator("marking_guide", mode="before")
    @classmethod
    def marking_guide_shape(cls, v):
        return check_marking_guide(v)


class SubmissionCreate(RequestSchema):
    messages = {
        "answerText": "Please provide your answer as text",
    }

    answer_text: str = Field(..., alias="answerText", min_length=1)


class GradeSubmission(RequestSchema):
    messages = {
        "score": "Please provide the score as a number",
        "comments": "Comments must be a string",
        "useAI": "Please select if you want learners' submissions to be graded automatically or manually",
    }

    score: float = Field(..., allow_inf_nan=False)
    comments: Optional[str] = None
    use_ai: StrictBool = Field(..., alias="useAI")

    @field_validator("score", mode="before")
    @classmethod
    def score_not_bool(cls, v):
        return reject_bool(v, cls.messages["score"])

    @field_validator("use_ai", mode="before")
    @classmethod
    def use_ai_from_form(cls, v):
        return form_bool(v)

# ==================== ROUTE VALIDATORS ====================

async def validate_create_assessment(courseId: str, request: Request) -> ValidatedRequest:
    data, files = await read_body(request)
    upload = (files.get("file") or [None])[0]
    check_file_type(upload)

    errors = object_id_error(courseId, "courseId", "Invalid course id")
    payload = validate_payload(AssessmentCreate, data, errors)
    return ValidatedRequest(payload=payload, file=upload)


async def validate_submit_assessment(assessmentId: str, request: Request) -> ValidatedRequest:
    data, files = await read_body(request)
    upload = (files.get("file") or [None])[0]
    check_file_type(upload)

    errors = object_id_error(assessmentId, "assessmentId", "Invalid assessment id")
    payload = validate_payload(SubmissionCreate, data, errors)
    return ValidatedRequest(payload=payload, file=upload)


async def validate_grade_submission(submissionId: str, request: Request) -> ValidatedRequest:
    data, _ = await read_body(request)
    errors = object_id_error(submissionId, "submissionId", "Invalid submission id")
    return ValidatedRequest(payload=validate_payload(GradeSubmission, data, errors))


async def validate_view_submissions(assessmentId: str) -> str:
    errors = object_id_error(assessmentId, "assessmentId", "Invalid assessment id")
    if errors:
        raise ValidationFailed(errors)
    return assessmentId
