import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from starlette.datastructures import UploadFile

from gamification.assessments.assessment_models import Assessment, GradingMode
from gamification.assessments.assessment_validators import AssessmentCreate, GradeSubmission
from gamification.auth.auth_models import AdminCaller
from gamification.core.database import to_object_id
from gamification.core.documents import utcnow
from gamification.core.errors import BadRequest, Forbidden, NotFound
from gamification.media.uploader import MediaUploader, upload_file

logger = logging.getLogger(__name__)

ASSESSMENT_FOLDER = "assessments"

# ==================== OWNERSHIP ====================

async def verify_assessment_owner(db: AsyncIOMotorDatabase, assessment_id, instructor: AdminCaller) -> dict:
    """
    Raises:
        404: Assessment not found
        403: Caller did not create it
    """
    assessment = await db.assessments.find_one({"_id": to_object_id(assessment_id)})
    if not assessment:
        raise NotFound("Assessment not found")

    if assessment.get("instructorId") != instructor.id:
        raise Forbidden("Not authorized to access this assessment")

    return assessment

# ==================== ASSESSMENTS ====================

async def create_assessment(
    db: AsyncIOMotorDatabase,
    uploader: MediaUploader,
    instructor: AdminCaller,
    course_id: str,
    data: AssessmentCreate,
    file: Optional[UploadFile] = None
) -> dict:
    """Create an assessment under a course the caller owns"""
    course = await db.courses.find_one({"_id": to_object_id(course_id)})
    if not course:
        raise NotFound("Course not found")

    if course.get("instructorId") != instructor.id:
        raise Forbidden("You are not authorized to add assessments to this course")

    file_url = None
    if file is not None:
        file_url = await upload_file(uploader, file, ASSESSMENT_FOLDER)

    assessment = Assessment(
        course_id=course["_id"],
        instructor_id=instructor.id,
        file=file_url,
        **data.model_dump(),
    )
    doc = assessment.to_document()
    result = await db.assessments.insert_one(doc)
    doc["_id"] = result.inserted_id

    logger.info("Instructor %s created assessment %s for course %s", instructor.id, doc["_id"], course["_id"])
    return doc


async def get_assessment(db: AsyncIOMotorDatabase, assessment_id: str) -> dict:
    assessment = await db.assessments.find_one({"_id": to_object_id(assessment_id)})
    if not assessment:
        raise NotFound("Assessment not found")
    return assessment

# ==================== GRADING ====================

async def get_submissions_for_assessment(
    db: AsyncIOMotorDatabase,
    instructor: AdminCaller,
    assessment_id: str
) -> List[dict]:
    assessment = await verify_assessment_owner(db, assessment_id, instructor)
    cursor = db.submissions.find({"assessmentId": assessment["_id"]}).sort("createdAt", 1)
    return await cursor.to_list(length=None)


async def grade_submission(
    db: AsyncIOMotorDatabase,
    instructor: AdminCaller,
    submission_id: str,
    data: GradeSubmission
) -> dict:
    """
    Record a score on a submission (once)

    `use_ai` only selects the recorded grading mode; the grading engine
    lives outside this service.

    Raises:
        404: Submission not found
        403: Caller does not own the assessment
        400: Already graded, or score above the assessment's maximum
    """
    submission = await db.submissions.find_one({"_id": to_object_id(submission_id)})
    if not submission:
        raise NotFound("Submission not found")

    assessment = await verify_assessment_owner(db, submission["assessmentId"], instructor)

    if submission.get("graded"):
        raise BadRequest("Submission has already been graded")

    highest = assessment.get("highestAttainableScore")
    if highest is not None and data.score > highest:
        raise BadRequest(f"Score cannot exceed the highest attainable score of {highest:g}")

    now = utcnow()
    updated = await db.submissions.find_one_and_update(
        {"_id": submission["_id"], "graded": False},
        {"$set": {
            "score": data.score,
            "comments": data.comments,
            "graded": True,
            "gradingMode": (GradingMode.AI if data.use_ai else GradingMode.MANUAL).value,
            "gradedBy": instructor.id,
            "gradedAt": now,
            "updatedAt": now,
        }},
        return_document=ReturnDocument.AFTER,
    )

    # Lost a race with another grader
    if not updated:
        raise BadRequest("Submission has already been graded")

    logger.info("Instructor %s graded submission %s: %s", instructor.id, submission["_id"], data.score)
    return updated
