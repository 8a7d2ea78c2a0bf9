import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.datastructures import UploadFile

from gamification.assessments.assessment_models import Submission
from gamification.assessments.assessment_validators import SubmissionCreate
from gamification.auth.auth_models import AdminCaller, Caller, UserCaller
from gamification.core.database import to_object_id
from gamification.core.errors import Forbidden, NotFound
from gamification.media.uploader import MediaUploader, upload_file

logger = logging.getLogger(__name__)

SUBMISSION_FOLDER = "submissions"


async def submit_assessment(
    db: AsyncIOMotorDatabase,
    uploader: MediaUploader,
    learner: UserCaller,
    assessment_id: str,
    data: SubmissionCreate,
    file: Optional[UploadFile] = None
) -> dict:
    """Record a learner's answer to an assessment"""
    assessment = await db.assessments.find_one({"_id": to_object_id(assessment_id)})
    if not assessment:
        raise NotFound("Assessment not found")

    file_url = None
    if file is not None:
        file_url = await upload_file(uploader, file, SUBMISSION_FOLDER)

    submission = Submission(
        assessment_id=assessment["_id"],
        learner_id=learner.id,
        file=file_url,
        **data.model_dump(),
    )
    doc = submission.to_document()
    result = await db.submissions.insert_one(doc)
    doc["_id"] = result.inserted_id

    logger.info("Learner %s submitted %s for assessment %s", learner.id, doc["_id"], assessment["_id"])
    return doc


async def get_submission(db: AsyncIOMotorDatabase, caller: Caller, submission_id: str) -> dict:
    """
    Learners see their own submissions; instructors see those for their assessments

    Raises:
        404: Submission not found
        403: Neither the learner nor the owning instructor
    """
    submission = await db.submissions.find_one({"_id": to_object_id(submission_id)})
    if not submission:
        raise NotFound("Submission not found")

    if isinstance(caller, UserCaller) and submission.get("learnerId") == caller.id:
        return submission

    if isinstance(caller, AdminCaller):
        assessment = await db.assessments.find_one({"_id": submission.get("assessmentId")})
        if assessment and assessment.get("instructorId") == caller.id:
            return submission

    raise Forbidden("Not authorized to access this submission")
