from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.assessments import assessment_service as service
from gamification.assessments import submission_service
from gamification.assessments.assessment_validators import (
    validate_create_assessment, validate_grade_submission,
    validate_submit_assessment, validate_view_submissions
)
from gamification.auth.auth_models import AdminCaller, Caller, UserCaller
from gamification.auth.auth_permissions import authenticate, authorize, require_admin, require_user
from gamification.core.database import get_db
from gamification.core.responses import success
from gamification.core.validation import ValidatedRequest
from gamification.media.uploader import MediaUploader, get_uploader

router = APIRouter(prefix="/assessment", tags=["Assessments"])

# ==================== INSTRUCTOR ====================

@router.post("/create/{courseId}")
async def create_assessment(
    courseId: str,
    instructor: AdminCaller = Depends(require_admin),
    validated: ValidatedRequest = Depends(validate_create_assessment),
    db: AsyncIOMotorDatabase = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader)
):
    """
    Create an assessment (JSON or multipart; optional file under "file")
    """
    assessment = await service.create_assessment(
        db, uploader, instructor, courseId, validated.payload, validated.file
    )
    return success(assessment, "Assessment created successfully", 201)


@router.put("/grade/{submissionId}")
async def grade_submission(
    submissionId: str,
    instructor: AdminCaller = Depends(require_admin),
    validated: ValidatedRequest = Depends(validate_grade_submission),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    submission = await service.grade_submission(db, instructor, submissionId, validated.payload)
    return success(submission, "Submission graded successfully")


@router.get("/submissions/{assessmentId}")
async def get_submissions_for_assessment(
    instructor: AdminCaller = Depends(require_admin),
    assessment_id: str = Depends(validate_view_submissions),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    submissions = await service.get_submissions_for_assessment(db, instructor, assessment_id)
    return success(submissions, "Submissions fetched successfully")

# ==================== LEARNER ====================

@router.post("/submit/{assessmentId}")
async def submit_assessment(
    assessmentId: str,
    learner: UserCaller = Depends(require_user),
    validated: ValidatedRequest = Depends(validate_submit_assessment),
    db: AsyncIOMotorDatabase = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader)
):
    submission = await submission_service.submit_assessment(
        db, uploader, learner, assessmentId, validated.payload, validated.file
    )
    return success(submission, "Assessment submitted successfully", 201)


@router.get("/submission/{submissionId}")
async def get_submission(
    submissionId: str,
    caller: Caller = Depends(authorize(AdminCaller, UserCaller)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    submission = await submission_service.get_submission(db, caller, submissionId)
    return success(submission, "Submission fetched successfully")

# ==================== SHARED ====================

@router.get("/{assessmentId}")
async def get_assessment(
    assessmentId: str,
    caller: Caller = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    assessment = await service.get_assessment(db, assessmentId)
    return success(assessment, "Assessment fetched successfully")
