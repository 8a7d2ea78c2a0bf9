from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.auth.auth_models import AdminCaller, Caller
from gamification.auth.auth_permissions import authenticate, require_admin
from gamification.core.config import config
from gamification.core.database import get_db
from gamification.core.responses import success
from gamification.core.validation import ValidatedRequest, validate_body
from gamification.courses import course_service as service
from gamification.courses.course_schemas import (
    CourseCreate, validate_create_announcement, validate_create_course_content
)
from gamification.media.uploader import MediaUploader, get_uploader

router = APIRouter(prefix="/course", tags=["Course Management"])

# ==================== COURSES ====================

@router.post("/create")
async def create_course(
    instructor: AdminCaller = Depends(require_admin),
    data: CourseCreate = Depends(validate_body(CourseCreate)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    course = await service.create_course(db, instructor, data)
    return success(course, "Course created successfully", 201)


@router.get("/mine")
async def list_my_courses(
    skip: int = 0,
    limit: int = 20,
    instructor: AdminCaller = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    courses = await service.list_instructor_courses(db, instructor, max(skip, 0), min(max(limit, 1), 100))
    return success(courses, "Courses fetched successfully")


@router.get("/{courseId}")
async def get_course(
    courseId: str,
    caller: Caller = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    course = await service.get_course(db, courseId)
    return success(course, "Course fetched successfully")

# ==================== CURRICULUM ====================

@router.post("/{courseId}/content")
async def create_course_content(
    courseId: str,
    instructor: AdminCaller = Depends(require_admin),
    validated: ValidatedRequest = Depends(validate_create_course_content),
    db: AsyncIOMotorDatabase = Depends(get_db),
    uploader: MediaUploader = Depends(get_uploader)
):
    """
    Add a curriculum unit (multipart; attach files under "files")
    Responds with the whole curriculum; failed uploads are listed in meta
    """
    curriculum, uploads = await service.create_course_content(
        db, uploader, instructor, courseId, validated.payload, validated.files, config.UPLOAD_CONCURRENCY
    )
    meta = {"uploads": uploads.summary(lambda upload: {"filename": upload.filename})}
    return success(curriculum, "Course curriculum updated successfully", meta=meta)


@router.get("/{courseId}/curriculum")
async def get_course_curriculum(
    courseId: str,
    caller: Caller = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    curriculum = await service.get_course_curriculum(db, courseId)
    return success(curriculum, "Course curriculum fetched successfully")

# ==================== ANNOUNCEMENTS ====================

@router.post("/{courseId}/announcement")
async def create_announcement(
    courseId: str,
    instructor: AdminCaller = Depends(require_admin),
    validated: ValidatedRequest = Depends(validate_create_announcement),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    announcements, notifications = await service.create_announcement(
        db, instructor, validated.payload, config.NOTIFICATION_CONCURRENCY
    )
    meta = None
    if validated.payload.send_email:
        meta = {
            "notifications": notifications.summary(
                lambda recipient: {"learnerId": recipient[0], "courseId": recipient[1]}
            )
        }
    return success(announcements, "Announcements created and notifications sent", 201, meta=meta)


@router.get("/{courseId}/announcements")
async def get_all_announcements_by_course(
    courseId: str,
    caller: Caller = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    announcements = await service.get_all_announcements_by_course(db, courseId)
    return success(announcements, "Course announcements fetched successfully")
