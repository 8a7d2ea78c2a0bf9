import logging
from typing import List, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.datastructures import UploadFile

from gamification.auth.auth_models import AdminCaller
from gamification.core.concurrency import FanOutResult, fan_out
from gamification.core.database import to_object_id
from gamification.core.errors import BadRequest, Forbidden, NotFound
from gamification.courses.course_models import Announcement, Course, CourseContent
from gamification.courses.course_schemas import AnnouncementCreate, CourseContentCreate, CourseCreate
from gamification.media.uploader import MediaUploader, upload_file
from gamification.notifications.notification_service import create_notification

logger = logging.getLogger(__name__)

CONTENT_FOLDER = "course-content"

# ==================== COURSES ====================

async def create_course(db: AsyncIOMotorDatabase, instructor: AdminCaller, data: CourseCreate) -> dict:
    """Create a course owned by the calling instructor"""
    doc = Course(instructor_id=instructor.id, **data.model_dump()).to_document()
    result = await db.courses.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Instructor %s created course %s", instructor.id, doc["_id"])
    return doc


async def get_course(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    course = await db.courses.find_one({"_id": to_object_id(course_id)})
    if not course:
        raise NotFound("Course not found")
    return course


async def list_instructor_courses(db: AsyncIOMotorDatabase, instructor: AdminCaller, skip: int = 0, limit: int = 20) -> List[dict]:
    cursor = db.courses.find({"instructorId": instructor.id}).sort("createdAt", -1).skip(skip).limit(limit)
    return await cursor.to_list(length=limit)

# ==================== CURRICULUM ====================

async def create_course_content(
    db: AsyncIOMotorDatabase,
    uploader: MediaUploader,
    instructor: AdminCaller,
    course_id: str,
    data: CourseContentCreate,
    files: List[UploadFile],
    upload_limit: int
) -> Tuple[List[dict], FanOutResult]:
    """
    Add a curriculum unit to a course the caller owns

    Files are uploaded concurrently; a file that fails or yields no URL is
    left out of the record and reported in the returned FanOutResult.

    Returns:
        (full curriculum for the course, upload results)
    """
    course_oid = to_object_id(course_id)
    course = await db.courses.find_one({"_id": course_oid})

    if not course or course.get("instructorId") != instructor.id:
        raise Forbidden("You are not authorized to add contents to this course")

    async def upload(upload_item: UploadFile) -> str:
        url = await upload_file(uploader, upload_item, CONTENT_FOLDER)
        if not url:
            raise ValueError("Upload returned no URL")
        return url

    uploads = await fan_out(files, upload, upload_limit)

    content = CourseContent(course_id=course_oid, files=uploads.succeeded, **data.model_dump())
    await db.course_contents.insert_one(content.to_document())

    return await get_curriculum(db, course_oid), uploads


async def get_curriculum(db: AsyncIOMotorDatabase, course_oid: ObjectId) -> List[dict]:
    cursor = db.course_contents.find({"courseId": course_oid}).sort("createdAt", 1)
    return await cursor.to_list(length=None)


async def get_course_curriculum(db: AsyncIOMotorDatabase, course_id: str) -> List[dict]:
    course = await db.courses.find_one({"_id": to_object_id(course_id)})
    if not course:
        raise NotFound("Course not found", status_code=400)
    return await get_curriculum(db, course["_id"])

# ==================== ANNOUNCEMENTS ====================

async def create_announcement(
    db: AsyncIOMotorDatabase,
    instructor: AdminCaller,
    data: AnnouncementCreate,
    notify_limit: int
) -> Tuple[List[dict], FanOutResult]:
    """
    Create one announcement per listed course the caller owns

    With send_email set, every enrolled learner of each course gets a
    notification; failures are collected, not raised.
    """
    course_oids = [to_object_id(course_id) for course_id in data.course_list]
    cursor = db.courses.find({"_id": {"$in": course_oids}, "instructorId": instructor.id})
    valid_courses = await cursor.to_list(length=None)

    if not valid_courses:
        raise BadRequest("No valid courses found")

    announcements = []
    for course in valid_courses:
        doc = Announcement(title=data.title, details=data.details, course_ids=course["_id"]).to_document()
        result = await db.announcements.insert_one(doc)
        doc["_id"] = result.inserted_id
        announcements.append(doc)

    notifications = FanOutResult()
    if data.send_email:
        recipients = [
            (learner_id, course["_id"])
            for course in valid_courses
            for learner_id in course.get("learnerIds", [])
        ]
        message = f"New announcement: {data.title}"

        async def notify(recipient):
            learner_id, course_oid = recipient
            return await create_notification(db, learner_id, course_oid, message)

        notifications = await fan_out(recipients, notify, notify_limit)
        logger.info(
            "Announcement '%s': %d notifications sent, %d failed",
            data.title, len(notifications.succeeded), len(notifications.failed)
        )

    return announcements, notifications


async def get_all_announcements_by_course(db: AsyncIOMotorDatabase, course_id: str) -> List[dict]:
    course = await db.courses.find_one({"_id": to_object_id(course_id)})
    if not course:
        raise NotFound("Course not found", status_code=400)

    # TODO: announcements are stored under "courseIds"; this filter on "courseId" matches none of them.
    # Align the stored key and the query together once existing data has been migrated.
    cursor = db.announcements.find({"courseId": course["_id"]})
    return await cursor.to_list(length=None)
