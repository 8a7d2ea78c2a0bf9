import logging
from datetime import datetime
from typing import Any, List, Optional

from bson import ObjectId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from gamification.core.config import Config

logger = logging.getLogger(__name__)


def create_client(settings: Config) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.MONGO_URL)


async def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Database dependency"""
    return request.app.state.db


# ==================== IDS & SERIALIZATION ====================

def is_object_id(value: Any) -> bool:
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for a valid id string, None otherwise"""
    if isinstance(value, ObjectId):
        return value
    if is_object_id(value):
        return ObjectId(value)
    return None


def serialize_mongo(value: Any) -> Any:
    """Render ObjectIds as strings and datetimes as ISO-8601, recursively"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize_mongo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_mongo(v) for v in value]
    return value


def serialize_many(docs: List[dict]) -> List[dict]:
    return [serialize_mongo(doc) for doc in docs]


# ==================== INDEXES ====================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Create database indexes
    Called during application startup
    """

    # Accounts
    await db.users.create_index("email", unique=True)
    await db.super_admins.create_index("email", unique=True)

    # Courses
    await db.courses.create_index("instructorId")
    await db.courses.create_index("learnerIds")
    await db.course_contents.create_index("courseId")

    # Assessments & submissions
    await db.assessments.create_index("courseId")
    await db.assessments.create_index("instructorId")
    await db.submissions.create_index([("assessmentId", 1), ("learnerId", 1)])
    await db.submissions.create_index("learnerId")

    # Groups & notifications
    await db.groups.create_index("createdBy")
    await db.notifications.create_index([("userId", 1), ("createdAt", -1)])

    logger.info("Database indexes created")
