import logging
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import Field

from gamification.core.documents import Document

logger = logging.getLogger(__name__)


class Notification(Document):
    user_id: ObjectId = Field(..., alias="userId")
    course_id: Optional[ObjectId] = Field(None, alias="courseId")
    message: str
    read: bool = False


async def create_notification(
    db: AsyncIOMotorDatabase,
    user_id: ObjectId,
    course_id: Optional[ObjectId],
    message: str
) -> dict:
    doc = Notification(user_id=user_id, course_id=course_id, message=message).to_document()
    result = await db.notifications.insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


async def list_notifications(db: AsyncIOMotorDatabase, user_id: ObjectId, limit: int = 100) -> List[dict]:
    """Caller's notifications, newest first"""
    cursor = db.notifications.find({"userId": user_id}).sort("createdAt", -1).limit(limit)
    return await cursor.to_list(length=limit)
