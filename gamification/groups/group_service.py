import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from gamification.auth.auth_models import AdminCaller
from gamification.core.database import to_object_id
from gamification.core.documents import utcnow
from gamification.core.errors import Forbidden, NotFound
from gamification.groups.group_schemas import Group, GroupCreate, GroupUpdate

logger = logging.getLogger(__name__)


async def create_group(db: AsyncIOMotorDatabase, admin: AdminCaller, data: GroupCreate) -> dict:
    group = Group(
        name=data.name,
        member_ids=[to_object_id(member_id) for member_id in data.member_ids],
        created_by=admin.id,
    )
    doc = group.to_document()
    result = await db.groups.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Admin %s created group %s", admin.id, doc["_id"])
    return doc


async def edit_group(db: AsyncIOMotorDatabase, admin: AdminCaller, group_id: str, data: GroupUpdate) -> dict:
    """
    Update a group's name and/or members

    Raises:
        404: Group not found
        403: Caller did not create the group
    """
    group = await db.groups.find_one({"_id": to_object_id(group_id)})
    if not group:
        raise NotFound("Group not found")

    if group.get("createdBy") != admin.id:
        raise Forbidden("Not authorized to edit this group")

    updates = {}
    if data.name is not None:
        updates["name"] = data.name
    if data.member_ids is not None:
        updates["memberIds"] = [to_object_id(member_id) for member_id in data.member_ids]

    if not updates:
        return group

    updates["updatedAt"] = utcnow()
    updated = await db.groups.find_one_and_update(
        {"_id": group["_id"]},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    logger.info("Admin %s edited group %s", admin.id, group["_id"])
    return updated
