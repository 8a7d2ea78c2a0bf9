from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.auth.auth_models import AdminCaller
from gamification.auth.auth_permissions import require_admin
from gamification.core.database import get_db
from gamification.core.responses import success
from gamification.core.validation import ValidatedRequest, validate_body
from gamification.groups import group_service as service
from gamification.groups.group_schemas import GroupCreate, validate_edit_group

router = APIRouter(prefix="/group", tags=["Groups"])


@router.post("/create")
async def create_group(
    admin: AdminCaller = Depends(require_admin),
    data: GroupCreate = Depends(validate_body(GroupCreate)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    group = await service.create_group(db, admin, data)
    return success(group, "Group created successfully", 201)


@router.put("/edit/{groupId}")
async def edit_group(
    groupId: str,
    admin: AdminCaller = Depends(require_admin),
    validated: ValidatedRequest = Depends(validate_edit_group),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    group = await service.edit_group(db, admin, groupId, validated.payload)
    return success(group, "Group updated successfully")
