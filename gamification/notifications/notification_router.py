from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.auth.auth_models import UserCaller
from gamification.auth.auth_permissions import require_user
from gamification.core.database import get_db
from gamification.core.responses import success
from gamification.notifications import notification_service as service

router = APIRouter(prefix="/notification", tags=["Notifications"])


@router.get("")
async def list_my_notifications(
    limit: int = 100,
    user: UserCaller = Depends(require_user),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    notifications = await service.list_notifications(db, user.id, min(max(limit, 1), 500))
    return success(notifications, "Notifications fetched successfully")
