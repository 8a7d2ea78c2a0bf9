from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt
from motor.motor_asyncio import AsyncIOMotorDatabase
from passlib.context import CryptContext

from gamification.auth.auth_models import (
    AdminCaller, Caller, Role, SuperAdminCaller, UserCaller, caller_from_account
)
from gamification.core.config import config
from gamification.core.database import get_db, to_object_id
from gamification.core.documents import utcnow
from gamification.core.errors import Forbidden, Unauthorized

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(password, hashed)

# ==================== TOKENS ====================

def create_access_token(account: dict) -> str:
    payload = {
        "id": str(account["_id"]),
        "email": account["email"],
        "username": account.get("username"),
        "role": account.get("role", Role.USER.value),
        "exp": utcnow() + timedelta(hours=config.JWT_EXPIRE_HOURS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or Expired Token")

# ==================== DEPENDENCIES ====================

async def authenticate(
    authorization: Optional[str] = Header(None),
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> Caller:
    """
    Resolve the caller from a bearer token

    Raises:
        401: missing/invalid token, or the account no longer exists
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Unauthorized")

    payload = decode_access_token(authorization.split(" ", 1)[1])

    account_id = to_object_id(payload.get("id"))
    if account_id is None:
        raise Unauthorized("Invalid token: missing account id")

    if payload.get("role") == Role.SUPER_ADMIN.value:
        account = await db.super_admins.find_one({"_id": account_id})
    else:
        account = await db.users.find_one({"_id": account_id})

    if not account:
        raise Unauthorized("Account not found")

    return caller_from_account(account)


def authorize(*caller_types):
    """Dependency factory: only callers of the given variants get through"""
    async def dependency(caller: Caller = Depends(authenticate)) -> Caller:
        if not isinstance(caller, caller_types):
            raise Forbidden("Access denied")
        return caller
    return dependency


require_admin = authorize(AdminCaller)
require_user = authorize(UserCaller)
require_super_admin = authorize(SuperAdminCaller)
