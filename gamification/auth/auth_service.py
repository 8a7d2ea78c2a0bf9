import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from gamification.auth.auth_models import Caller, Role, SuperAdmin, SuperAdminCaller, User
from gamification.auth.auth_permissions import create_access_token, hash_password, verify_password
from gamification.auth.auth_schemas import LoginRequest, RegisterRequest
from gamification.core.config import Config
from gamification.core.errors import Conflict, NotFound, Unauthorized

logger = logging.getLogger(__name__)


def public_profile(account: dict) -> dict:
    """Account document without its password hash"""
    return {k: v for k, v in account.items() if k != "password"}

# ==================== REGISTRATION ====================

async def create_account(db: AsyncIOMotorDatabase, data: RegisterRequest, role: Role) -> dict:
    email = data.email.lower()
    if await db.users.find_one({"email": email}):
        raise Conflict("Email already registered")

    fields = data.model_dump(exclude={"email", "password"})
    user = User(email=email, password=hash_password(data.password), role=role, **fields)
    doc = user.to_document()

    try:
        result = await db.users.insert_one(doc)
    except DuplicateKeyError:
        raise Conflict("Email already registered")

    doc["_id"] = result.inserted_id
    logger.info("Registered %s account %s", role.value, doc["_id"])
    return doc


async def register_user(db: AsyncIOMotorDatabase, data: RegisterRequest) -> dict:
    account = await create_account(db, data, Role.USER)
    return {"user": public_profile(account), "token": create_access_token(account)}


async def create_admin(db: AsyncIOMotorDatabase, super_admin: SuperAdminCaller, data: RegisterRequest) -> dict:
    account = await create_account(db, data, Role.ADMIN)
    logger.info("Super admin %s created admin %s", super_admin.id, account["_id"])
    return public_profile(account)

# ==================== LOGIN ====================

async def login(db: AsyncIOMotorDatabase, data: LoginRequest) -> dict:
    account = await db.users.find_one({"email": data.email.lower()})
    if not account or not verify_password(data.password, account.get("password", "")):
        raise Unauthorized("Invalid credentials")
    return {"user": public_profile(account), "token": create_access_token(account)}


async def super_admin_login(db: AsyncIOMotorDatabase, data: LoginRequest) -> dict:
    account = await db.super_admins.find_one({"email": data.email.lower()})
    if not account or not verify_password(data.password, account.get("password", "")):
        raise Unauthorized("Invalid credentials")
    return {"superAdmin": public_profile(account), "token": create_access_token(account)}


async def get_profile(db: AsyncIOMotorDatabase, caller: Caller) -> dict:
    collection = db.super_admins if isinstance(caller, SuperAdminCaller) else db.users
    account = await collection.find_one({"_id": caller.id})
    if not account:
        raise NotFound("Account not found")
    return public_profile(account)

# ==================== STARTUP ====================

async def seed_super_admin(db: AsyncIOMotorDatabase, settings: Config) -> Optional[dict]:
    """Create the configured super admin if it does not exist yet"""
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        return None

    email = settings.SUPER_ADMIN_EMAIL.lower()
    existing = await db.super_admins.find_one({"email": email})
    if existing:
        return existing

    doc = SuperAdmin(
        email=email,
        password=hash_password(settings.SUPER_ADMIN_PASSWORD),
        username="superadmin",
    ).to_document()
    result = await db.super_admins.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Seeded super admin %s", email)
    return doc
