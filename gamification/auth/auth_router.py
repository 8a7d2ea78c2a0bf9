from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.auth import auth_service as service
from gamification.auth.auth_models import Caller, SuperAdminCaller
from gamification.auth.auth_permissions import authenticate, require_super_admin
from gamification.auth.auth_schemas import CreateAdminRequest, LoginRequest, RegisterRequest
from gamification.core.database import get_db
from gamification.core.responses import success
from gamification.core.validation import validate_body

router = APIRouter(prefix="/auth", tags=["Auth"])
super_admin_router = APIRouter(prefix="/super-admin", tags=["Super Admin"])

# ==================== USERS ====================

@router.post("/register")
async def register(
    data: RegisterRequest = Depends(validate_body(RegisterRequest)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    result = await service.register_user(db, data)
    return success(result, "Registration successful", 201)


@router.post("/login")
async def login(
    data: LoginRequest = Depends(validate_body(LoginRequest)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    result = await service.login(db, data)
    return success(result, "Login successful")


@router.get("/me")
async def me(
    caller: Caller = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    profile = await service.get_profile(db, caller)
    return success(profile, "Profile fetched successfully")

# ==================== SUPER ADMIN ====================

@super_admin_router.post("/login")
async def super_admin_login(
    data: LoginRequest = Depends(validate_body(LoginRequest)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    result = await service.super_admin_login(db, data)
    return success(result, "Login successful")


@super_admin_router.post("/admins")
async def create_admin(
    super_admin: SuperAdminCaller = Depends(require_super_admin),
    data: CreateAdminRequest = Depends(validate_body(CreateAdminRequest)),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    admin = await service.create_admin(db, super_admin, data)
    return success(admin, "Admin created successfully", 201)
