"""
Gamification API - Main Application
Courses, assessments, grading, groups, notifications and payments
"""

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorDatabase

from gamification.assessments.assessment_router import router as assessment_router
from gamification.auth.auth_router import router as auth_router, super_admin_router
from gamification.auth.auth_service import seed_super_admin
from gamification.core.config import config
from gamification.core.database import create_client, create_indexes, get_db
from gamification.core.responses import register_error_handlers
from gamification.courses.course_router import router as course_router
from gamification.groups.group_router import router as group_router
from gamification.media.uploader import MediaUploader
from gamification.notifications.notification_router import router as notification_router
from gamification.payments.payment_router import router as payment_router
from gamification.payments.payment_service import PaymentService

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Gamification API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    config.validate()

    app.state.mongo_client = create_client(config)
    app.state.db = app.state.mongo_client[config.MONGO_DB_NAME]
    app.state.uploader = MediaUploader.from_config(config)
    app.state.payment_service = PaymentService.from_config(config)

    await create_indexes(app.state.db)
    await seed_super_admin(app.state.db, config)
    logger.info("Gamification API started (%s)", config.ENVIRONMENT)


@app.on_event("shutdown")
async def shutdown_event():
    await app.state.uploader.close()
    await app.state.payment_service.close()
    app.state.mongo_client.close()


# ==================== ROUTER REGISTRATION ====================
app.include_router(auth_router)
app.include_router(super_admin_router)
app.include_router(course_router)
app.include_router(assessment_router)
app.include_router(group_router)
app.include_router(notification_router)
app.include_router(payment_router)
# ============================================================


@app.get("/")
async def root():
    return {"success": True, "message": "Welcome to Gamification API V1"}


@app.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    await db.command("ping")
    return {"success": True, "message": "OK", "data": {"database": "UP"}}
