"""API v1 router composition."""

from fastapi import APIRouter

from app.api.v1.endpoints import admin, auth, delivery, schedule

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(delivery.router, tags=["delivery"])
api_router.include_router(schedule.router, tags=["schedule"])
