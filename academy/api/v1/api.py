# academy/api/v1/api.py
from fastapi import APIRouter

from academy.api.v1.endpoints import admin, auth, health, reservations, schedules, uploads

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(schedules.router)
api_router.include_router(reservations.router)
api_router.include_router(uploads.router)
api_router.include_router(admin.router)
api_router.include_router(health.router)
