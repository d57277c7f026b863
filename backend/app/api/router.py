from fastapi import APIRouter

from app.api.v1 import admin, calculations, health
from app.api.websocket import calculator as ws_calculator

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(calculations.router, prefix="/calculations", tags=["calculations"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(ws_calculator.router, tags=["websocket"])
