"""API v1 routes"""
from fastapi import APIRouter
from .routes import health

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router, tags=["health"])
