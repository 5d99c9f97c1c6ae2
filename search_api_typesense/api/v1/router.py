"""
Main router for API v1
"""

from fastapi import APIRouter

from .endpoints import status

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(status.router)
