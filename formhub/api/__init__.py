"""API router definitions."""

from fastapi import APIRouter

from .logs import router as logs_router
from .routes import health_router
from .summaries import router as summaries_router
from .vendor_payments import router as vendor_payments_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(logs_router)
api_router.include_router(vendor_payments_router)
api_router.include_router(summaries_router)

__all__ = ["api_router"]
