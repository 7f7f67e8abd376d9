"""
API v1 endpoints for Lingxi2API.

This package contains the v1 API endpoints (chat completions).
"""

from __future__ import annotations

from fastapi import APIRouter

from . import chat

# Create main v1 router
router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(chat.router)

__all__ = ["router"]
