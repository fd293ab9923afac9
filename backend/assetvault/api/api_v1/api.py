"""
Main API router that includes all endpoint routers
"""

from fastapi import APIRouter

from assetvault.api.api_v1.endpoints import assets, showrooms, notifications, clients

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(assets.router, prefix="/assets", tags=["assets"])
api_router.include_router(showrooms.router, prefix="/showrooms", tags=["showrooms"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
