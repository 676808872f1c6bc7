from fastapi import APIRouter

from app.api.v1.endpoints import admin, cars, owners

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(owners.router, prefix="/owners", tags=["Owners"])
api_router.include_router(cars.router, prefix="/cars", tags=["Cars"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

__all__ = ["api_router"]
