from fastapi import APIRouter
from app.api.v1.endpoints import admin, analytics, businesses

api_router = APIRouter()

api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
