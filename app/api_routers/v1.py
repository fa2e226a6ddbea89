from fastapi import APIRouter

from app.features.health.routes.health import router as health_router
from app.features.seo.routes.seo import router as seo_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(health_router)
api_router.include_router(seo_router)
