"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.listings import router as listings_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.sellers import router as sellers_router
from api.v1.routes.slugs import router as slugs_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(slugs_router)
router.include_router(listings_router)
router.include_router(sellers_router)
