"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.salons import router as salons_router

router = APIRouter()
router.include_router(profiles_router)
router.include_router(salons_router)
