"""HTTP routes."""

from fastapi import APIRouter

from stagefront.api.v1 import auth, health, listings, profile

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(profile.router, tags=["profile"])
router.include_router(listings.router, tags=["listings"])
