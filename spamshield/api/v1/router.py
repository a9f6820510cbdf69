from fastapi import APIRouter
from spamshield.api.v1.endpoints import admin, bot_detection, profile, scans, verify

# mounted under /api/v1 in main.py, no version prefix here
router = APIRouter()

router.include_router(scans.router, prefix="/scans", tags=["scans"])
router.include_router(verify.router, prefix="/verify", tags=["verify"])
router.include_router(bot_detection.router, prefix="/bot-detection", tags=["bot-detection"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
