import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spamshield.api.deps import get_user_id
from spamshield.crud.profiles import get_profile, default_profile, upsert_profile
from spamshield.crud.scans import list_scans
from spamshield.db.session import get_db
from spamshield.schemas.profile import ProfileOut, ProfileUpdate
from spamshield.schemas.scan import ScanOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ProfileOut)
def read_profile(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    profile = get_profile(db, user_id) or default_profile(user_id)
    return ProfileOut.from_profile(profile)


@router.put("", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    try:
        profile = upsert_profile(db, user_id, payload)
    except IntegrityError:
        db.rollback()
        logger.exception("profile upsert failed user_id=%s", user_id)
        raise HTTPException(status_code=409, detail="Profile could not be saved.")
    return ProfileOut.from_profile(profile)


@router.get("/scans", response_model=list[ScanOut])
def profile_scans(
    limit: int = Query(200, ge=1, le=1000),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return list_scans(db, user_id=user_id, limit=limit)
