import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spamshield.api.deps import get_user_id
from spamshield.crud.profiles import get_or_create_profile
from spamshield.crud.scans import add_scan, list_scans
from spamshield.db.session import get_db
from spamshield.schemas.scan import ScanCreate, ScanOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=ScanOut, status_code=201)
def create_scan(
    payload: ScanCreate,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    try:
        get_or_create_profile(db, user_id)
        scan = add_scan(db, user_id, payload.phone_number, payload.result, payload.confidence)
    except IntegrityError:
        db.rollback()
        logger.exception("scan insert failed user_id=%s", user_id)
        raise HTTPException(status_code=409, detail="Scan could not be saved.")
    logger.info("scan logged user_id=%s result=%s", user_id, scan.result)
    return scan


@router.get("", response_model=list[ScanOut])
def my_scans(
    limit: int = Query(200, ge=1, le=1000),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    return list_scans(db, user_id=user_id, limit=limit)
