import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spamshield.api.deps import get_optional_user_id
from spamshield.core.config import settings
from spamshield.crud.profiles import get_or_create_profile
from spamshield.crud.scans import add_scan, list_scans
from spamshield.db.models.scan import SCAN_SOURCE_LOOKUP, SCAN_SOURCE_REPORT
from spamshield.db.session import get_db
from spamshield.schemas.detection import VerifyReq, VerifyResp
from spamshield.services.number_verifier import verify_number

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=VerifyResp)
def verify(
    req: VerifyReq,
    user_id: str | None = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    # only user reports count, earlier lookups of this number do not
    records = list_scans(db, phone_number=req.phone_number, source=SCAN_SOURCE_REPORT)
    verification = verify_number(
        req.phone_number,
        records,
        block_threshold=settings.BLOCK_REPORT_THRESHOLD,
    )

    # anonymous checks are not logged
    if user_id is not None:
        try:
            get_or_create_profile(db, user_id)
            add_scan(
                db,
                user_id,
                req.phone_number,
                verification.result_label,
                confidence=verification.confidence,
                source=SCAN_SOURCE_LOOKUP,
            )
        except IntegrityError:
            db.rollback()
            logger.exception("verify lookup insert failed user_id=%s", user_id)
            raise HTTPException(status_code=409, detail="Scan could not be saved.")

    logger.info(
        "verify status=%s reports=%d reporters=%d confidence=%.4f",
        verification.status, verification.report_count,
        verification.reporter_count, verification.confidence,
    )

    return VerifyResp(
        phone_number=verification.phone_number,
        status=verification.status,
        confidence=verification.confidence,
        report_count=verification.report_count,
        spam_reports=verification.spam_reports,
        last_reported_at=verification.last_reported_at,
    )
