from sqlalchemy import select, func
from sqlalchemy.orm import Session

from spamshield.db.models.scan import Scan, SCAN_SOURCE_REPORT


def add_scan(
    db: Session,
    user_id: str | None,
    phone_number: str,
    result: str,
    confidence: float | None = None,
    source: str = SCAN_SOURCE_REPORT,
) -> Scan:
    scan = Scan(
        user_id=user_id,
        phone_number=phone_number,
        result=result,
        confidence=confidence,
        source=source,
    )
    db.add(scan)
    db.commit()
    db.refresh(scan)
    return scan


# newest first
def list_scans(
    db: Session,
    user_id: str | None = None,
    phone_number: str | None = None,
    source: str | None = None,
    limit: int | None = None,
) -> list[Scan]:
    stmt = select(Scan)
    if user_id is not None:
        stmt = stmt.where(Scan.user_id == user_id)
    if phone_number is not None:
        stmt = stmt.where(Scan.phone_number == phone_number)
    if source is not None:
        stmt = stmt.where(Scan.source == source)
    stmt = stmt.order_by(Scan.created_at.desc(), Scan.id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def count_scans(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Scan)).scalar_one()
