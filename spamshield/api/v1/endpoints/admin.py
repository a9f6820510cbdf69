from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from spamshield.api.deps import require_admin
from spamshield.core.config import settings
from spamshield.crud.profiles import get_profile, list_profiles, count_profiles
from spamshield.crud.scans import count_scans, list_scans
from spamshield.db.session import get_db
from spamshield.schemas.admin import DashboardStats, PhoneReportList, PhoneReportRow
from spamshield.schemas.profile import ProfileOut
from spamshield.schemas.scan import ScanOut, ScanRecord
from spamshield.services.admin_dashboard import dashboard_stats, report_rows
from spamshield.services.report_aggregator import aggregate

# every admin route requires an admin profile
router = APIRouter(dependencies=[Depends(require_admin)])


def _summaries(db: Session):
    # newest scans first, so under first_seen the shown classification is the most recent one
    return aggregate(list_scans(db), classification_policy=settings.REPORT_CLASSIFICATION_POLICY)


@router.get("/reports", response_model=PhoneReportList)
def reported_numbers(search: str | None = None, db: Session = Depends(get_db)):
    rows = report_rows(
        _summaries(db),
        block_threshold=settings.BLOCK_REPORT_THRESHOLD,
        search=search,
    )
    return PhoneReportList(total=len(rows), results=[PhoneReportRow(**r) for r in rows])


@router.post("/reports/aggregate", response_model=PhoneReportList)
def aggregate_records(
    records: list[ScanRecord],
    search: str | None = None,
):
    # ad-hoc aggregation of an exported scan log, nothing is stored
    summaries = aggregate(records, classification_policy=settings.REPORT_CLASSIFICATION_POLICY)
    rows = report_rows(summaries, block_threshold=settings.BLOCK_REPORT_THRESHOLD, search=search)
    return PhoneReportList(total=len(rows), results=[PhoneReportRow(**r) for r in rows])


@router.get("/stats", response_model=DashboardStats)
def stats(db: Session = Depends(get_db)):
    return DashboardStats(
        **dashboard_stats(_summaries(db), total_users=count_profiles(db), total_scans=count_scans(db))
    )


@router.get("/users", response_model=list[ProfileOut])
def users(search: str | None = None, db: Session = Depends(get_db)):
    return [ProfileOut.from_profile(p) for p in list_profiles(db, search=search)]


@router.get("/users/{user_id}/scans", response_model=list[ScanOut])
def user_scans(
    user_id: str,
    limit: int = Query(200, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    if not get_profile(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return list_scans(db, user_id=user_id, limit=limit)
