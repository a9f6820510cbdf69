# spamshield/services/admin_dashboard.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from spamshield.services.report_aggregator import (
    PhoneReportSummary,
    display_id,
    is_blocked,
    is_spam_label,
)


def report_rows(
    summaries: Dict[Any, PhoneReportSummary],
    block_threshold: int = 5,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    rows = []
    for summary in summaries.values():
        if search and search not in (summary.phone_number or ""):
            continue
        rows.append(
            {
                "id": display_id(summary.phone_number),
                "phone_number": summary.phone_number,
                "report_count": summary.report_count,
                "reported_by": summary.distinct_reporter_count,
                "last_reported_at": summary.last_reported_at,
                "classification": summary.latest_classification,
                "blocked": is_blocked(summary, block_threshold),
            }
        )
    return rows


def dashboard_stats(
    summaries: Dict[Any, PhoneReportSummary],
    total_users: int,
    total_scans: Optional[int] = None,
) -> Dict[str, int]:
    values: Iterable[PhoneReportSummary] = summaries.values()
    if total_scans is None:
        total_scans = sum(s.report_count for s in values)
    return {
        "total_users": total_users,
        "total_scans": total_scans,
        "unique_numbers": len(summaries),
        "spam_detected": sum(1 for s in values if is_spam_label(s.latest_classification)),
    }
