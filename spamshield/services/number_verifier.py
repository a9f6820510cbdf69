# spamshield/services/number_verifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal

from spamshield.db.models.scan import SCAN_SOURCE_LOOKUP
from spamshield.services.report_aggregator import aggregate, is_spam_label, record_field

Status = Literal["safe", "suspicious", "spam"]

# label written to the scan log for each status
RESULT_LABELS = {
    "safe": "Safe",
    "suspicious": "Suspicious",
    "spam": "Spam",
}


@dataclass
class Verification:
    phone_number: str
    status: Status
    confidence: float
    report_count: int = 0
    reporter_count: int = 0
    spam_reports: int = 0
    last_reported_at: Any = None

    @property
    def result_label(self) -> str:
        return RESULT_LABELS[self.status]


def verify_number(phone_number: str, records: Iterable[Any], block_threshold: int = 5) -> Verification:
    """
    Classify a number from the community scan log.

    records: scans already logged for this exact phone_number. Logged lookups
    (source "lookup") are not reports and are skipped.
      - no reports -> safe (confidence 0.5)
      - more than block_threshold distinct reporters, at least half of the reports spam -> spam
      - any spam report -> suspicious
      - otherwise -> safe
    confidence = 0.5 + 0.5 * evidence * agreement, where evidence grows with
    the number of reports and agreement is the share of reports backing the status.
    """
    records = [
        r for r in records
        if record_field(r, "phone_number") == phone_number
        and record_field(r, "source") != SCAN_SOURCE_LOOKUP
    ]
    summary = aggregate(records).get(phone_number)

    if summary is None:
        return Verification(phone_number=phone_number, status="safe", confidence=0.5)

    spam_votes = sum(1 for r in records if is_spam_label(record_field(r, "result")))
    spam_share = spam_votes / summary.report_count

    # one user repeating a report does not block a number
    if summary.distinct_reporter_count > block_threshold and spam_share >= 0.5:
        status: Status = "spam"
    elif spam_votes > 0:
        status = "suspicious"
    else:
        status = "safe"

    agreement = (1.0 - spam_share) if status == "safe" else spam_share
    evidence = summary.report_count / (summary.report_count + max(block_threshold, 1))
    confidence = round(0.5 + 0.5 * evidence * agreement, 4)

    return Verification(
        phone_number=phone_number,
        status=status,
        confidence=confidence,
        report_count=summary.report_count,
        reporter_count=summary.distinct_reporter_count,
        spam_reports=spam_votes,
        last_reported_at=summary.last_reported_at,
    )
