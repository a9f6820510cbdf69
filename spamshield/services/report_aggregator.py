# spamshield/services/report_aggregator.py
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Literal, Optional, Set

ClassificationPolicy = Literal["first_seen", "latest"]

_NON_DIGIT = re.compile(r"\D")
# time of day, fraction and offset at the end of an ISO-8601 string
_ISO_TAIL = re.compile(
    r"(?P<time>\d{2}:\d{2}(?::\d{2})?)(?:\.(?P<frac>\d+))?(?P<tz>[+-]\d{2}(?::?\d{2})?)?$"
)


@dataclass
class PhoneReportSummary:
    phone_number: Any
    report_count: int = 0
    distinct_reporter_count: int = 0
    last_reported_at: Any = None
    latest_classification: Optional[str] = None

    # working state of a single aggregation pass, not part of equality
    _reporters: Set[Any] = field(default_factory=set, repr=False, compare=False)
    _last_ts: Optional[datetime] = field(default=None, repr=False, compare=False)
    _classified: bool = field(default=False, repr=False, compare=False)


def record_field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _normalize_iso(raw: str) -> str:
    # Postgres style "...30.12345+00" -> "...30.123450+00:00", which fromisoformat reads on 3.10 too
    m = _ISO_TAIL.search(raw)
    if not m:
        return raw
    out = m.group("time")
    if m.group("frac"):
        out += "." + m.group("frac")[:6].ljust(6, "0")
    tz = m.group("tz")
    if tz:
        digits = tz[1:].replace(":", "")
        out += tz[0] + digits[:2] + ":" + (digits[2:] or "00")
    return raw[: m.start()] + out


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    datetime / ISO-8601 string -> aware datetime (naive values are taken as UTC).
    Anything else, including unparseable strings, -> None.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(_normalize_iso(raw))
        except ValueError:
            return None
    else:
        return None

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def aggregate(
    records: Iterable[Any],
    classification_policy: ClassificationPolicy = "first_seen",
) -> Dict[Any, PhoneReportSummary]:
    """
    Group scan records by exact phone_number in one pass.

    Records may be ORM rows, pydantic models or plain mappings exposing
    phone_number / user_id / result / created_at. Nothing is validated:
    a missing phone number is just another key, a malformed created_at is
    ignored when picking last_reported_at.

    classification_policy:
      - "first_seen": the first record's result wins and is never replaced
      - "latest": the result of the record that set last_reported_at
    """
    if classification_policy not in ("first_seen", "latest"):
        raise ValueError(f"unknown classification policy: {classification_policy!r}")

    summaries: Dict[Any, PhoneReportSummary] = {}

    for record in records:
        key = record_field(record, "phone_number")
        summary = summaries.get(key)
        if summary is None:
            summary = PhoneReportSummary(phone_number=key)
            summaries[key] = summary

        summary.report_count += 1
        summary._reporters.add(record_field(record, "user_id"))

        result = record_field(record, "result")
        if not summary._classified:
            summary.latest_classification = result
            summary._classified = True

        created_at = record_field(record, "created_at")
        ts = parse_timestamp(created_at)
        if ts is not None and (summary._last_ts is None or ts > summary._last_ts):
            summary._last_ts = ts
            summary.last_reported_at = created_at
            if classification_policy == "latest":
                summary.latest_classification = result

    for summary in summaries.values():
        summary.distinct_reporter_count = len(summary._reporters)

    return summaries


# ----------------------------
# admin view presentation rules
# ----------------------------
def display_id(phone_number: Any) -> str:
    return _NON_DIGIT.sub("", "" if phone_number is None else str(phone_number))


def is_blocked(summary: PhoneReportSummary, threshold: int = 5) -> bool:
    return summary.report_count > threshold


def is_spam_label(label: Optional[str]) -> bool:
    return bool(label) and "spam" in label.lower()
