from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel


# reported numbers table row
class PhoneReportRow(BaseModel):
    id: str
    phone_number: Optional[str] = None
    report_count: int
    reported_by: int
    # as supplied by the scan log
    last_reported_at: Optional[Union[datetime, str]] = None
    classification: Optional[str] = None
    blocked: bool


class PhoneReportList(BaseModel):
    total: int
    results: List[PhoneReportRow]


class DashboardStats(BaseModel):
    total_users: int
    total_scans: int
    unique_numbers: int
    spam_detected: int
