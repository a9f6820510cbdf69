from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


# one logged phone-number check as the aggregator sees it
class ScanRecord(BaseModel):
    phone_number: str
    user_id: Optional[str] = None
    result: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None


class ScanCreate(BaseModel):
    phone_number: str = Field(min_length=1, max_length=64)
    result: str = Field(min_length=1, max_length=50)
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class ScanOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    phone_number: str
    result: str
    confidence: Optional[float] = None
    source: str = "report"
    created_at: datetime

    class Config:
        from_attributes = True
