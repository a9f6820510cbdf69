from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class VerifyReq(BaseModel):
    phone_number: str = Field(min_length=1, max_length=64)

    @field_validator("phone_number")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("phone_number must not be blank")
        return v


class VerifyResp(BaseModel):
    phone_number: str
    status: Literal["safe", "suspicious", "spam"]
    confidence: float
    report_count: int
    spam_reports: int
    last_reported_at: Optional[datetime] = None


class FeatureScore(BaseModel):
    name: str
    value: float


class BotDetectionResp(BaseModel):
    is_bot: bool
    confidence: float
    duration_sec: float
    features: List[FeatureScore]
