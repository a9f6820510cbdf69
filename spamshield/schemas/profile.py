from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NotificationPrefs(BaseModel):
    email_alerts: bool = True
    sms_alerts: bool = False
    call_screening: bool = True
    new_features: bool = True


class NotificationPrefsUpdate(BaseModel):
    email_alerts: Optional[bool] = None
    sms_alerts: Optional[bool] = None
    call_screening: Optional[bool] = None
    new_features: Optional[bool] = None


class ProfileUpdate(BaseModel):
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    notifications: Optional[NotificationPrefsUpdate] = None


class ProfileOut(BaseModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = "user"
    avatar_url: Optional[str] = None
    notifications: NotificationPrefs
    created_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile) -> "ProfileOut":
        return cls(
            id=profile.id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            role=profile.role or "user",
            avatar_url=profile.avatar_url,
            notifications=NotificationPrefs(
                email_alerts=profile.email_alerts,
                sms_alerts=profile.sms_alerts,
                call_screening=profile.call_screening,
                new_features=profile.new_features,
            ),
            created_at=profile.created_at,
        )
