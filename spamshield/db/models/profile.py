from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spamshield.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    # the caller's user id, issued by the identity provider
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))

    # "user" | "admin"
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1024))

    # notification preferences
    email_alerts: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sms_alerts: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    call_screening: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    new_features: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    scans: Mapped[list["Scan"]] = relationship(
        "Scan",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
