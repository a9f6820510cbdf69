import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spamshield.db.base import Base

# where a scan row came from: a user report or a logged verify lookup
SCAN_SOURCE_REPORT = "report"
SCAN_SOURCE_LOOKUP = "lookup"


# one logged phone-number check
class Scan(Base):
    __tablename__ = "scans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )

    # stored exactly as the caller typed it, no normalization
    phone_number: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    result: Mapped[str] = mapped_column(String(50), nullable=False)
    confidence: Mapped[float | None] = mapped_column(Float)
    source: Mapped[str] = mapped_column(String(16), default=SCAN_SOURCE_REPORT, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True, nullable=False
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="scans")
