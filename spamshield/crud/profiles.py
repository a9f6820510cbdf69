from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from spamshield.db.models.profile import Profile
from spamshield.schemas.profile import ProfileUpdate


def get_profile(db: Session, user_id: str) -> Profile | None:
    return db.get(Profile, user_id)


# unsaved profile returned to callers that never saved one
def default_profile(user_id: str) -> Profile:
    return Profile(
        id=user_id,
        first_name="",
        last_name="",
        role="user",
        avatar_url=None,
        email_alerts=True,
        sms_alerts=False,
        call_screening=True,
        new_features=True,
    )


def get_or_create_profile(db: Session, user_id: str) -> Profile:
    profile = db.get(Profile, user_id)
    if profile:
        return profile

    profile = default_profile(user_id)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def upsert_profile(db: Session, user_id: str, payload: ProfileUpdate) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        profile = default_profile(user_id)
        db.add(profile)

    for name in ("email", "first_name", "last_name", "avatar_url"):
        value = getattr(payload, name)
        if value is not None:
            setattr(profile, name, value)

    if payload.notifications is not None:
        for name, value in payload.notifications.model_dump(exclude_none=True).items():
            setattr(profile, name, value)

    db.commit()
    db.refresh(profile)
    return profile


def list_profiles(db: Session, search: str | None = None) -> list[Profile]:
    stmt = select(Profile)
    if search:
        term = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Profile.first_name).like(term),
                func.lower(Profile.last_name).like(term),
                func.lower(Profile.email).like(term),
            )
        )
    stmt = stmt.order_by(Profile.created_at.desc(), Profile.id)
    return list(db.execute(stmt).scalars().all())


def count_profiles(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Profile)).scalar_one()
