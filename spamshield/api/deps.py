import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from spamshield.crud.profiles import get_profile
from spamshield.db.models.profile import Profile
from spamshield.db.session import get_db

logger = logging.getLogger(__name__)


# caller identity is passed explicitly on every request
def get_optional_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def get_user_id(user_id: str | None = Depends(get_optional_user_id)) -> str:
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id


def require_admin(
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
) -> Profile:
    profile = get_profile(db, user_id)
    if profile is None or profile.role != "admin":
        logger.warning("admin access denied for user_id=%s", user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access the admin area.",
        )
    return profile
