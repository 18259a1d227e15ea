from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database.db import get_db
from models.profiles import Profile

# 인증은 상위 게이트웨이 담당, 여기서는 전달된 사용자 ID로 역할만 확인
UserIdHeader = Annotated[Optional[str], Header(alias="X-User-Id")]


def get_current_profile(x_user_id: UserIdHeader = None, db: Session = Depends(get_db)) -> Profile:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    try:
        user_id = int(x_user_id.strip())
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")

    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return profile


def require_role(*roles: str):
    """허용 역할 중 하나가 아니면 403"""
    def _checker(profile: Profile = Depends(get_current_profile)) -> Profile:
        if profile.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return profile
    return _checker
