from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickquiz.db.session import get_db
from quickquiz.models.user import CmsUser
from quickquiz.schemas.user import UserPublic

router = APIRouter(tags=["users"])

log = logging.getLogger(__name__)


@router.get("/users", response_model=list[UserPublic])
def list_users(db: Session = Depends(get_db)):
    try:
        rows = db.execute(select(CmsUser.id, CmsUser.username, CmsUser.email).order_by(CmsUser.id)).all()
    except SQLAlchemyError as e:
        log.error("users query failed: %s", e)
        raise HTTPException(status_code=500, detail="failed to fetch users") from e

    users: list[UserPublic] = []
    for row in rows:
        try:
            users.append(UserPublic(id=row.id, username=row.username, email=row.email))
        except ValidationError as e:
            log.warning("skipping unreadable users row id=%s: %s", row.id, e)
            continue
    return users
