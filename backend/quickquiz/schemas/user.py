from __future__ import annotations

from pydantic import BaseModel


class UserPublic(BaseModel):
    id: int
    username: str | None = None
    email: str | None = None
