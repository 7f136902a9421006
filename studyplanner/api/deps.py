from __future__ import annotations

import uuid

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from studyplanner.core.response import err
from studyplanner.db.session import get_db
from studyplanner.models.user import User
from studyplanner.repositories import users_repo


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> User:
    """Resolve the caller from the identity header set by the auth gateway."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail=err(request, "unauthorized", "X-User-Id header is required"))
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail=err(request, "unauthorized", "Malformed X-User-Id header"))

    user = await users_repo.get_by_id(db, user_id=user_id)
    if not user:
        raise HTTPException(status_code=401, detail=err(request, "unauthorized", "Unknown user"))
    return user
