from __future__ import annotations

from fastapi import Header, HTTPException

from app.domain.entities.current_user import CurrentUser

USER_ROLES = {"customer", "owner"}


def get_current_user(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> CurrentUser:
    """Identity is resolved upstream; this adapter only reads the forwarded headers."""
    user_id = (x_user_id or "").strip()
    role = (x_user_role or "").strip().lower()
    if not user_id or role not in USER_ROLES:
        raise HTTPException(status_code=401, detail="Missing or invalid user identity")
    return CurrentUser(id=user_id, role=role)


def get_current_owner(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> CurrentUser:
    user = get_current_user(x_user_id, x_user_role)
    if not user.is_owner:
        raise HTTPException(status_code=403, detail="Owner role required")
    return user


def get_current_customer(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
) -> CurrentUser:
    user = get_current_user(x_user_id, x_user_role)
    if user.is_owner:
        raise HTTPException(status_code=403, detail="Customer role required")
    return user
