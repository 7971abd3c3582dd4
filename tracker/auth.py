"""
Request gate: resolves the caller's identity from the session.

The login flow itself lives outside this service; it is expected to store
the signed-in profile under ``session["user"]``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from tracker.errors import Unauthenticated


def current_user(request: Request) -> Optional[dict]:
    """Return the session's user profile, or None when nobody is signed in."""
    user = request.session.get("user")
    return user if isinstance(user, dict) else None


def authorize(user: Optional[dict]) -> str:
    if user is None:
        raise Unauthenticated("not_authenticated")
    return user.get("email") or ""


def require_identity(user: Optional[dict] = Depends(current_user)) -> str:
    return authorize(user)
