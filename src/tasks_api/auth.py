from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status

from .settings import get_settings


# PUBLIC_INTERFACE
def get_current_user_id(request: Request) -> str:
    """
    Resolve the caller's user id for the current request.

    Token verification happens upstream; the gateway forwards the verified
    identity in the header named by settings.user_id_header (X-User-Id by
    default). The header value is trusted as-is.

    Raises:
        HTTPException(401) if the header is missing or blank.
    """
    header = get_settings().user_id_header
    user_id: Optional[str] = request.headers.get(header)
    if user_id is None or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id.strip()
