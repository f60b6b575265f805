"""
Authentication dependencies for the sandbox endpoints.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from ekraf_admin.sandbox.state import SandboxState
from ekraf_admin.users.schemas import User

logger = logging.getLogger(__name__)


def get_state(request: Request) -> SandboxState:
    return request.app.state.sandbox


async def get_current_user(
    authorization: Optional[str] = Header(None),
    state: SandboxState = Depends(get_state),
) -> User:
    """
    Resolve the user behind the bearer token.

    Raises:
        HTTPException: 401 if the header is missing or the token is unknown
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header is required")

    token = authorization.replace("Bearer ", "", 1).strip()
    user = state.user_for_token(token)
    if user is None:
        logger.debug("Rejected unknown token")
        raise HTTPException(status_code=401, detail="Invalid authentication token")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.level_name not in ("admin", "superadmin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
