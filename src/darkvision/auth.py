"""Optional HTTP Basic protection for the administrative endpoints.

Authentication is configured through ``ADMIN_USERNAME`` / ``ADMIN_PASSWORD``.
When no username is set, uploads, resets and deletes are open to all users.
"""

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from darkvision.config import Settings
from darkvision.dependencies import get_settings

logger = logging.getLogger(__name__)

_basic = HTTPBasic(realm="Administrative Area", auto_error=False)


def require_admin(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    settings: Settings = Depends(get_settings),
) -> None:
    if not settings.auth_enabled:
        logger.debug("No authentication configured")
        return

    valid = credentials is not None and (
        secrets.compare_digest(
            credentials.username.encode(), (settings.admin_username or "").encode()
        )
        & secrets.compare_digest(
            credentials.password.encode(), (settings.admin_password or "").encode()
        )
    )
    if not valid:
        logger.warning("Rejected unauthenticated call to an admin endpoint")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": 'Basic realm="Administrative Area"'},
        )
