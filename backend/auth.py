"""
Authentication for the appointments API.

Users are a static allowlist in config/auth.json:

    {"users": [{"username": "admin", "password": "...", "role": "admin"}]}

Credentials are read from `username`/`password` query parameters first,
then from an HTTP Basic Authorization header.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Query
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from backend.dependencies import get_config
from jeeves.core.config import Config


logger = logging.getLogger(__name__)

# auto_error=False so query-parameter credentials still work without a header
basic_scheme = HTTPBasic(auto_error=False)

AUTH_REQUIRED_MESSAGE = (
    "Authentication required. Provide username and password as URL "
    "parameters or Basic Auth header"
)


@dataclass
class AuthenticatedUser:
    username: str
    role: str


def require_user(
    username: Optional[str] = Query(None, include_in_schema=False),
    password: Optional[str] = Query(None, include_in_schema=False),
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
    config: Config = Depends(get_config),
) -> AuthenticatedUser:
    """
    Resolve the calling user or fail the request.

    Raises:
        HTTPException 401: credentials missing or not in the allowlist
        HTTPException 500: no users configured
    """
    if not (username and password) and credentials is not None:
        username, password = credentials.username, credentials.password

    if not username or not password:
        raise HTTPException(
            status_code=401,
            detail=AUTH_REQUIRED_MESSAGE,
            headers={"WWW-Authenticate": "Basic"},
        )

    users = config.get_users()
    if not users:
        logger.error("No users configured for authentication")
        raise HTTPException(status_code=500, detail="Authentication configuration error")

    for user in users:
        if user.get("username") == username and user.get("password") == password:
            return AuthenticatedUser(username=user["username"], role=user.get("role", "user"))

    raise HTTPException(
        status_code=401,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Basic"},
    )

