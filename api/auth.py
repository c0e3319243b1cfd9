"""
Token authentication for the FastAPI API.

The gate itself is ``decode_access_token``: a pure function from a token to
the username it was issued for. ``get_current_username`` wires it to the
``Authorization: Bearer`` header.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog.errors import AuthError
from utilities.config import AppConfig
from utilities.logger import AuditLogger

logger = structlog.get_logger(__name__)
audit = AuditLogger("api.auth")

# Security scheme; missing credentials are reported by get_current_username
security = HTTPBearer(auto_error=False)


def create_access_token(username: str, config: AppConfig, now: Optional[datetime] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        username: Username carried in the token
        config: Settings holding the signing key, algorithm and lifetime
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=config.access_token_expire_minutes),
    }
    token = jwt.encode(payload, config.secret_key, algorithm=config.algorithm)
    logger.debug("Access token issued", username=username, expires_at=payload["exp"].isoformat())
    return token


def decode_access_token(token: str, config: AppConfig) -> str:
    """
    Verify an access token and return its username.

    Args:
        token: Encoded JWT
        config: Settings holding the signing key and algorithm

    Returns:
        Username claim

    Raises:
        AuthError: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(
            token,
            config.secret_key,
            algorithms=[config.algorithm],
            options={"require": ["exp", "username"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise AuthError("Invalid token")
    return username


def get_app_config(request: Request) -> AppConfig:
    """Settings the running application was built with."""
    return request.app.state.config


async def get_current_username(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    config: AppConfig = Depends(get_app_config),
) -> str:
    """
    Resolve the authenticated username of a request.

    Raises:
        AuthError: If the bearer token is missing or invalid
    """
    if credentials is None:
        audit.bind_context(path=request.url.path).log_auth_failure("missing bearer token")
        raise AuthError("User not logged in")

    try:
        return decode_access_token(credentials.credentials, config)
    except AuthError as e:
        audit.bind_context(path=request.url.path).log_auth_failure(e.message)
        raise
