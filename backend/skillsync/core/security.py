# skillsync/core/security.py

import hmac
import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillsync.core import config
from skillsync.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_TOKEN_ALGORITHMS = ["HS256"]


def decode_access_token(token: str, secret: str) -> dict:
    """
    Verify an HS256 access token and return its claims.
    The audience claim set by the auth provider is not checked.
    """
    if not secret:
        raise AuthenticationError("Token verification is not configured")
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=ACCESS_TOKEN_ALGORITHMS,
            options={"require": ["sub"], "verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.MissingRequiredClaimError:
        raise AuthenticationError("Token has no subject")
    except jwt.InvalidAlgorithmError:
        raise AuthenticationError("Unsupported token algorithm")
    except jwt.InvalidSignatureError:
        raise AuthenticationError("Invalid token signature")
    except jwt.DecodeError:
        raise AuthenticationError("Malformed token")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    if not claims.get("sub"):
        raise AuthenticationError("Token has no subject")
    return claims


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str | None = None
    full_name: str | None = None


def user_from_token(token: str) -> CurrentUser:
    """Verify an access token issued by the auth provider."""
    claims = decode_access_token(token, config.JWT_SECRET)
    metadata = claims.get("user_metadata") or {}
    return CurrentUser(
        id=str(claims["sub"]),
        email=claims.get("email"),
        full_name=metadata.get("full_name"),
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    try:
        return user_from_token(credentials.credentials)
    except AuthenticationError as e:
        logger.info("Rejected access token: %s", e.message)
        raise HTTPException(status_code=401, detail=e.message)


def require_service_key(x_service_key: str | None = Header(default=None)) -> None:
    """Guard for scheduled jobs and server-to-server calls."""
    expected = config.SERVICE_ROLE_KEY
    if not expected or not x_service_key or not hmac.compare_digest(x_service_key, expected):
        raise HTTPException(status_code=401, detail="Invalid service key")
