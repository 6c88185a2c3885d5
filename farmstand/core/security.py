# file: farmstand/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from jose import jwt, JWTError
from pydantic import BaseModel

from farmstand.core import config
from farmstand.core.exceptions import Forbidden, Unauthorized
from farmstand.core.firebase import init_firebase

# ---------------------------
# Logging
# ---------------------------
logger = logging.getLogger("core.security")

security = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """The authenticated account that owns a vendor record."""
    id: str
    email: Optional[str] = None
    email_verified: bool = False


# ---------------------------
# Token Creation (AUTH_PROVIDER=jwt)
# ---------------------------
def create_access_token(identity: Identity, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": identity.id,
        "email": identity.email,
        "email_verified": identity.email_verified,
        "exp": expire,
    }
    return jwt.encode(to_encode, config.get_secret_key(), algorithm=config.ALGORITHM)


def _decode_local_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, config.get_secret_key(), algorithms=[config.ALGORITHM])
    except JWTError as e:
        logger.warning("JWT decode failed: %s", e)
        raise Unauthorized("Your session has expired. Please sign in again.")

    sub = payload.get("sub")
    if not sub:
        logger.warning("Invalid JWT payload: %s", payload)
        raise Unauthorized("Invalid token payload")
    return Identity(
        id=sub,
        email=payload.get("email"),
        email_verified=bool(payload.get("email_verified", False)),
    )


def _decode_firebase_token(token: str) -> Identity:
    init_firebase()
    try:
        claims = firebase_auth.verify_id_token(token)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
            firebase_auth.RevokedIdTokenError, firebase_auth.CertificateFetchError) as e:
        logger.warning("Firebase ID token rejected: %s", e)
        raise Unauthorized("Your session has expired. Please sign in again.")
    return Identity(
        id=claims["uid"],
        email=claims.get("email"),
        email_verified=bool(claims.get("email_verified", False)),
    )


def resolve_identity(token: str) -> Identity:
    if config.AUTH_PROVIDER == "jwt":
        return _decode_local_token(token)
    return _decode_firebase_token(token)


# ---------------------------
# Dependencies
# ---------------------------
async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """Return the signed-in identity, or None for anonymous callers."""
    if credentials is None or not credentials.credentials:
        return None
    identity = resolve_identity(credentials.credentials)
    logger.debug("Token resolved → uid=%s verified=%s", identity.id, identity.email_verified)
    return identity


async def get_signed_in(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    if identity is None:
        raise Unauthorized("Please sign in to continue.")
    return identity


async def get_verified_vendor(identity: Identity = Depends(get_signed_in)) -> Identity:
    """Dashboard gate: only vendors with a verified email may read or write their record."""
    if not identity.email_verified:
        raise Forbidden("Please verify your email address before accessing the dashboard.")
    return identity
