"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- JWT creation for access, refresh and password-reset credentials
- JWT verification with distinct expired / malformed failures
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from todolist.config import settings
from todolist.core.auth.schemas import TokenData, TokenType
from todolist.core.constants import ACCESS_TOKEN_JTI_LENGTH, PASSWORD_RESET_PURPOSE


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class TokenError(Exception):
    """Base class for credential verification failures."""


class TokenExpiredError(TokenError):
    """The credential's signature is valid but it has expired."""


class MalformedTokenError(TokenError):
    """The credential cannot be decoded, is badly signed, or lacks required claims."""


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def password_fingerprint(password_hash: str) -> str:
    """Short SHA-256 digest of a password hash.

    Embedded in reset credentials so a credential stops working once
    the password it was issued against has changed.
    """
    return hashlib.sha256(password_hash.encode()).hexdigest()[:16]


# ============================================================
# JWT Token Utilities
# ============================================================


def _encode(
    user_id: UUID,
    tenant_id: UUID,
    token_type: TokenType,
    expires_delta: timedelta,
    claims: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(UTC)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "tenant_id": str(tenant_id),
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),  # Unique token ID
    }
    if claims:
        to_encode.update(claims)

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_access_token(
    user_id: UUID,
    tenant_id: UUID,
    role: str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a short-lived JWT access token.

    Args:
        user_id: The user's UUID
        tenant_id: The user's tenant UUID
        role: The user's role
        expires_delta: Optional custom expiration time
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT access token
    """
    claims: dict[str, Any] = {"role": str(role)}
    if additional_claims:
        claims.update(additional_claims)

    return _encode(
        user_id,
        tenant_id,
        "access",
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
        claims,
    )


def create_refresh_token(
    user_id: UUID,
    tenant_id: UUID,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a longer-lived JWT refresh token.

    Refresh tokens are verified by the same access guard as access tokens,
    so a refresh presented on another tenant's host is refused.
    """
    return _encode(
        user_id,
        tenant_id,
        "refresh",
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
        {"role": str(role)},
    )


def create_password_reset_token(
    user_id: UUID,
    tenant_id: UUID,
    password_hash: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a single-purpose password reset credential.

    Args:
        user_id: The user's UUID
        tenant_id: The user's tenant UUID
        password_hash: Current password hash, fingerprinted into the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT with ``purpose = "password-reset"``
    """
    return _encode(
        user_id,
        tenant_id,
        "reset",
        expires_delta or timedelta(minutes=settings.password_reset_expire_minutes),
        {
            "purpose": PASSWORD_RESET_PURPOSE,
            "pwd": password_fingerprint(password_hash),
        },
    )


def decode_token(token: str) -> TokenData:
    """Decode and verify a JWT.

    Args:
        token: The JWT to decode

    Returns:
        Verified token data

    Raises:
        TokenExpiredError: If the signature is valid but the token has expired
        MalformedTokenError: If the token is invalid or missing required claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except JWTError as e:
        raise MalformedTokenError(str(e)) from e

    user_id = payload.get("sub")
    tenant_id = payload.get("tenant_id")
    exp = payload.get("exp")
    if not user_id or not tenant_id or exp is None:
        raise MalformedTokenError("Token is missing required claims")

    try:
        return TokenData(
            user_id=UUID(user_id),
            tenant_id=UUID(tenant_id),
            role=payload.get("role"),
            exp=datetime.fromtimestamp(exp, tz=UTC),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
            purpose=payload.get("purpose"),
            fingerprint=payload.get("pwd"),
        )
    except (ValueError, TypeError) as e:
        raise MalformedTokenError("Token claims are invalid") from e
