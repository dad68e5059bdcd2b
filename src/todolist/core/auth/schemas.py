"""Authentication schemas for token handling."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


TokenType = Literal["access", "refresh", "reset"]


class TokenData(BaseModel):
    """Data extracted from a verified JWT.

    Attributes:
        user_id: The user's UUID (``sub`` claim)
        tenant_id: The tenant the credential was issued for
        role: Role at issue time, absent on reset credentials
        exp: Token expiration time
        type: access, refresh or reset
        jti: Unique token ID
        purpose: Set on single-purpose credentials such as password reset
        fingerprint: Password fingerprint binding a reset credential to one use
    """

    user_id: UUID
    tenant_id: UUID
    role: str | None = None
    exp: datetime
    type: TokenType = "access"
    jti: str | None = None
    purpose: str | None = None
    fingerprint: str | None = None


class TokenPair(BaseModel):
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived JWT for API access
        refresh_token: Longer-lived JWT for getting new access tokens
        token_type: Always "bearer"
        expires_in: Access token expiration in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
