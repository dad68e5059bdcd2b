"""Access guard: identity verification plus the tenant-match rule.

``authenticate`` runs in a fixed order for every protected request:

1. a credential must be present
2. the credential must verify (signature, expiry) and be of the expected type
3. its subject must be an existing, active user of the claimed tenant
4. outside the main domain, the user's tenant must be the resolved tenant

Failures in 1-3 are 401. Failure in 4 is 403. Callers never receive a
partially authenticated context.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

import structlog

from todolist.core.auth.backend import (
    MalformedTokenError,
    TokenExpiredError,
    decode_token,
)
from todolist.core.auth.schemas import TokenData, TokenType
from todolist.core.errors import AppException, ForbiddenError, UnauthorizedError
from todolist.core.tenancy.context import TenantContext
from todolist.modules.users.models import Role, User
from todolist.modules.users.repos import UserRepository


logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthenticatedContext:
    """Identity attached to a request after the guard accepts it.

    ``tenant_id`` is the user's own tenant. Services scope every query by
    it; on tenant hosts it equals the resolved tenant.
    """

    user: User
    tenant_context: TenantContext
    token: TokenData

    @property
    def user_id(self) -> UUID:
        return self.user.id

    @property
    def tenant_id(self) -> UUID:
        return self.user.tenant_id

    @property
    def role(self) -> Role:
        return self.user.role

    @property
    def is_admin(self) -> bool:
        return self.user.role == Role.ADMIN


class AccessGuard:
    """Composes tenant resolution output and credential verification."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def authenticate(
        self,
        context: TenantContext,
        credential: str | None,
        token_type: TokenType = "access",
    ) -> AuthenticatedContext:
        """Authenticate a credential against the request's tenant context.

        Args:
            context: The resolved tenant context
            credential: Raw bearer token, or None if absent
            token_type: Expected token type (access or refresh)

        Returns:
            The authenticated context

        Raises:
            UnauthorizedError: Missing, invalid or expired credential, or
                unknown/inactive user
            ForbiddenError: The user belongs to a different tenant than the
                one the request resolved to
        """
        if not credential:
            logger.info("token_rejected", reason="missing")
            raise UnauthorizedError(
                "Missing authentication token",
                error_code="missing_token",
            )

        try:
            token = decode_token(credential)
        except TokenExpiredError:
            logger.info("token_rejected", reason="expired")
            raise UnauthorizedError(
                "Token has expired",
                error_code="token_expired",
            ) from None
        except MalformedTokenError as e:
            logger.info("token_rejected", reason="malformed", error=str(e))
            raise UnauthorizedError(
                "Invalid token",
                error_code="invalid_token",
            ) from None

        if token.type != token_type:
            logger.info(
                "token_rejected",
                reason="wrong_type",
                expected=token_type,
                actual=token.type,
            )
            raise UnauthorizedError(
                "Invalid token type",
                error_code="invalid_token_type",
            )

        user = await self.users.get_by_id_system(token.user_id)
        if user is None or not user.is_active:
            logger.info("token_rejected", reason="user_invalid", user_id=str(token.user_id))
            raise UnauthorizedError(
                "User not found or inactive",
                error_code="user_invalid",
            )

        if user.tenant_id != token.tenant_id:
            logger.warning(
                "token_rejected",
                reason="tenant_claim_mismatch",
                user_id=str(user.id),
            )
            raise UnauthorizedError(
                "Invalid token",
                error_code="invalid_token",
            )

        if not context.is_main_domain and user.tenant_id != context.tenant_id:
            logger.warning(
                "tenant_mismatch",
                user_id=str(user.id),
                user_tenant_id=str(user.tenant_id),
                request_tenant_id=str(context.tenant_id),
            )
            raise ForbiddenError(
                "User does not belong to this tenant",
                error_code="tenant_mismatch",
            )

        return AuthenticatedContext(user=user, tenant_context=context, token=token)

    async def try_authenticate(
        self,
        context: TenantContext,
        credential: str | None,
    ) -> AuthenticatedContext | None:
        """Authenticate if possible; return None instead of failing."""
        if not credential:
            return None
        try:
            return await self.authenticate(context, credential)
        except AppException:
            return None

    @staticmethod
    def require_role(
        auth: AuthenticatedContext,
        allowed: Iterable[Role],
    ) -> AuthenticatedContext:
        """Check the authenticated role against an allowed set.

        Raises:
            ForbiddenError: If the role is not allowed
        """
        allowed_roles = set(allowed)
        if auth.role not in allowed_roles:
            logger.warning(
                "role_rejected",
                user_id=str(auth.user_id),
                role=str(auth.role),
                allowed=sorted(str(r) for r in allowed_roles),
            )
            raise ForbiddenError(
                "Insufficient permissions",
                error_code="insufficient_role",
                details={"required_roles": sorted(str(r) for r in allowed_roles)},
            )
        return auth
