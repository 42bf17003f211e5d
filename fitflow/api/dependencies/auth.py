# fitflow/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Credential lookup order: ``Authorization: Bearer`` header, then the auth
cookie. A missing credential is 401; a credential that fails verification
is 403.

The principal's role comes from the stored user, not the token, because an
admin decision on a trainer application changes the role after the token
was issued.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jwt import PyJWTError
from sqlalchemy.orm import Session

from ...auth import IdentityProviderVerifier, IdentityVerifier, JwtIdentityVerifier
from ...core.config import Settings
from ...core.enums import UserRole
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...database import get_db
from ...principal import Principal
from ...repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_verifier(request: Request) -> IdentityVerifier:
    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        verifier = JwtIdentityVerifier(get_settings(request))
    return verifier


def get_login_verifier(request: Request) -> IdentityProviderVerifier:
    """Verifier for identity-provider ID tokens presented at login."""
    verifier = getattr(request.app.state, "login_verifier", None)
    if verifier is None:
        verifier = IdentityProviderVerifier(get_settings(request))
    return verifier


def _coerce_role(value: object) -> UserRole:
    try:
        return UserRole(str(value))
    except ValueError:
        return UserRole.MEMBER


def get_current_principal(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme_optional),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
    db: Session = Depends(get_db),
) -> Principal:
    """Resolve the authenticated principal for this request."""
    if not token:
        cookie_name = get_settings(request).auth_cookie_name
        token = request.cookies.get(cookie_name)
        if token:
            logger.debug(f"Using {cookie_name} cookie for authentication")

    if not token:
        raise UnauthorizedException("Unauthorized access", code="NOT_AUTHENTICATED")

    try:
        claims = verifier.verify(token)
    except PyJWTError as e:
        logger.info(f"Token validation failed: {str(e)}")
        raise ForbiddenException("Forbidden access", code="INVALID_TOKEN")

    email = claims.get("sub") or claims.get("email")
    if not isinstance(email, str) or not email:
        logger.warning("Token payload missing 'sub' field")
        raise ForbiddenException("Forbidden access", code="INVALID_TOKEN")

    user = UserRepository(db).get_by_email(email)
    if user is not None:
        return Principal(
            email=user.email,
            role=_coerce_role(user.role),
            display_name=user.display_name,
            user_id=user.id,
        )

    return Principal(
        email=email,
        role=_coerce_role(claims.get("role", UserRole.MEMBER.value)),
        display_name=claims.get("name"),
        user_id=claims.get("id"),
    )


def require_roles(*roles: UserRole) -> Callable[..., Principal]:
    """Dependency factory: the principal must hold one of ``roles``."""

    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_role(*roles):
            raise ForbiddenException(
                "You do not have permission to perform this action",
                code="INSUFFICIENT_ROLE",
                details={"required": [role.value for role in roles]},
            )
        return principal

    return checker


require_admin = require_roles(UserRole.ADMIN)
require_trainer = require_roles(UserRole.TRAINER)
require_trainer_or_admin = require_roles(UserRole.TRAINER, UserRole.ADMIN)
