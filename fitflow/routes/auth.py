# fitflow/routes/auth.py
"""
First-party session endpoints.

FitFlow does not store passwords. The identity provider authenticates the
person and hands the frontend an ID token; login exchanges that token,
sent as ``Authorization: Bearer``, for a signed session token delivered both
in the body and as an httpOnly cookie. The session is only ever minted for
the email the ID token proves.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError

from ..api.dependencies import get_login_verifier, get_settings, get_user_service
from ..auth import IdentityProviderVerifier, JwtIdentityVerifier
from ..core.config import Settings
from ..core.enums import UserRole
from ..core.exceptions import ForbiddenException, NotFoundException, UnauthorizedException
from ..schemas.auth import LoginRequest, LoginResponse, SessionUser
from ..schemas.common import MessageResponse
from ..services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

id_token_scheme = HTTPBearer(auto_error=False, description="Identity provider ID token")


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(id_token_scheme),
    verifier: IdentityProviderVerifier = Depends(get_login_verifier),
    settings: Settings = Depends(get_settings),
    user_service: UserService = Depends(get_user_service),
) -> LoginResponse:
    """
    Exchange an identity-provider ID token for a FitFlow session.

    Raises:
        UnauthorizedException: no ID token, or no registered user for its email
        ForbiddenException: the ID token does not verify, or it proves a
            different email than the one in the body
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("An identity provider ID token is required", code="NOT_AUTHENTICATED")

    try:
        verified_email = verifier.verified_email(credentials.credentials)
    except PyJWTError as e:
        logger.info(f"Login rejected, ID token failed verification: {str(e)}")
        raise ForbiddenException("Forbidden access", code="INVALID_TOKEN")

    if verified_email.lower() != str(payload.email).lower():
        logger.warning(f"Login for {payload.email} presented an ID token for {verified_email}")
        raise ForbiddenException(
            "ID token does not belong to this email", code="IDENTITY_MISMATCH"
        )

    try:
        user = user_service.get_user(verified_email)
    except NotFoundException:
        logger.info(f"Login attempt for unregistered email {verified_email}")
        raise UnauthorizedException("Unknown user", code="UNKNOWN_USER")

    token = JwtIdentityVerifier(settings).issue(
        {"sub": user.email, "id": user.id, "role": user.role, "name": user.display_name}
    )
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )
    return LoginResponse(
        message="Login successful",
        user=SessionUser(email=user.email, role=UserRole(user.role)),
        access_token=token,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, settings: Settings = Depends(get_settings)) -> MessageResponse:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.cookie_samesite,
    )
    return MessageResponse(message="Logout successful")
