"""
Identity tokens.

FitFlow does not hold passwords. The identity provider authenticates the
person and hands the frontend an ID token; ``/auth/login`` exchanges that
ID token for a FitFlow session JWT whose ``sub`` is the verified email.
Everything past this module only sees verified claims.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, Protocol, cast

import jwt

from .core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class IdentityVerifier(Protocol):
    """Turns a bearer credential into verified claims or raises ``jwt.PyJWTError``."""

    def verify(self, token: str) -> Dict[str, Any]:
        ...


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
    *,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: The claims to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        str: The encoded JWT token
    """
    cfg = settings or default_settings
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=cfg.access_token_expire_minutes)
    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})

    encoded_jwt = jwt.encode(to_encode, cfg.secret_key.get_secret_value(), algorithm=cfg.algorithm)
    logger.debug("Created access token for %s", data.get("sub"))
    return cast(str, encoded_jwt)


def decode_access_token(token: str, *, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Decode and verify a JWT access token."""
    cfg = settings or default_settings
    payload = jwt.decode(
        token,
        cfg.secret_key.get_secret_value(),
        algorithms=[cfg.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload)


class JwtIdentityVerifier:
    """Default verifier for tokens issued by this service."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def verify(self, token: str) -> Dict[str, Any]:
        return decode_access_token(token, settings=self.settings)

    def issue(self, claims: Dict[str, Any]) -> str:
        return create_access_token(claims, settings=self.settings)


class IdentityProviderVerifier:
    """
    Verifies ID tokens minted by the external identity provider.

    An ID token must carry ``aud`` equal to ``identity_provider_audience`` and
    an expiry, so a FitFlow session token (no ``aud``) is never accepted here.
    ``verified_email`` returns the email the provider vouches for.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def verify(self, token: str) -> Dict[str, Any]:
        cfg = self.settings
        key = cfg.identity_provider_secret or cfg.secret_key
        claims = jwt.decode(
            token,
            key.get_secret_value(),
            algorithms=[cfg.algorithm],
            audience=cfg.identity_provider_audience,
            options={"require": ["exp", "aud"]},
        )
        return cast(Dict[str, Any], claims)

    def verified_email(self, token: str) -> str:
        claims = self.verify(token)
        if claims.get("email_verified") is False:
            raise jwt.InvalidTokenError("Identity provider has not verified this email")
        email = claims.get("email") or claims.get("sub")
        if not isinstance(email, str) or "@" not in email:
            raise jwt.InvalidTokenError("ID token carries no email")
        return email
