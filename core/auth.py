import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import requests
from fastapi import HTTPException, Request, Response, status

from schemas.user_schema import UserCreate

logger = logging.getLogger(__name__)

AUTH_COOKIE = "auth-token"
UNVERIFIED_HEADER = "X-Auth-Unverified"
JWT_ALGORITHM = "HS256"


@dataclass
class Principal:
    user_id: str
    email: Optional[str] = None
    session_id: Optional[str] = None
    verified: bool = True


# bcrypt only reads the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 10


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt; the salt and cost are embedded in the result."""
    hashed = bcrypt.hashpw(password.encode()[:BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds=rounds))
    return hashed.decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode()[:BCRYPT_MAX_BYTES], password_hash.encode())
    except ValueError:
        logger.warning("Stored password hash is not a bcrypt hash")
        return False


def create_access_token(user_id: str, email: Optional[str], secret: str, expires_days: int) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=expires_days),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


class Authenticator(ABC):
    """Resolves the caller of a request to a ``Principal``; raises HTTPException when it cannot."""

    mode = "abstract"

    def __init__(self, settings, storage):
        self.settings = settings
        self.storage = storage

    @abstractmethod
    def authenticate(self, request: Request, response: Response) -> Principal:
        ...

    def _ensure_user(self, user_id: str, email: Optional[str] = None):
        known = self.storage.user_exists(user_id)
        if not known or (email and self.storage.get_user(user_id).email != email):
            self.storage.upsert_user(UserCreate(id=user_id, email=email))

    def _development_principal(self, response: Response, reason: str) -> Principal:
        s = self.settings
        logger.warning(f"UNVERIFIED: {reason}; acting as development user {s.DEV_USER_ID}")
        response.headers[UNVERIFIED_HEADER] = "true"
        first, _, last = s.DEV_USER_NAME.partition(" ")
        self.storage.upsert_user(
            UserCreate(id=s.DEV_USER_ID, email=s.DEV_USER_EMAIL, first_name=first, last_name=last)
        )
        return Principal(
            user_id=s.DEV_USER_ID,
            email=s.DEV_USER_EMAIL,
            session_id="dev-session-123",
            verified=False,
        )


class LocalCredentialAuthenticator(Authenticator):
    """Signed token from the ``auth-token`` cookie or a bearer header."""

    mode = "local"

    def authenticate(self, request, response):
        token = request.cookies.get(AUTH_COOKIE) or _extract_bearer_token(
            request.headers.get("authorization")
        )
        if not token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")
        try:
            claims = jwt.decode(token, self.settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
        user_id = claims.get("userId")
        if not user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
        return Principal(user_id=user_id, email=claims.get("email"))


class ExternalTokenAuthenticator(Authenticator):
    """Bearer token checked by the identity provider's verification endpoint."""

    mode = "external"

    def _verify(self, token: str) -> dict:
        resp = requests.post(
            self.settings.IDENTITY_VERIFY_URL,
            json={"token": token},
            headers={"Authorization": f"Bearer {self.settings.CLERK_SECRET_KEY}"},
            timeout=10,
        )
        if resp.status_code != 200:
            raise ValueError(f"verification endpoint answered {resp.status_code}")
        payload = resp.json()
        if not payload.get("sub"):
            raise ValueError("verification payload has no subject")
        return payload

    def _reject_or_fallback(self, response: Response, reason: str) -> Principal:
        if self.settings.ALLOW_UNVERIFIED_AUTH:
            return self._development_principal(response, reason)
        logger.info(f"Rejecting request: {reason}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    def authenticate(self, request, response):
        if not self.settings.CLERK_SECRET_KEY:
            return self._reject_or_fallback(response, "identity provider secret is not configured")
        token = _extract_bearer_token(request.headers.get("authorization"))
        if not token:
            return self._reject_or_fallback(response, "no bearer token supplied")
        try:
            payload = self._verify(token)
        except (requests.RequestException, ValueError) as e:
            return self._reject_or_fallback(response, f"token verification failed ({e})")
        principal = Principal(
            user_id=payload["sub"],
            email=payload.get("email"),
            session_id=payload.get("sid"),
        )
        self._ensure_user(principal.user_id, principal.email)
        return principal


class DevBypassAuthenticator(Authenticator):
    """Every request is the development user. Refused in production by Settings."""

    mode = "dev"

    def authenticate(self, request, response):
        return self._development_principal(response, "authentication disabled for local development")


AUTHENTICATORS = {
    cls.mode: cls
    for cls in (LocalCredentialAuthenticator, ExternalTokenAuthenticator, DevBypassAuthenticator)
}


def build_authenticator(settings, storage) -> Authenticator:
    return AUTHENTICATORS[settings.AUTH_MODE](settings, storage)


def get_current_user(request: Request, response: Response) -> Principal:
    """Dependency for routes guarded by the configured authenticator."""
    return request.app.state.authenticator.authenticate(request, response)


def get_session_user(request: Request, response: Response) -> Principal:
    """Dependency for routes that describe the local credential session."""
    return request.app.state.local_authenticator.authenticate(request, response)
