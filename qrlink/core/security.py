# qrlink/core/security.py

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request, Response
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from qrlink.config import Settings
from qrlink.core.errors import AuthError
from qrlink.core.state import SessionTable
from qrlink.models import User
from qrlink.storage import UserStore, get_user_store


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["scrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, settings: Settings, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.token_ttl_hours))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug("Rejected access token: %s", e)
        return None


# -------------------------------
# Authentication Strategies
# -------------------------------

class AuthStrategy(ABC):
    """
    Issues and checks the login credential carried by the auth cookie.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.settings.token_ttl_hours)

    @abstractmethod
    def issue(self, user: User) -> str: ...

    @abstractmethod
    def resolve_user_id(self, request: Request, bearer: str | None = None) -> str | None: ...

    def revoke(self, request: Request):
        pass

    def login(self, response: Response, user: User) -> str:
        token = self.issue(user)
        response.set_cookie(
            key=self.settings.cookie_name,
            value=token,
            max_age=int(self.ttl.total_seconds()),
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite=self.settings.cookie_samesite,
        )
        return token

    def logout(self, request: Request, response: Response):
        self.revoke(request)
        response.delete_cookie(
            key=self.settings.cookie_name,
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite=self.settings.cookie_samesite,
        )


class TokenAuth(AuthStrategy):
    """
    Stateless: the cookie (or a Bearer header) holds a signed JWT with the user id.
    """

    def issue(self, user: User) -> str:
        return create_access_token({"sub": user.id, "username": user.username}, self.settings, self.ttl)

    def resolve_user_id(self, request, bearer=None):
        # A stale cookie must not shadow a valid Bearer token.
        for token in (request.cookies.get(self.settings.cookie_name), bearer):
            if not token:
                continue
            payload = decode_access_token(token, self.settings)
            if payload is not None and payload.get("sub"):
                return payload["sub"]
        return None


class SessionAuth(AuthStrategy):
    """
    Server-side sessions: the cookie holds a signed session id,
    and logout revokes the session.
    """

    def __init__(self, settings: Settings, sessions: SessionTable | None = None):
        super().__init__(settings)
        self.sessions = sessions or SessionTable()

    def issue(self, user: User) -> str:
        session_id = self.sessions.open(user.id, self.ttl)
        return create_access_token({"sid": session_id}, self.settings, self.ttl)

    def _session_id(self, request: Request) -> str | None:
        token = request.cookies.get(self.settings.cookie_name)
        if not token:
            return None
        payload = decode_access_token(token, self.settings)
        if payload is None:
            return None
        return payload.get("sid")

    def resolve_user_id(self, request, bearer=None):
        session_id = self._session_id(request)
        if session_id is None:
            return None
        return self.sessions.get_user_id(session_id)

    def revoke(self, request):
        session_id = self._session_id(request)
        if session_id is not None:
            self.sessions.close(session_id)


def build_auth_strategy(settings: Settings) -> AuthStrategy:
    if settings.auth_strategy == "session":
        return SessionAuth(settings)
    return TokenAuth(settings)


# -------------------------------
# Request Dependencies
# -------------------------------

def get_auth(request: Request) -> AuthStrategy:
    return request.app.state.auth


def get_optional_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    auth: AuthStrategy = Depends(get_auth),
    users: UserStore = Depends(get_user_store),
) -> User | None:
    user_id = auth.resolve_user_id(request, bearer)
    if user_id is None:
        return None
    return users.get_user_by_id(user_id)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthError("Authentication required")
    return user
