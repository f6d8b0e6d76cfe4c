# qrlink/api/auth.py

import logging
from pydantic import BaseModel, Field
from fastapi import APIRouter, Depends, Request, Response, status

from qrlink.core.errors import AuthError, ConflictError, ValidationError
from qrlink.core.security import (
    AuthStrategy,
    get_auth,
    get_current_user,
    get_password_hash,
    verify_password,
)
from qrlink.models import User
from qrlink.storage import UserStore, get_user_store


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class Credentials(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)


class UserOut(BaseModel):
    id: str
    username: str


def user_summary(user: User) -> dict:
    return {"id": user.id, "username": user.username}


def authenticate_user(users: UserStore, username: str, password: str) -> User | None:
    user = users.get_user_by_username(username)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    creds: Credentials,
    response: Response,
    users: UserStore = Depends(get_user_store),
    auth: AuthStrategy = Depends(get_auth),
):
    if users.get_user_by_username(creds.username):
        raise ValidationError("Username already exists")
    try:
        user = users.create_user(creds.username, get_password_hash(creds.password))
    except ConflictError as e:
        raise ValidationError(e.message) from e

    auth.login(response, user)
    logger.info("Registered user %s", user.id)
    return user_summary(user)


@router.post("/login", response_model=UserOut)
def login(
    creds: Credentials,
    response: Response,
    users: UserStore = Depends(get_user_store),
    auth: AuthStrategy = Depends(get_auth),
):
    user = authenticate_user(users, creds.username, creds.password)
    if not user:
        logger.info("Failed login for username %r", creds.username)
        raise AuthError("Invalid username or password")

    auth.login(response, user)
    return user_summary(user)


@router.post("/logout")
def logout(request: Request, response: Response, auth: AuthStrategy = Depends(get_auth)):
    auth.logout(request, response)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return user_summary(current_user)
