# academy/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from academy.api.errors import raise_for_rejection
from academy.core.config import settings
from academy.core.security import create_token_for_user, get_current_user
from academy.db.session import get_db
from academy.models.user import User
from academy.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, Token
from academy.schemas.user import UserPublic
from academy.services import errors, signup
from academy.services.errors import Rejection

router = APIRouter(tags=["auth"])


def _start_session(response: Response, user: User) -> AuthResponse:
    token = create_token_for_user(user)
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return AuthResponse(access_token=token, user=UserPublic.model_validate(user))


def _bad_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=errors.INVALID_CREDENTIALS.as_detail(),
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    学生注册：电话号码必须在名单里 (roster)，姓名和座位号从名单复制。
    """
    user = signup.try_signup(db, phone_number=payload.phone_number, password=payload.password)
    if isinstance(user, Rejection):
        raise_for_rejection(user)
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    user = signup.authenticate(db, payload.phone_number, payload.password)
    if not user:
        raise _bad_credentials()
    return _start_session(response, user)


# OAuth2 form variant for the "Authorize" button in the docs; username = phone
@router.post("/token", response_model=Token)
def login_for_access_token_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = signup.authenticate(db, form_data.username, form_data.password)
    if not user:
        raise _bad_credentials()
    return Token(access_token=create_token_for_user(user))


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.ACCESS_TOKEN_COOKIE_NAME)
    return {"success": True}


@router.get("/user", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
