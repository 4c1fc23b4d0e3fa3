import logging

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from roomloop.api.dependencies import get_current_user
from roomloop.core.config import settings
from roomloop.core.errors import (
    user_not_found_error,
    invalid_credentials_error,
    email_already_exists_error,
    username_already_exists_error,
)
from roomloop.core.logging import log_authentication_event
from roomloop.core.validators import validate_user_registration, validate_user_login
from roomloop.realtime.auth import Identity
from roomloop.schemas.user import UserCreate, UserLogin, UserResponse, Token
from roomloop.services import auth_service
from roomloop.utils.auth import create_access_token, get_password_hash_async

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _issue_token(user) -> Token:
    """사용자 ID(sub)와 사용자명을 담은 액세스 토큰 발급"""
    access_token = create_access_token(
        data={"sub": str(user.id), "username": user.username}
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_hours * 3600,
        user=UserResponse.model_validate(user),
    )


@router.post("/register",
             response_model=UserResponse,
             status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate) -> UserResponse:
    """
    사용자 회원가입

    - **email**: 이메일 (중복 불가)
    - **username**: 사용자명 (중복 불가, 영문/숫자/_/-)
    - **password**: 8-64자, 영문과 숫자 포함
    """

    # 입력 검증
    validate_user_registration(user_data.email, user_data.username, user_data.password)

    # 비즈니스 로직: 중복 확인
    if await auth_service.is_email_exists(user_data.email):
        raise email_already_exists_error()

    if await auth_service.is_username_exists(user_data.username):
        raise username_already_exists_error()

    # 비밀번호 해싱 및 사용자 생성
    password_hash = await get_password_hash_async(user_data.password)
    user = await auth_service.create_user(
        email=user_data.email,
        username=user_data.username,
        password_hash=password_hash,
        display_name=user_data.display_name
    )

    log_authentication_event(logger, "register", user_id=str(user.id), email=user.email)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin) -> Token:
    """
    사용자 로그인 (JSON)

    발급된 토큰은 REST 요청의 Authorization 헤더와
    Socket.IO 핸드셰이크의 `auth.token`에 똑같이 사용합니다.
    """
    validate_user_login(credentials.email, credentials.password)

    user = await auth_service.authenticate_user_by_email(credentials.email, credentials.password)
    if not user:
        log_authentication_event(logger, "login", email=credentials.email, success=False)
        raise invalid_credentials_error()

    log_authentication_event(logger, "login", user_id=str(user.id), email=user.email)
    return _issue_token(user)


@router.post("/token", response_model=Token)
async def login_oauth2(form_data: OAuth2PasswordRequestForm = Depends()) -> Token:
    """
    사용자 로그인 (OAuth2 표준, Swagger UI용)

    - application/x-www-form-urlencoded 형식
    - username 필드에 email 입력
    """
    return await login(UserLogin(email=form_data.username, password=form_data.password))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: Identity = Depends(get_current_user)) -> UserResponse:
    """현재 로그인한 사용자 정보"""
    user = await auth_service.find_user_by_id(current_user.id)
    if not user:
        raise user_not_found_error(current_user.id)
    return UserResponse.model_validate(user)
