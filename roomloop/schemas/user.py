from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field

from .base import DocumentResponse


class UserCreate(BaseModel):
    """사용자 생성 스키마"""
    email: EmailStr = Field(..., description="사용자 이메일")
    username: str = Field(..., min_length=3, max_length=30, description="사용자명")
    password: str = Field(..., min_length=8, max_length=64, description="비밀번호 (8-64자, 영문+숫자)")
    display_name: Optional[str] = Field(None, max_length=100, description="표시명")


class UserLogin(BaseModel):
    """사용자 로그인 스키마"""
    email: str = Field(..., description="이메일")
    password: str = Field(..., description="비밀번호")


class UserResponse(DocumentResponse):
    """사용자 응답 스키마"""
    username: str = Field(..., description="사용자명")
    email: str = Field(..., description="이메일")
    display_name: Optional[str] = Field(None, description="표시명")
    created_at: datetime = Field(..., description="가입일시")


class UserProfile(DocumentResponse):
    """사용자 프로필 스키마 (민감한 정보 제외)"""
    username: str = Field(..., description="사용자명")
    display_name: Optional[str] = Field(None, description="표시명")
    is_online: bool = Field(default=False, description="실시간 연결 여부")


class UserSearchResponse(BaseModel):
    """사용자 검색 응답 스키마"""
    users: List[UserProfile] = Field(..., description="검색된 사용자 목록")
    total_count: int = Field(..., description="검색 결과 수")


class Token(BaseModel):
    """토큰 스키마"""
    access_token: str = Field(..., description="액세스 토큰")
    token_type: str = Field(default="bearer", description="토큰 타입")
    expires_in: int = Field(..., description="액세스 토큰 만료 시간(초)")
    user: UserResponse = Field(..., description="로그인한 사용자")
