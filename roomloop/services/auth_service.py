"""
User service layer for MongoDB operations.

Handles user lookup, registration and credential checks.
"""

import re
from typing import List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId

from roomloop.models.users import User
from roomloop.utils.auth import verify_password_async


async def find_user_by_id(user_id: str) -> Optional[User]:
    """사용자 ID로 조회"""
    try:
        return await User.get(PydanticObjectId(user_id))
    except (InvalidId, TypeError):
        return None


async def find_user_by_email(email: str) -> Optional[User]:
    """이메일로 조회"""
    return await User.find_one(User.email == email.lower())


async def find_user_by_username(username: str) -> Optional[User]:
    """사용자명으로 조회"""
    return await User.find_one(User.username == username)


async def is_email_exists(email: str) -> bool:
    return await find_user_by_email(email) is not None


async def is_username_exists(username: str) -> bool:
    return await find_user_by_username(username) is not None


async def create_user(
    email: str,
    username: str,
    password_hash: str,
    display_name: Optional[str] = None
) -> User:
    """사용자 생성"""
    user = User(
        email=email.lower(),
        username=username,
        password_hash=password_hash,
        display_name=display_name
    )
    await user.insert()
    return user


async def authenticate_user_by_email(email: str, password: str) -> Optional[User]:
    """이메일/비밀번호 인증. 실패 시 None"""
    user = await find_user_by_email(email)
    if not user:
        return None
    if not await verify_password_async(password, user.password_hash):
        return None
    return user


async def search_users(query: str, limit: int = 10, exclude_user_id: Optional[str] = None) -> List[User]:
    """사용자명/표시명 부분 일치 검색"""
    pattern = re.escape(query.strip())
    conditions = {
        "$or": [
            {"username": {"$regex": pattern, "$options": "i"}},
            {"display_name": {"$regex": pattern, "$options": "i"}},
        ]
    }
    if exclude_user_id:
        try:
            conditions["_id"] = {"$ne": PydanticObjectId(exclude_user_id)}
        except InvalidId:
            pass

    return await User.find(conditions).sort("username").limit(limit).to_list()
