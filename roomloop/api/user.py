from fastapi import APIRouter, Depends, Query

from roomloop.api.dependencies import get_current_user, get_registry
from roomloop.core.errors import user_not_found_error
from roomloop.realtime.auth import Identity
from roomloop.realtime.registry import ConnectionRegistry
from roomloop.schemas.user import UserProfile, UserSearchResponse
from roomloop.services import auth_service

router = APIRouter(prefix="/api/users", tags=["Users"])


def _to_profile(user, registry: ConnectionRegistry) -> UserProfile:
    profile = UserProfile.model_validate(user)
    profile.is_online = registry.is_user_connected(profile.id)
    return profile


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    q: str = Query(..., min_length=1, max_length=50, description="검색 키워드"),
    limit: int = Query(10, ge=1, le=50),
    current_user: Identity = Depends(get_current_user),
    registry: ConnectionRegistry = Depends(get_registry)
) -> UserSearchResponse:
    """사용자 검색 (초대 대상 찾기용, 본인 제외)"""
    users = await auth_service.search_users(q, limit=limit, exclude_user_id=current_user.id)
    profiles = [_to_profile(user, registry) for user in users]
    return UserSearchResponse(users=profiles, total_count=len(profiles))


@router.get("/{user_id}", response_model=UserProfile)
async def get_user(
    user_id: str,
    current_user: Identity = Depends(get_current_user),
    registry: ConnectionRegistry = Depends(get_registry)
) -> UserProfile:
    """사용자 프로필 조회"""
    user = await auth_service.find_user_by_id(user_id)
    if not user:
        raise user_not_found_error(user_id)
    return _to_profile(user, registry)
