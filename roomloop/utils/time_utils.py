"""
시간 관련 유틸리티 함수
"""
from datetime import datetime, timezone
from typing import Optional

ROOM_STATUS_SCHEDULED = "scheduled"
ROOM_STATUS_LIVE = "live"
ROOM_STATUS_ENDED = "ended"


def utcnow() -> datetime:
    """naive UTC 현재 시각 (MongoDB에 저장되는 형식과 동일)"""
    return datetime.utcnow()


def to_naive_utc(dt: datetime) -> datetime:
    """timezone-aware datetime을 naive UTC로 변환합니다. naive 값은 UTC로 간주합니다."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def room_status(starts_at: datetime, ends_at: datetime, now: Optional[datetime] = None) -> str:
    """
    일정으로부터 채팅방 상태를 계산합니다.

    Returns:
        str: "scheduled" (시작 전), "live" (진행 중), "ended" (종료)
    """
    now = now or utcnow()
    if now < starts_at:
        return ROOM_STATUS_SCHEDULED
    if now < ends_at:
        return ROOM_STATUS_LIVE
    return ROOM_STATUS_ENDED
