import logging
from typing import List

from fastapi import APIRouter, Depends, status

from roomloop.api.dependencies import get_current_user, get_broadcaster, get_room_or_404
from roomloop.core.errors import (
    AuthorizationException,
    BusinessLogicException,
    ConflictException,
    ResourceNotFoundException,
    user_not_found_error,
)
from roomloop.models.invitations import INVITATION_PENDING
from roomloop.realtime.auth import Identity
from roomloop.realtime.broadcaster import RoomBroadcaster
from roomloop.realtime.publish import publish_room_invitation, publish_notification_created
from roomloop.schemas.invitation import InvitationCreate, InvitationResponse
from roomloop.services import auth_service, invitation_service, notification_service, room_service
from roomloop.utils.time_utils import ROOM_STATUS_ENDED

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invitations", tags=["Invitations"])


async def _get_own_pending_invitation(invitation_id: str, current_user: Identity):
    invitation = await invitation_service.find_invitation_by_id(invitation_id)
    if not invitation or invitation.invitee_id != current_user.id:
        raise ResourceNotFoundException("Invitation")
    if invitation.status != INVITATION_PENDING:
        raise BusinessLogicException(f"Invitation already {invitation.status}")
    return invitation


@router.post("", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def send_invitation(
    invitation_data: InvitationCreate,
    current_user: Identity = Depends(get_current_user),
    broadcaster: RoomBroadcaster = Depends(get_broadcaster)
) -> InvitationResponse:
    """
    채팅방 초대

    저장 후 초대받은 사용자의 개인 알림 채널로 `roomInvitation`과
    `newNotification`을 실시간 전송합니다.
    """
    room = await get_room_or_404(invitation_data.room_id)

    # 참여자만 초대 가능
    if not room.is_participant(current_user.id):
        raise AuthorizationException("Only participants can invite to this room")

    if invitation_data.invitee_id == current_user.id:
        raise BusinessLogicException("Cannot invite yourself")

    if room.status == ROOM_STATUS_ENDED:
        raise BusinessLogicException("This room has already ended")

    invitee = await auth_service.find_user_by_id(invitation_data.invitee_id)
    if not invitee:
        raise user_not_found_error(invitation_data.invitee_id)

    if room.is_participant(invitation_data.invitee_id):
        raise ConflictException("User is already a participant")

    if await invitation_service.find_pending_invitation(invitation_data.room_id, invitation_data.invitee_id):
        raise ConflictException("User already has a pending invitation")

    invitation = await invitation_service.create_invitation(room, current_user, invitation_data.invitee_id)
    notification = await notification_service.create_notification(
        user_id=invitation.invitee_id,
        type="room_invitation",
        title="New room invitation",
        message=f"{current_user.username} invited you to {room.name}",
        data={"invitationId": str(invitation.id), "roomId": invitation.room_id},
    )

    await publish_room_invitation(broadcaster, invitation)
    await publish_notification_created(broadcaster, notification)

    return InvitationResponse.model_validate(invitation)


@router.get("", response_model=List[InvitationResponse])
async def get_my_invitations(
    current_user: Identity = Depends(get_current_user)
) -> List[InvitationResponse]:
    """내가 받은 대기 중 초대 목록"""
    invitations = await invitation_service.get_pending_invitations(current_user.id)
    return [InvitationResponse.model_validate(invitation) for invitation in invitations]


@router.post("/{invitation_id}/accept", response_model=InvitationResponse)
async def accept_invitation(
    invitation_id: str,
    current_user: Identity = Depends(get_current_user),
    broadcaster: RoomBroadcaster = Depends(get_broadcaster)
) -> InvitationResponse:
    """초대 수락 (채팅방 참여자로 추가, 초대한 사용자에게 알림)"""
    invitation = await _get_own_pending_invitation(invitation_id, current_user)

    room = await room_service.find_room_by_id(invitation.room_id)
    if not room:
        raise ResourceNotFoundException("Room")
    if room.status == ROOM_STATUS_ENDED:
        raise BusinessLogicException("This room has already ended")
    if room.is_full() and not room.is_participant(current_user.id):
        raise BusinessLogicException("This room is full")

    await room_service.add_participant(room, current_user.id)
    invitation = await invitation_service.respond_to_invitation(invitation, accepted=True)

    notification = await notification_service.create_notification(
        user_id=invitation.inviter_id,
        type="invitation_accepted",
        title="Invitation accepted",
        message=f"{current_user.username} accepted your invitation to {invitation.room_name}",
        data={"invitationId": str(invitation.id), "roomId": invitation.room_id},
    )
    await publish_notification_created(broadcaster, notification)

    return InvitationResponse.model_validate(invitation)


@router.post("/{invitation_id}/decline", response_model=InvitationResponse)
async def decline_invitation(
    invitation_id: str,
    current_user: Identity = Depends(get_current_user)
) -> InvitationResponse:
    """초대 거절"""
    invitation = await _get_own_pending_invitation(invitation_id, current_user)
    invitation = await invitation_service.respond_to_invitation(invitation, accepted=False)
    return InvitationResponse.model_validate(invitation)
