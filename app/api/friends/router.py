from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_active_user
from app.api.friends.schemas import (
    FriendEntry,
    FriendRequestCreate,
    FriendshipResponse,
    FriendStatus,
    IncomingRequestEntry,
    LegacyFriendStatus,
    MessageResponse,
)
from app.api.friends.service import FriendshipService
from app.api.profile.models import User
from app.database.database import get_db

router = APIRouter(prefix="/api", tags=["friends"])


def get_friendship_service(db: Session = Depends(get_db)) -> FriendshipService:
    return FriendshipService(db)


@router.get("/friends", response_model=List[FriendEntry])
async def get_friends(
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.list_friends(current_user.id)


@router.get("/friend-requests", response_model=List[IncomingRequestEntry])
async def get_requests(
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.list_incoming_requests(current_user.id)


@router.get("/friend-requests/sent", response_model=List[FriendEntry])
async def get_sent_requests(
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.list_sent_requests(current_user.id)


@router.post("/friend-requests", response_model=FriendshipResponse, status_code=status.HTTP_201_CREATED)
async def send_request(
        data: FriendRequestCreate,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return await friendship_service.send_request(current_user, data.friend_id)


@router.post("/friends/{friend_id}/request", response_model=FriendshipResponse,
             status_code=status.HTTP_201_CREATED)
async def send_request_by_path(
        friend_id: str,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return await friendship_service.send_request(current_user, friend_id)


@router.delete("/friend-requests/{friend_id}", response_model=MessageResponse)
async def cancel_request(
        friend_id: str,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    friendship_service.cancel_request(current_user.id, friend_id)
    return {"message": "Friend request cancelled"}


@router.put("/friend-requests/{request_id}/accept", response_model=FriendshipResponse)
async def accept_request(
        request_id: int,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return await friendship_service.accept_request(request_id, current_user)


@router.put("/friend-requests/{request_id}/reject", response_model=MessageResponse)
async def reject_request(
        request_id: int,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    friendship_service.reject_request(request_id, current_user)
    return {"message": "Friend request rejected"}


@router.delete("/friends/{friend_id}", response_model=MessageResponse)
async def remove_friend(
        friend_id: str,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    friendship_service.remove_friendship(current_user.id, friend_id)
    return {"message": "Friend removed"}


@router.get("/friend-status/{user_id}", response_model=FriendStatus)
async def friend_status(
        user_id: str,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.query_status(current_user.id, user_id)


@router.get("/friends/{friend_id}/status", response_model=LegacyFriendStatus)
async def legacy_friend_status(
        friend_id: str,
        current_user: User = Depends(get_current_active_user),
        friendship_service: FriendshipService = Depends(get_friendship_service)
):
    return friendship_service.legacy_status(current_user.id, friend_id)
