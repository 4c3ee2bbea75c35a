from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.api.profile.schemas import UserShort


class FriendshipStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    # Reserved, no operation produces it
    BLOCKED = "blocked"


class RelationshipState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    FRIENDS = "friends"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )


class FriendRequestCreate(CamelModel):
    friend_id: str = Field(..., min_length=1, description="Identity of the recipient")


class FriendshipResponse(CamelModel):
    id: int = Field(gt=0)
    requester_id: str
    recipient_id: str
    requested_by: str
    status: FriendshipStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FriendEntry(FriendshipResponse):
    """An accepted friendship or a sent request, seen from one side."""
    friend: UserShort


class IncomingRequestEntry(FriendshipResponse):
    requester: UserShort


class FriendStatus(CamelModel):
    status: RelationshipState
    # Set only while pending, so the UI can pick cancel vs accept/reject
    requested_by: Optional[str] = None
    request_id: Optional[int] = None


class LegacyFriendStatus(CamelModel):
    are_friends: bool
    has_pending_request: bool


class MessageResponse(BaseModel):
    message: str
