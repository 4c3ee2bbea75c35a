from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotificationType(str, Enum):
    COMMUNITY_JOIN = "community_join"
    EVENT_JOIN = "event_join"
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPT = "friend_accept"
    MESSAGE = "message"
    SCHOOL_FAVORITE = "school_favorite"


class RelatedType(str, Enum):
    COMMUNITY = "community"
    EVENT = "event"
    USER = "user"
    SCHOOL = "school"
    MESSAGE = "message"


class NotificationItem(BaseModel):
    id: int = Field(..., description="Notification id", examples=[1])
    type: NotificationType = Field(..., description="Notification type", examples=["friend_request"])
    title: str = Field(..., description="Title", examples=["New Friend Request"])
    message: str = Field(..., description="Body text", examples=["Jane Doe sent you a friend request"])
    related_id: Optional[str] = Field(None, description="Id of the referenced object", examples=["alice"])
    related_type: Optional[RelatedType] = Field(None, description="Kind of the referenced object")
    is_read: bool = Field(default=False, description="Read flag")
    created_at: Optional[datetime] = Field(None, description="Creation time")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )


class UnreadCount(BaseModel):
    count: int
