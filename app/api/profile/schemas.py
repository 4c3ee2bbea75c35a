from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserShort(BaseModel):
    """Short public profile, embedded in friend and request lists."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    id: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    profile_image_url: Optional[str] = None
    city: Optional[str] = None


class UserProfile(UserShort):
    email: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
