from pydantic import Field
from typing import Optional, Union
from datetime import datetime

from app.core.schemas import CamelModel

MAX_EXPIRY_HOURS = 100 * 365 * 24


class GroupCreate(CamelModel):
    name: Optional[str] = None
    refresh_interval: Optional[Union[int, float]] = None  # stored as given, not enforced
    # hours: 0/None = never expires, negative = already expired; bounded so the clock cannot overflow
    expiry_duration: Optional[float] = Field(default=None, ge=-MAX_EXPIRY_HOURS, le=MAX_EXPIRY_HOURS)


class GroupResponse(CamelModel):
    id: str
    name: str
    refresh_interval: Union[int, float]
    expires_at: Optional[datetime] = None


class GroupCreateResponse(CamelModel):
    success: bool = True
    group: GroupResponse


class GroupJoin(CamelModel):
    member_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)


class MemberResponse(CamelModel):
    id: str
    display_name: str
    group_id: str


class GroupJoinResponse(CamelModel):
    success: bool = True
    member: MemberResponse
    group: GroupResponse


class GroupDeleteResponse(CamelModel):
    success: bool = True
    message: str
