from pydantic import Field, StrictFloat
from typing import List, Optional
from datetime import datetime

from app.core.schemas import CamelModel


class LocationUpdate(CamelModel):
    member_id: str = Field(min_length=1)
    # JSON numbers only; numeric strings and booleans are rejected
    lat: StrictFloat = Field(ge=-90, le=90)
    lng: StrictFloat = Field(ge=-180, le=180)
    sharing_enabled: Optional[bool] = None


class LocationResponse(CamelModel):
    member_id: str
    lat: float
    lng: float
    sharing_enabled: bool
    updated_at: datetime


class LocationUpdateResponse(CamelModel):
    success: bool = True
    location: LocationResponse


class GroupLocationResponse(CamelModel):
    member_id: str
    group_id: str
    display_name: str
    lat: float
    lng: float
    sharing_enabled: bool
    updated_at: datetime


class GroupLocationsResponse(CamelModel):
    success: bool = True
    locations: List[GroupLocationResponse]
