# In-memory collection: locations
# Records live in MemoryStore (app/database/memory_store.py) and are lost on restart.
# Operations are handled in service.py

"""
Record structure:

locations (keyed by member_id, one per member, replaced on update):
- member_id: text (reference to members.id)
- group_id: text (copy of the member's group_id, checked on update)
- lat: float [-90, 90]
- lng: float [-180, 180]
- sharing_enabled: bool (nullable, treated as true when missing)
- updated_at: timestamp (UTC) - set on the first update for a member and
  kept unchanged afterwards, so it reads as "sharing since"
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Location(BaseModel):
    member_id: str
    group_id: str
    lat: float
    lng: float
    sharing_enabled: Optional[bool] = True
    updated_at: datetime


class GroupLocation(Location):
    display_name: str
