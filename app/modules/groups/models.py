# In-memory collections: groups, members
# Records live in MemoryStore (app/database/memory_store.py) and are lost on restart.
# Operations are handled in service.py

"""
Record structure:

groups (keyed by id):
- id: text (6 chars from A-Z0-9, unique among live groups)
- name: text (defaults to "Group <id>")
- created_at: timestamp (UTC)
- expires_at: timestamp (nullable) - null means the group never expires
- refresh_interval: int (seconds, default 30) - client polling hint, not enforced

members (keyed by id):
- id: text (caller supplied, no collision check)
- group_id: text (reference to groups.id)
- display_name: text
- created_at: timestamp (UTC)
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel


class Group(BaseModel):
    id: str
    name: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    refresh_interval: Union[int, float] = 30

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now


class Member(BaseModel):
    id: str
    group_id: str
    display_name: str
    created_at: datetime
