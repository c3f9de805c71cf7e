import logging
import random
import string
from datetime import timedelta
from typing import Callable, List, Optional, Union

from app.database.memory_store import MemoryStore
from app.modules.groups.models import Group, Member

logger = logging.getLogger(__name__)

GROUP_ID_ALPHABET = string.ascii_uppercase + string.digits
GROUP_ID_LENGTH = 6
MAX_GROUP_ID_ATTEMPTS = 1000
DEFAULT_REFRESH_INTERVAL = 30


class GroupIdExhaustedError(RuntimeError):
    """No free group id was found within MAX_GROUP_ID_ATTEMPTS draws."""


def generate_group_id(is_taken: Callable[[str], bool], rng=random) -> str:
    """Draw a 6 char code from A-Z0-9, redrawing the whole code on collision.

    Not suitable as a secret: group codes are meant to be shared.
    """
    for _ in range(MAX_GROUP_ID_ATTEMPTS):
        group_id = "".join(rng.choice(GROUP_ID_ALPHABET) for _ in range(GROUP_ID_LENGTH))
        if not is_taken(group_id):
            return group_id
    raise GroupIdExhaustedError(f"No free group id after {MAX_GROUP_ID_ATTEMPTS} attempts")


class GroupService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def create_group(
        self,
        name: Optional[str] = None,
        refresh_interval: Optional[Union[int, float]] = DEFAULT_REFRESH_INTERVAL,
        expiry_duration_hours: Optional[float] = None
    ) -> Group:
        """Create a new group.

        expiry_duration_hours of None or 0 means it never expires; a negative
        value gives a group that is already expired and goes at the next sweep.
        """
        if refresh_interval is None:
            refresh_interval = DEFAULT_REFRESH_INTERVAL
        with self.store.lock:
            group_id = generate_group_id(self.group_exists)
            created_at = self.store.now()
            expires_at = None
            if expiry_duration_hours:
                expires_at = created_at + timedelta(hours=expiry_duration_hours)
            group = Group(
                id=group_id,
                name=name or f"Group {group_id}",
                created_at=created_at,
                expires_at=expires_at,
                refresh_interval=refresh_interval
            )
            self.store.groups[group_id] = group
        if expires_at:
            logger.info(f"Created group {group_id} ({group.name}), expires at {expires_at.isoformat()}")
        else:
            logger.info(f"Created group {group_id} ({group.name})")
        return group

    def get_group(self, group_id: str) -> Optional[Group]:
        with self.store.lock:
            return self.store.groups.get(group_id)

    def group_exists(self, group_id: str) -> bool:
        with self.store.lock:
            return group_id in self.store.groups

    def delete_group(self, group_id: str) -> bool:
        """Delete a group together with its members and their locations"""
        with self.store.lock:
            if group_id not in self.store.groups:
                return False

            group_members = self.get_group_members(group_id)
            for member in group_members:
                self.store.members.pop(member.id, None)
                self.store.locations.pop(member.id, None)

            # Locations left behind by members that re-joined another group
            stale = [
                member_id for member_id, location in self.store.locations.items()
                if location.group_id == group_id
            ]
            for member_id in stale:
                del self.store.locations[member_id]

            del self.store.groups[group_id]
        logger.info(f"Deleted group {group_id} and {len(group_members)} members")
        return True

    def add_member(self, group_id: str, member_id: str, display_name: str) -> Optional[Member]:
        """Add a member to the group.

        An existing member with the same id is replaced without warning,
        even if it belongs to another group.
        """
        with self.store.lock:
            if group_id not in self.store.groups:
                return None
            member = Member(
                id=member_id,
                group_id=group_id,
                display_name=display_name,
                created_at=self.store.now()
            )
            self.store.members[member_id] = member
        logger.info(f"Member {display_name} ({member_id}) joined group {group_id}")
        return member

    def get_member(self, member_id: str) -> Optional[Member]:
        with self.store.lock:
            return self.store.members.get(member_id)

    def get_group_members(self, group_id: str) -> List[Member]:
        """List all members of a group in join order"""
        with self.store.lock:
            return [m for m in self.store.members.values() if m.group_id == group_id]

    def cleanup_expired_groups(self) -> int:
        """Cascade-delete every group whose expires_at is in the past. Returns the count removed."""
        with self.store.lock:
            now = self.store.now()
            expired = [g.id for g in self.store.groups.values() if g.is_expired(now)]
            for group_id in expired:
                self.delete_group(group_id)
        if expired:
            logger.info(f"Cleaned up {len(expired)} expired groups")
        return len(expired)
