import logging
from datetime import timedelta
from typing import List, Optional

from app.database.memory_store import MemoryStore
from app.modules.locations.models import GroupLocation, Location

logger = logging.getLogger(__name__)

DEFAULT_INACTIVE_THRESHOLD_MS = 5 * 60 * 1000
UNKNOWN_DISPLAY_NAME = "Unknown"


class LocationService:
    def __init__(self, store: MemoryStore):
        self.store = store

    def update_location(
        self,
        member_id: str,
        group_id: str,
        lat: float,
        lng: float,
        sharing_enabled: bool = True
    ) -> Optional[Location]:
        """Replace the member's latest position.

        Returns None when the member is unknown or belongs to a different group.

        NOTE: updated_at is taken from the member's first update and kept on
        every later one, so it means "sharing since" rather than "last seen".
        cleanup_inactive_members relies on this value; changing it changes
        what that sweep removes.
        """
        with self.store.lock:
            member = self.store.members.get(member_id)
            if member is None or member.group_id != group_id:
                return None

            existing = self.store.locations.get(member_id)
            location = Location(
                member_id=member_id,
                group_id=group_id,
                lat=lat,
                lng=lng,
                sharing_enabled=sharing_enabled,
                updated_at=existing.updated_at if existing else self.store.now()
            )
            self.store.locations[member_id] = location
        logger.debug(f"Updated location for {member.display_name}: ({lat}, {lng}) [sharing: {sharing_enabled}]")
        return location

    def get_group_locations(self, group_id: str) -> List[GroupLocation]:
        """All latest positions in a group with the member's display name attached"""
        with self.store.lock:
            result = []
            for location in self.store.locations.values():
                if location.group_id != group_id:
                    continue
                member = self.store.members.get(location.member_id)
                data = location.model_dump()
                data["display_name"] = member.display_name if member else UNKNOWN_DISPLAY_NAME
                if data["sharing_enabled"] is None:
                    data["sharing_enabled"] = True
                result.append(GroupLocation(**data))
            return result

    def cleanup_inactive_members(self, threshold_ms: int = DEFAULT_INACTIVE_THRESHOLD_MS) -> int:
        """Drop locations whose updated_at is at least threshold_ms old. Returns the count removed.

        Since updated_at never advances, this measures time since the first
        share, not time since the last update. A threshold of 0 removes every
        stored location.
        """
        with self.store.lock:
            cutoff = self.store.now() - timedelta(milliseconds=threshold_ms)
            inactive = [
                member_id for member_id, location in self.store.locations.items()
                # <= rather than strictly older, so threshold_ms=0 clears everything under a frozen clock
                if location.updated_at <= cutoff
            ]
            for member_id in inactive:
                del self.store.locations[member_id]
        if inactive:
            logger.info(f"Cleaned up {len(inactive)} inactive member locations")
        return len(inactive)
