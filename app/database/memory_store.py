"""Process-local store for groups, members and locations. Nothing is persisted."""
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from app.modules.groups.models import Group, Member
from app.modules.locations.models import Location


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    """Owns the three collections and the single lock guarding them.

    Every logical operation (including cascade deletes and sweeps) must hold
    ``lock`` for its whole duration; per-collection locking would break the
    group -> member -> location invariants.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.groups: Dict[str, Group] = {}
        self.members: Dict[str, Member] = {}
        self.locations: Dict[str, Location] = {}
        self.lock = threading.RLock()
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()
