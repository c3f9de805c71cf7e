import asyncio
import logging
from app.database.memory_store import MemoryStore
from app.modules.groups.service import GroupService

logger = logging.getLogger(__name__)


async def check_and_remove_expired_groups(store: MemoryStore) -> int:
    """Remove expired groups (with their members and locations). Never raises."""
    try:
        removed = GroupService(store).cleanup_expired_groups()
        if not removed:
            logger.debug("No expired groups found")
        return removed
    except Exception as e:
        logger.error(f"Error removing expired groups: {str(e)}")
        return 0


async def ttl_scheduler_loop(store: MemoryStore, interval_seconds: int = 300):
    """Background task that periodically removes expired groups.

    Inactive member locations are not swept here; LocationService.cleanup_inactive_members
    is only run on demand.
    """
    while True:
        try:
            await check_and_remove_expired_groups(store)
        except Exception as e:
            logger.error(f"Error in TTL scheduler loop: {str(e)}")

        await asyncio.sleep(interval_seconds)
