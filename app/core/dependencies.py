"""
Core dependencies shared by the route modules
"""

from fastapi import Request

from app.database.memory_store import MemoryStore


def get_store(request: Request) -> MemoryStore:
    """Return the store owned by the running application instance."""
    return request.app.state.store
