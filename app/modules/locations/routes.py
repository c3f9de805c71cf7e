from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_store
from app.database.memory_store import MemoryStore
from app.modules.groups.service import GroupService
from app.modules.locations.schemas import (
    LocationUpdate, LocationResponse, LocationUpdateResponse,
    GroupLocationResponse, GroupLocationsResponse
)
from app.modules.locations.service import LocationService

router = APIRouter(prefix="/groups", tags=["locations"])


def get_location_service(store: MemoryStore = Depends(get_store)) -> LocationService:
    return LocationService(store)


def get_group_service(store: MemoryStore = Depends(get_store)) -> GroupService:
    return GroupService(store)


@router.post("/{group_id}/locations", response_model=LocationUpdateResponse)
async def update_location(
    group_id: str,
    location_data: LocationUpdate,
    service: LocationService = Depends(get_location_service)
):
    """Publish the caller's latest position to the group"""
    sharing_enabled = True if location_data.sharing_enabled is None else location_data.sharing_enabled
    location = service.update_location(
        location_data.member_id,
        group_id,
        location_data.lat,
        location_data.lng,
        sharing_enabled
    )
    if location is None:
        raise HTTPException(status_code=404, detail="Member not found in this group")

    return LocationUpdateResponse(location=LocationResponse(**location.model_dump()))


@router.get("/{group_id}/locations", response_model=GroupLocationsResponse)
async def list_locations(
    group_id: str,
    service: LocationService = Depends(get_location_service),
    group_service: GroupService = Depends(get_group_service)
):
    """Latest position of every member in the group.

    Positions of members with sharing disabled are returned as stored;
    clients are expected to hide them.
    """
    if not group_service.group_exists(group_id):
        raise HTTPException(status_code=404, detail="Group not found")

    locations = service.get_group_locations(group_id)
    return GroupLocationsResponse(
        locations=[GroupLocationResponse(**location.model_dump()) for location in locations]
    )
