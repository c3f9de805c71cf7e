from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_store
from app.database.memory_store import MemoryStore
from app.modules.groups.schemas import (
    GroupCreate, GroupResponse, GroupCreateResponse,
    GroupJoin, GroupJoinResponse, MemberResponse,
    GroupDeleteResponse
)
from app.modules.groups.service import GroupService
from typing import Optional

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(store: MemoryStore = Depends(get_store)) -> GroupService:
    return GroupService(store)


@router.post("", response_model=GroupCreateResponse, status_code=201)
async def create_group(
    group_data: Optional[GroupCreate] = None,
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the returned id is the code other members join with"""
    group_data = group_data or GroupCreate()
    group = service.create_group(
        name=group_data.name,
        refresh_interval=group_data.refresh_interval,
        expiry_duration_hours=group_data.expiry_duration
    )
    return GroupCreateResponse(group=GroupResponse(**group.model_dump()))


@router.post("/{group_id}/join", response_model=GroupJoinResponse)
async def join_group(
    group_id: str,
    join_data: GroupJoin,
    service: GroupService = Depends(get_group_service)
):
    """Join an existing group"""
    if not service.group_exists(group_id):
        raise HTTPException(status_code=404, detail="Group not found. Please check the group ID and try again.")

    member = service.add_member(group_id, join_data.member_id, join_data.display_name)
    group = service.get_group(group_id)
    if member is None or group is None:
        # Deleted or expired between the existence check and the join
        raise HTTPException(status_code=404, detail="Group not found")

    return GroupJoinResponse(
        member=MemberResponse(**member.model_dump()),
        group=GroupResponse(**group.model_dump())
    )


@router.delete("/{group_id}", response_model=GroupDeleteResponse)
async def delete_group(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """Delete a group with all of its members and locations"""
    if not service.group_exists(group_id):
        raise HTTPException(status_code=404, detail="Group not found")

    if not service.delete_group(group_id):
        raise HTTPException(status_code=404, detail="Group not found")
    return GroupDeleteResponse(message="Group deleted successfully")
