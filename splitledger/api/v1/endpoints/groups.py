from typing import List
from fastapi import APIRouter, Depends, status

from splitledger.core.auth import get_current_user_id
from splitledger.schemas.group import GroupCreate, GroupMemberAdd, GroupResponse, MemberResponse
from splitledger.services.group_service import GroupService

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(group_in: GroupCreate, current_user_id: str = Depends(get_current_user_id)):
    group = await GroupService.create(group_in, current_user_id)
    return GroupResponse.from_model(group)


@router.get("", response_model=List[GroupResponse])
async def list_my_groups(current_user_id: str = Depends(get_current_user_id)):
    """Groups the current user belongs to"""
    groups = await GroupService.list_for_user(current_user_id)
    return [GroupResponse.from_model(g) for g in groups]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    group = await GroupService.get(group_id)
    return GroupResponse.from_model(group)


@router.get("/{group_id}/members", response_model=List[MemberResponse])
async def list_members(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    members = await GroupService.list_members(group_id)
    return [MemberResponse(id=str(m.id), name=m.display_name, email=m.email) for m in members]


@router.post("/{group_id}/members", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: str,
    member_in: GroupMemberAdd,
    current_user_id: str = Depends(get_current_user_id)
):
    """Append a member whose invitation was accepted"""
    group = await GroupService.add_member(group_id, member_in)
    return GroupResponse.from_model(group)
