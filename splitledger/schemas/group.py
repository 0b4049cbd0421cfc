from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from splitledger.models.group import GroupCategory, MemberRole
from splitledger.schemas.common import CurrencySchema


class GroupCreate(BaseModel):
    """Group creation schema."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: GroupCategory = GroupCategory.OTHER
    default_currency: Optional[CurrencySchema] = None


class GroupMemberAdd(BaseModel):
    """Append a member whose invitation was accepted upstream."""
    user_id: str
    role: MemberRole = MemberRole.MEMBER


class GroupMemberResponse(BaseModel):
    user_id: str
    role: MemberRole
    joined_at: datetime


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: GroupCategory
    owner_id: str
    default_currency: CurrencySchema
    members: List[GroupMemberResponse] = []
    created_at: datetime

    @classmethod
    def from_model(cls, group) -> "GroupResponse":
        return cls(
            id=str(group.id),
            name=group.name,
            description=group.description,
            category=group.category,
            owner_id=str(group.owner_id),
            default_currency=CurrencySchema(**group.default_currency.model_dump()),
            members=[
                GroupMemberResponse(user_id=str(m.user_id), role=m.role, joined_at=m.joined_at)
                for m in group.members
            ],
            created_at=group.created_at,
        )


class MemberResponse(BaseModel):
    """Member profile."""
    id: str
    name: str
    email: str
