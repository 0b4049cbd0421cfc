from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from splitledger.models.base import MongoModel, PyObjectId, Currency, utcnow


class GroupCategory(str, Enum):
    TRIP = "trip"
    HOME = "home"
    COUPLE = "couple"
    FRIENDS = "friends"
    OFFICE = "office"
    OTHER = "other"


class MemberRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


# Embedded in the group document, no separate _id
class GroupMember(BaseModel):
    user_id: PyObjectId
    role: MemberRole = MemberRole.MEMBER
    joined_at: datetime = Field(default_factory=utcnow)


class Group(MongoModel):
    name: str
    description: Optional[str] = None
    category: GroupCategory = GroupCategory.OTHER
    owner_id: PyObjectId
    default_currency: Currency
    members: List[GroupMember] = []

    def member_ids(self) -> List[PyObjectId]:
        return [m.user_id for m in self.members]

    def has_member(self, user_id) -> bool:
        return any(str(m.user_id) == str(user_id) for m in self.members)
