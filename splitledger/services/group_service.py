import logging
from typing import List

from bson import ObjectId

from splitledger.core.config import settings
from splitledger.core.exceptions import NotGroupMember
from splitledger.db.session import get_database
from splitledger.models.base import Currency
from splitledger.models.group import Group, GroupMember, MemberRole
from splitledger.models.member import Member
from splitledger.repositories.group_repo import GroupRepository
from splitledger.schemas.group import GroupCreate, GroupMemberAdd

logger = logging.getLogger(__name__)


def default_currency() -> Currency:
    return Currency(code=settings.DEFAULT_CURRENCY_CODE, symbol=settings.DEFAULT_CURRENCY_SYMBOL)


class GroupService:
    @staticmethod
    async def create(group_in: GroupCreate, owner_id: str) -> Group:
        """Create a group; the creator becomes its single owner."""
        db = await get_database()

        currency = (
            Currency(**group_in.default_currency.model_dump())
            if group_in.default_currency
            else default_currency()
        )
        group = Group(
            name=group_in.name,
            description=group_in.description,
            category=group_in.category,
            owner_id=ObjectId(owner_id),
            default_currency=currency,
            members=[GroupMember(user_id=ObjectId(owner_id), role=MemberRole.OWNER)],
        )

        group = await GroupRepository(db).create_group(group)
        logger.info("Created group %s owned by %s", group.id, owner_id)
        return group

    @staticmethod
    async def get(group_id: str) -> Group:
        db = await get_database()
        return await GroupRepository(db).get_group(group_id)

    @staticmethod
    async def list_for_user(user_id: str) -> List[Group]:
        db = await get_database()
        return await GroupRepository(db).list_groups_for_user(user_id)

    @staticmethod
    async def list_members(group_id: str) -> List[Member]:
        db = await get_database()
        return await GroupRepository(db).list_members(group_id)

    @staticmethod
    async def add_member(group_id: str, member_in: GroupMemberAdd) -> Group:
        """Append a member after an invitation was accepted. The owner role cannot be granted."""
        if not ObjectId.is_valid(member_in.user_id):
            raise NotGroupMember(f"Invalid member id: {member_in.user_id}")
        role = MemberRole.MEMBER if member_in.role == MemberRole.OWNER else member_in.role

        db = await get_database()
        group = await GroupRepository(db).add_member(
            group_id, GroupMember(user_id=ObjectId(member_in.user_id), role=role)
        )
        logger.info("Member %s joined group %s as %s", member_in.user_id, group_id, role.value)
        return group


def ensure_members(group: Group, *user_ids: str) -> None:
    """Raise NotGroupMember unless every id belongs to the group."""
    for user_id in user_ids:
        if not group.has_member(user_id):
            raise NotGroupMember(f"Member {user_id} does not belong to this group")
