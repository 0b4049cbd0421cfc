import logging
from datetime import datetime, timezone
from typing import List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from splitledger.core.exceptions import NotFoundError, RepositoryReadError, RepositoryWriteError
from splitledger.models.group import Group, GroupMember
from splitledger.models.member import Member

logger = logging.getLogger(__name__)


class GroupRepository:
    """Group and membership database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]
        self.users = db["users"]

    async def create_group(self, group: Group) -> Group:
        """Insert a new group document."""
        try:
            result = await self.collection.insert_one(group.to_document())
        except PyMongoError:
            logger.exception("Failed to insert group %s", group.name)
            raise RepositoryWriteError("Failed to create group, try again")
        group.id = result.inserted_id
        return group

    async def get_group(self, group_id: str) -> Group:
        """Get a group by id. Raises NotFoundError if missing."""
        if not ObjectId.is_valid(group_id):
            raise NotFoundError("Group not found")
        try:
            doc = await self.collection.find_one({"_id": ObjectId(group_id)})
        except PyMongoError:
            logger.exception("Failed to read group %s", group_id)
            raise RepositoryReadError()
        if not doc:
            raise NotFoundError("Group not found")
        return Group(**doc)

    async def list_groups_for_user(self, user_id: str) -> List[Group]:
        """Groups the user belongs to, newest first."""
        if not ObjectId.is_valid(user_id):
            return []
        try:
            docs = await self.collection.find(
                {"members.user_id": ObjectId(user_id)}
            ).sort("created_at", -1).to_list(None)
        except PyMongoError:
            logger.exception("Failed to list groups for %s", user_id)
            raise RepositoryReadError()
        return [Group(**doc) for doc in docs]

    async def add_member(self, group_id: str, member: GroupMember) -> Group:
        """
        Append a member. Membership is append-only; adding an existing
        member leaves the group unchanged.
        """
        if not ObjectId.is_valid(group_id):
            raise NotFoundError("Group not found")
        try:
            result = await self.collection.find_one_and_update(
                {
                    "_id": ObjectId(group_id),
                    "members.user_id": {"$ne": member.user_id},
                },
                {
                    "$push": {"members": member.model_dump()},
                    "$set": {"updated_at": datetime.now(timezone.utc)},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError:
            logger.exception("Failed to add member to group %s", group_id)
            raise RepositoryWriteError("Failed to add member, try again")
        if result:
            return Group(**result)
        # Either the group is missing or the member is already in it
        return await self.get_group(group_id)

    async def list_members(self, group_id: str) -> List[Member]:
        """Member profiles for a group, in join order."""
        group = await self.get_group(group_id)
        ids = group.member_ids()
        try:
            docs = await self.users.find({"_id": {"$in": ids}}).to_list(None)
        except PyMongoError:
            logger.exception("Failed to load members of group %s", group_id)
            raise RepositoryReadError()
        by_id = {doc["_id"]: Member(**doc) for doc in docs}
        return [by_id[uid] for uid in ids if uid in by_id]
