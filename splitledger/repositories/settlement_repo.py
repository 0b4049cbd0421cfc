import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from splitledger.core.exceptions import NotFoundError, RepositoryReadError, RepositoryWriteError
from splitledger.models.settlement import Settlement, SettlementStatus

logger = logging.getLogger(__name__)


class SettlementRepository:
    """Settlement database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settlements"]

    async def create(self, settlement: Settlement) -> Settlement:
        try:
            result = await self.collection.insert_one(settlement.to_document())
        except PyMongoError:
            logger.exception("Failed to insert settlement for group %s", settlement.group_id)
            raise RepositoryWriteError("Failed to record settlement, try again")
        settlement.id = result.inserted_id
        return settlement

    async def get(self, settlement_id: str) -> Settlement:
        if not ObjectId.is_valid(settlement_id):
            raise NotFoundError("Settlement not found")
        try:
            doc = await self.collection.find_one({"_id": ObjectId(settlement_id)})
        except PyMongoError:
            logger.exception("Failed to read settlement %s", settlement_id)
            raise RepositoryReadError()
        if not doc:
            raise NotFoundError("Settlement not found")
        return Settlement(**doc)

    async def list_group_settlements(
        self, group_id: str, status: Optional[SettlementStatus] = None
    ) -> List[Settlement]:
        """Settlements of a group, most recent first."""
        if not ObjectId.is_valid(group_id):
            raise NotFoundError("Group not found")
        query = {"group_id": ObjectId(group_id)}
        if status is not None:
            query["status"] = status.value
        try:
            docs = await self.collection.find(query).sort("created_at", -1).to_list(None)
        except PyMongoError:
            logger.exception("Failed to load settlements for group %s", group_id)
            raise RepositoryReadError()
        return [Settlement(**doc) for doc in docs]

    async def update_status(self, settlement_id: str, status: SettlementStatus) -> Settlement:
        if not ObjectId.is_valid(settlement_id):
            raise NotFoundError("Settlement not found")
        try:
            result = await self.collection.find_one_and_update(
                {"_id": ObjectId(settlement_id)},
                {"$set": {"status": status.value, "updated_at": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError:
            logger.exception("Failed to update settlement %s", settlement_id)
            raise RepositoryWriteError("Failed to update settlement, try again")
        if not result:
            raise NotFoundError("Settlement not found")
        return Settlement(**result)
