"""
ExpenseRepository - expenses and their split rows.

An expense and its splits are written inside one transaction: either both
land or neither does, so an expense can never exist without its splits.
"""

import logging
from collections import defaultdict
from typing import List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from splitledger.core.exceptions import NotFoundError, RepositoryReadError, RepositoryWriteError
from splitledger.models.expense import Expense, ExpenseSplit, ExpenseWithSplits

logger = logging.getLogger(__name__)


class ExpenseRepository:
    """Repository for expenses and expense splits."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["expenses"]
        self.splits = db["expense_splits"]

    async def create_with_splits(
        self, expense: Expense, splits: List[ExpenseSplit]
    ) -> ExpenseWithSplits:
        """
        Insert an expense and its splits atomically.

        The expense is inserted first; split rows reference its id.
        Raises RepositoryWriteError and rolls back if either write fails.
        """
        for split in splits:
            split.expense_id = expense.id

        try:
            async with await self.db.client.start_session() as session:
                async with session.start_transaction():
                    await self.collection.insert_one(expense.to_document(), session=session)
                    if splits:
                        await self.splits.insert_many(
                            [split.to_document() for split in splits], session=session
                        )
        except PyMongoError:
            logger.exception("Failed to record expense %s", expense.id)
            raise RepositoryWriteError("Failed to record expense, try again")

        return ExpenseWithSplits(**expense.model_dump(), splits=splits)

    async def list_group_expenses(self, group_id: str) -> List[ExpenseWithSplits]:
        """All expenses of a group with their splits, newest expense date first."""
        if not ObjectId.is_valid(group_id):
            raise NotFoundError("Group not found")
        try:
            docs = await self.collection.find(
                {"group_id": ObjectId(group_id)}
            ).sort("expense_date", -1).to_list(None)

            expense_ids = [doc["_id"] for doc in docs]
            split_docs = []
            if expense_ids:
                split_docs = await self.splits.find(
                    {"expense_id": {"$in": expense_ids}}
                ).to_list(None)
        except PyMongoError:
            logger.exception("Failed to load expenses for group %s", group_id)
            raise RepositoryReadError()

        splits_by_expense = defaultdict(list)
        for doc in split_docs:
            splits_by_expense[doc["expense_id"]].append(ExpenseSplit(**doc))

        return [
            ExpenseWithSplits(**doc, splits=splits_by_expense.get(doc["_id"], []))
            for doc in docs
        ]
