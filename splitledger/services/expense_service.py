import logging
from typing import List

from bson import ObjectId

from splitledger.db.session import get_database
from splitledger.models.base import Currency
from splitledger.models.expense import Expense, ExpenseSplit, ExpenseWithSplits, SplitType
from splitledger.repositories.expense_repo import ExpenseRepository
from splitledger.repositories.group_repo import GroupRepository
from splitledger.schemas.expense import ExpenseCreate
from splitledger.services.group_service import ensure_members
from splitledger.services.split_allocator import allocate_splits
from splitledger.utils.money import parse_positive_amount

logger = logging.getLogger(__name__)


class ExpenseService:
    @staticmethod
    async def create(group_id: str, expense_in: ExpenseCreate, created_by: str) -> ExpenseWithSplits:
        """
        Allocate splits and persist the expense together with them.

        Validation (amounts, participants, membership) happens before any
        write; the expense and its splits are then stored in one transaction.
        """
        db = await get_database()
        group = await GroupRepository(db).get_group(group_id)

        allocations = allocate_splits(expense_in.amount, expense_in.split, expense_in.participants)
        ensure_members(group, expense_in.paid_by, *[a.user_id for a in allocations])

        currency = (
            Currency(**expense_in.currency.model_dump())
            if expense_in.currency
            else group.default_currency
        )
        expense = Expense(
            group_id=group.id,
            description=expense_in.description.strip(),
            amount=parse_positive_amount(expense_in.amount),
            currency=currency,
            paid_by=ObjectId(expense_in.paid_by),
            split_type=SplitType(expense_in.split.type),
            expense_date=expense_in.expense_date,
            category=expense_in.category,
            notes=(expense_in.notes or "").strip() or None,
            created_by=ObjectId(created_by),
        )
        splits = [
            ExpenseSplit(
                expense_id=expense.id,
                user_id=ObjectId(a.user_id),
                amount=a.amount,
                percentage=a.percentage,
            )
            for a in allocations
        ]

        saved = await ExpenseRepository(db).create_with_splits(expense, splits)
        logger.info(
            "Recorded expense %s (%s %s, %s split) in group %s",
            saved.id, saved.amount, currency.code, saved.split_type.value, group_id,
        )
        return saved

    @staticmethod
    async def list_for_group(group_id: str) -> List[ExpenseWithSplits]:
        db = await get_database()
        return await ExpenseRepository(db).list_group_expenses(group_id)
