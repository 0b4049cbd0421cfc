"""
Expense and split documents.

An expense owns its split rows: one ExpenseSplit per participant, written in
the same transaction as the expense and never changed afterwards.

Invariants (checked by the split allocator before persisting):
- sum(split.amount) == expense.amount within 0.01
- sum(split.percentage) == 100 within 0.01
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from splitledger.models.base import MongoModel, PyObjectId, Currency


class SplitType(str, Enum):
    EQUAL = "equal"
    CUSTOM = "custom"
    PERCENTAGE = "percentage"


class Expense(MongoModel):
    group_id: PyObjectId
    description: str
    amount: Decimal
    currency: Currency
    paid_by: PyObjectId
    split_type: SplitType
    # Stored as an ISO string; BSON has no date-only type
    expense_date: date
    category: str = "general"
    notes: Optional[str] = None
    created_by: Optional[PyObjectId] = None

    def to_document(self) -> dict:
        doc = super().to_document()
        doc["expense_date"] = self.expense_date.isoformat()
        return doc


class ExpenseSplit(MongoModel):
    expense_id: PyObjectId
    user_id: PyObjectId  # debtor
    amount: Decimal
    percentage: Optional[Decimal] = None
    is_settled: bool = False


class ExpenseWithSplits(Expense):
    """Expense joined with its split rows, the unit the balance engine folds over."""
    splits: List[ExpenseSplit] = Field(default_factory=list)
