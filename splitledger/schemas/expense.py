from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ConfigDict, field_serializer

from splitledger.models.expense import SplitType
from splitledger.schemas.common import CurrencySchema
from splitledger.utils.money import quantize_money


# Split instructions: a closed tagged union, dispatched on "type"

class EqualSplit(BaseModel):
    type: Literal["equal"] = "equal"


class CustomSplit(BaseModel):
    type: Literal["custom"] = "custom"
    amounts: Dict[str, Union[str, float]] = {}  # participant id -> amount as entered


class PercentageSplit(BaseModel):
    type: Literal["percentage"] = "percentage"
    percentages: Dict[str, Union[str, float]] = {}  # participant id -> percent as entered


SplitSpec = Annotated[
    Union[EqualSplit, CustomSplit, PercentageSplit],
    Field(discriminator="type"),
]


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Union[str, float]  # parsed by the allocator so bad input maps to InvalidAmount
    paid_by: str
    participants: List[str]
    split: SplitSpec = Field(default_factory=EqualSplit)
    currency: Optional[CurrencySchema] = None  # defaults to the group's currency
    expense_date: date = Field(default_factory=date.today)
    category: str = "general"
    notes: Optional[str] = None


class ExpenseSplitResponse(BaseModel):
    id: str
    user_id: str
    amount: Decimal
    percentage: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("amount", "percentage")
    def _round(self, value: Optional[Decimal]):
        return None if value is None else quantize_money(value)


class ExpenseResponse(BaseModel):
    id: str
    group_id: str
    description: str
    amount: Decimal
    currency: CurrencySchema
    paid_by: str
    split_type: SplitType
    expense_date: date
    category: str
    notes: Optional[str] = None
    splits: List[ExpenseSplitResponse] = []
    created_at: datetime

    @field_serializer("amount")
    def _round(self, value: Decimal):
        return quantize_money(value)

    @classmethod
    def from_model(cls, expense) -> "ExpenseResponse":
        return cls(
            id=str(expense.id),
            group_id=str(expense.group_id),
            description=expense.description,
            amount=expense.amount,
            currency=CurrencySchema(**expense.currency.model_dump()),
            paid_by=str(expense.paid_by),
            split_type=expense.split_type,
            expense_date=expense.expense_date,
            category=expense.category,
            notes=expense.notes,
            splits=[
                ExpenseSplitResponse(
                    id=str(s.id),
                    user_id=str(s.user_id),
                    amount=s.amount,
                    percentage=s.percentage,
                )
                for s in getattr(expense, "splits", [])
            ],
            created_at=expense.created_at,
        )
