from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from splitledger.models.base import MongoModel, PyObjectId, Currency


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK = "bank"
    UPI = "upi"
    OTHER = "other"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.BANK: "Bank Transfer",
    PaymentMethod.UPI: "UPI",
    PaymentMethod.OTHER: "Other",
}


class Settlement(MongoModel):
    """
    A real-world payment: payer_id paid receiver_id amount.

    Free-standing record, not linked to individual split rows.
    """
    group_id: PyObjectId
    payer_id: PyObjectId
    receiver_id: PyObjectId
    amount: Decimal
    currency: Currency
    status: SettlementStatus = SettlementStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None
    settled_at: Optional[datetime] = None
