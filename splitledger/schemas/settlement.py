from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field, field_serializer

from splitledger.models.settlement import PaymentMethod, SettlementStatus
from splitledger.schemas.common import CurrencySchema
from splitledger.utils.money import quantize_money


class SettlementCreate(BaseModel):
    payer_id: str
    receiver_id: str
    amount: Union[str, float]
    currency: Optional[CurrencySchema] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = Field(None, max_length=500)


class SettlementResponse(BaseModel):
    id: str
    group_id: str
    payer_id: str
    receiver_id: str
    amount: Decimal
    currency: CurrencySchema
    status: SettlementStatus
    payment_method: PaymentMethod
    notes: Optional[str] = None
    settled_at: Optional[datetime] = None
    created_at: datetime

    @field_serializer("amount")
    def _round(self, value: Decimal):
        return quantize_money(value)

    @classmethod
    def from_model(cls, settlement) -> "SettlementResponse":
        return cls(
            id=str(settlement.id),
            group_id=str(settlement.group_id),
            payer_id=str(settlement.payer_id),
            receiver_id=str(settlement.receiver_id),
            amount=settlement.amount,
            currency=CurrencySchema(**settlement.currency.model_dump()),
            status=settlement.status,
            payment_method=settlement.payment_method,
            notes=settlement.notes,
            settled_at=settlement.settled_at,
            created_at=settlement.created_at,
        )
