from decimal import Decimal
from typing import List

from pydantic import BaseModel, field_serializer

from splitledger.schemas.common import CurrencySchema
from splitledger.utils.money import quantize_money


class BalanceResponse(BaseModel):
    counterparty_id: str
    counterparty_name: str = ""
    amount: Decimal
    direction: str  # "owe" | "owed"

    @field_serializer("amount")
    def _round(self, value: Decimal):
        return quantize_money(value)


class BalanceSummaryResponse(BaseModel):
    total_owed: Decimal
    total_owe: Decimal
    net_balance: Decimal

    @field_serializer("total_owed", "total_owe", "net_balance")
    def _round(self, value: Decimal):
        return quantize_money(value)


class GroupBalancesResponse(BaseModel):
    group_id: str
    viewer_id: str
    currency: CurrencySchema
    balances: List[BalanceResponse] = []
    summary: BalanceSummaryResponse
    settled_up: bool


class TransferResponse(BaseModel):
    from_user_id: str
    to_user_id: str
    amount: Decimal

    @field_serializer("amount")
    def _round(self, value: Decimal):
        return quantize_money(value)
