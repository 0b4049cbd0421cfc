from typing import List
from fastapi import APIRouter, Depends

from splitledger.core.auth import get_current_user_id
from splitledger.schemas.balance import (
    BalanceResponse,
    BalanceSummaryResponse,
    GroupBalancesResponse,
    TransferResponse,
)
from splitledger.schemas.common import CurrencySchema
from splitledger.services.balance_service import BalanceService
from splitledger.services.group_service import GroupService

router = APIRouter()


@router.get("/{group_id}/balances", response_model=GroupBalancesResponse)
async def get_my_balances(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    """Current user's balances with every other member of the group"""
    result = await BalanceService.for_viewer(group_id, current_user_id)
    names = {str(m.id): m.display_name for m in await GroupService.list_members(group_id)}

    return GroupBalancesResponse(
        group_id=group_id,
        viewer_id=current_user_id,
        currency=CurrencySchema(**result.group.default_currency.model_dump()),
        balances=[
            BalanceResponse(
                counterparty_id=b.counterparty_id,
                counterparty_name=names.get(b.counterparty_id, ""),
                amount=b.amount,
                direction=b.direction.value,
            )
            for b in result.balances
        ],
        summary=BalanceSummaryResponse(
            total_owed=result.summary.total_owed,
            total_owe=result.summary.total_owe,
            net_balance=result.summary.net_balance,
        ),
        settled_up=not result.balances,
    )


@router.get("/{group_id}/transfers", response_model=List[TransferResponse])
async def get_suggested_transfers(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    """Payments that would settle the whole group"""
    transfers = await BalanceService.suggested_transfers(group_id)
    return [
        TransferResponse(from_user_id=t.from_user_id, to_user_id=t.to_user_id, amount=t.amount)
        for t in transfers
    ]
