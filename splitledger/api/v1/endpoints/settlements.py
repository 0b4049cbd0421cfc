from typing import List
from fastapi import APIRouter, Depends, status

from splitledger.core.auth import get_current_user_id
from splitledger.schemas.settlement import SettlementCreate, SettlementResponse
from splitledger.services.settlement_service import SettlementService

router = APIRouter()


@router.post(
    "/groups/{group_id}/settlements",
    response_model=SettlementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_settlement(
    group_id: str,
    settlement_in: SettlementCreate,
    current_user_id: str = Depends(get_current_user_id)
):
    settlement = await SettlementService.record(group_id, settlement_in)
    return SettlementResponse.from_model(settlement)


@router.get("/groups/{group_id}/settlements", response_model=List[SettlementResponse])
async def list_settlements(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    settlements = await SettlementService.list_for_group(group_id)
    return [SettlementResponse.from_model(s) for s in settlements]


@router.post("/settlements/{settlement_id}/cancel", response_model=SettlementResponse)
async def cancel_settlement(settlement_id: str, current_user_id: str = Depends(get_current_user_id)):
    settlement = await SettlementService.cancel(settlement_id)
    return SettlementResponse.from_model(settlement)
