from typing import List
from fastapi import APIRouter, Depends, status

from splitledger.core.auth import get_current_user_id
from splitledger.schemas.expense import ExpenseCreate, ExpenseResponse
from splitledger.services.expense_service import ExpenseService

router = APIRouter()


@router.post("/{group_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    group_id: str,
    expense_in: ExpenseCreate,
    current_user_id: str = Depends(get_current_user_id)
):
    expense = await ExpenseService.create(group_id, expense_in, current_user_id)
    return ExpenseResponse.from_model(expense)


@router.get("/{group_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(group_id: str, current_user_id: str = Depends(get_current_user_id)):
    expenses = await ExpenseService.list_for_group(group_id)
    return [ExpenseResponse.from_model(e) for e in expenses]
