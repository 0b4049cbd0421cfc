from fastapi import APIRouter
from splitledger.api.v1.endpoints import groups, expenses, balances, settlements

api_router = APIRouter()

api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(expenses.router, prefix="/groups", tags=["expenses"])
api_router.include_router(balances.router, prefix="/groups", tags=["balances"])
api_router.include_router(settlements.router, tags=["settlements"])
