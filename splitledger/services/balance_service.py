import asyncio
from dataclasses import dataclass
from typing import List

from splitledger.core.config import settings
from splitledger.db.session import get_database
from splitledger.models.group import Group
from splitledger.models.settlement import SettlementStatus
from splitledger.repositories.expense_repo import ExpenseRepository
from splitledger.repositories.group_repo import GroupRepository
from splitledger.repositories.settlement_repo import SettlementRepository
from splitledger.services.balance_engine import (
    Balance,
    BalanceSummary,
    Transfer,
    compute_balances,
    compute_net_positions,
    suggest_transfers,
    summarize_balances,
)


@dataclass
class GroupBalances:
    group: Group
    viewer_id: str
    balances: List[Balance]
    summary: BalanceSummary


class BalanceService:
    """Loads a group's history and hands it to the balance engine."""

    @staticmethod
    async def _load_history(group_id: str):
        db = await get_database()
        expenses_task = ExpenseRepository(db).list_group_expenses(group_id)
        if not settings.NET_SETTLEMENTS_IN_BALANCES:
            return await expenses_task, []
        settlements_task = SettlementRepository(db).list_group_settlements(
            group_id, status=SettlementStatus.COMPLETED
        )
        expenses, settlements = await asyncio.gather(expenses_task, settlements_task)
        return expenses, settlements

    @staticmethod
    async def for_viewer(group_id: str, viewer_id: str) -> GroupBalances:
        db = await get_database()
        group = await GroupRepository(db).get_group(group_id)

        expenses, settlements = await BalanceService._load_history(group_id)
        balances = compute_balances(viewer_id, expenses, settlements)
        return GroupBalances(
            group=group,
            viewer_id=viewer_id,
            balances=balances,
            summary=summarize_balances(balances),
        )

    @staticmethod
    async def suggested_transfers(group_id: str) -> List[Transfer]:
        db = await get_database()
        await GroupRepository(db).get_group(group_id)

        expenses, settlements = await BalanceService._load_history(group_id)
        return suggest_transfers(compute_net_positions(expenses, settlements))
