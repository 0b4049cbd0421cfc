"""
Balance engine - derives who owes whom from a group's history.

Pure functions over already-loaded expenses, splits and settlements. Nothing
is cached or stored; callers recompute on every read.

Sign convention (viewer's point of view):
- positive running total: counterparty owes the viewer ("owed")
- negative running total: viewer owes the counterparty ("owe")
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List

from splitledger.models.settlement import SettlementStatus
from splitledger.utils.money import TOLERANCE


class BalanceDirection(str, Enum):
    OWE = "owe"    # viewer owes counterparty
    OWED = "owed"  # counterparty owes viewer


@dataclass(frozen=True)
class Balance:
    counterparty_id: str
    amount: Decimal
    direction: BalanceDirection


@dataclass(frozen=True)
class BalanceSummary:
    total_owed: Decimal
    total_owe: Decimal
    net_balance: Decimal


@dataclass(frozen=True)
class Transfer:
    from_user_id: str
    to_user_id: str
    amount: Decimal


def compute_balances(viewer_id, expenses: Iterable, settlements: Iterable = ()) -> List[Balance]:
    """
    Net pairwise balances between viewer_id and every other member.

    Each expense must expose ``paid_by`` and ``splits`` (items with
    ``user_id`` and ``amount``). Settlements with status ``completed`` are
    netted in; pending and cancelled ones are ignored. Counterparties within
    0.01 of zero are treated as settled and omitted.
    """
    viewer = str(viewer_id)
    running: Dict[str, Decimal] = defaultdict(Decimal)

    for expense in expenses:
        payer = str(expense.paid_by)
        for split in expense.splits:
            debtor = str(split.user_id)
            if payer == viewer and debtor != viewer:
                running[debtor] += split.amount
            elif debtor == viewer and payer != viewer:
                running[payer] -= split.amount

    for settlement in _completed(settlements):
        payer = str(settlement.payer_id)
        receiver = str(settlement.receiver_id)
        if payer == viewer and receiver != viewer:
            running[receiver] += settlement.amount
        elif receiver == viewer and payer != viewer:
            running[payer] -= settlement.amount

    balances = [
        Balance(
            counterparty_id=counterparty,
            amount=abs(total),
            direction=BalanceDirection.OWED if total > 0 else BalanceDirection.OWE,
        )
        for counterparty, total in running.items()
        if abs(total) > TOLERANCE
    ]
    balances.sort(key=lambda b: (-b.amount, b.counterparty_id))
    return balances


def summarize_balances(balances: Iterable[Balance]) -> BalanceSummary:
    """Totals for a viewer's dashboard."""
    total_owed = Decimal(0)
    total_owe = Decimal(0)
    for balance in balances:
        if balance.direction == BalanceDirection.OWED:
            total_owed += balance.amount
        else:
            total_owe += balance.amount
    return BalanceSummary(
        total_owed=total_owed,
        total_owe=total_owe,
        net_balance=total_owed - total_owe,
    )


def compute_net_positions(expenses: Iterable, settlements: Iterable = ()) -> Dict[str, Decimal]:
    """
    Group-wide signed position per member (positive = is owed money).

    The payer is credited with every split owed by someone else and each
    debtor is charged their split, so positions always sum to zero.
    """
    net: Dict[str, Decimal] = defaultdict(Decimal)

    for expense in expenses:
        payer = str(expense.paid_by)
        for split in expense.splits:
            debtor = str(split.user_id)
            if debtor == payer:
                continue
            net[payer] += split.amount
            net[debtor] -= split.amount

    for settlement in _completed(settlements):
        payer = str(settlement.payer_id)
        receiver = str(settlement.receiver_id)
        if payer == receiver:
            continue
        net[payer] += settlement.amount
        net[receiver] -= settlement.amount

    return dict(net)


def suggest_transfers(net_positions: Dict[str, Decimal]) -> List[Transfer]:
    """
    Greedy matching of debtors to creditors.

    Largest debtor pays largest creditor until one side is cleared; yields at
    most n - 1 transfers that bring every position within tolerance of zero.
    """
    creditors = [[uid, amt] for uid, amt in net_positions.items() if amt > TOLERANCE]
    debtors = [[uid, -amt] for uid, amt in net_positions.items() if amt < -TOLERANCE]

    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    transfers: List[Transfer] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor[1], creditor[1])
        transfers.append(Transfer(from_user_id=debtor[0], to_user_id=creditor[0], amount=amount))

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] <= TOLERANCE:
            i += 1
        if creditor[1] <= TOLERANCE:
            j += 1

    return transfers


def _completed(settlements: Iterable):
    for settlement in settlements:
        if settlement.status == SettlementStatus.COMPLETED:
            yield settlement
