"""
Split allocation - turns an expense total and split instructions into one
owed amount per participant.

Rules:
- equal: every participant owes total / n and holds 100 / n percent
- custom: assigned amounts must add up to the total (within 0.01)
- percentage: assigned percentages must add up to 100 (within 0.01)

Amounts keep full Decimal precision so both sums hold for any number of
participants; rounding to cents happens when responses are serialized.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping

from splitledger.core.exceptions import (
    AmountMismatch,
    EmptyParticipantSet,
    InvalidAmount,
    PercentageMismatch,
)
from splitledger.schemas.expense import CustomSplit, EqualSplit, PercentageSplit
from splitledger.utils.money import (
    HUNDRED,
    parse_decimal,
    parse_positive_amount,
    within_tolerance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SplitAllocation:
    user_id: str
    amount: Decimal
    percentage: Decimal


def allocate_splits(total_amount, split, participants: Iterable[str]) -> List[SplitAllocation]:
    """
    Compute one allocation per participant, in participant order.

    Raises:
        InvalidAmount: total or an assigned value is not a valid number
        EmptyParticipantSet: no participants selected
        AmountMismatch: custom amounts do not add up to the total
        PercentageMismatch: percentages do not add up to 100
    """
    total = parse_positive_amount(total_amount)
    members = _ordered_unique(participants)
    if not members:
        raise EmptyParticipantSet()

    if isinstance(split, EqualSplit):
        return _allocate_equal(total, members)
    if isinstance(split, CustomSplit):
        return _allocate_custom(total, members, split.amounts)
    if isinstance(split, PercentageSplit):
        return _allocate_percentage(total, members, split.percentages)

    raise TypeError(f"Unsupported split instruction: {type(split).__name__}")


# ===== PRIVATE HELPERS =====

def _ordered_unique(participants: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for user_id in participants:
        user_id = str(user_id)
        if user_id not in seen:
            seen.add(user_id)
            ordered.append(user_id)
    return ordered


def _allocate_equal(total: Decimal, members: List[str]) -> List[SplitAllocation]:
    count = Decimal(len(members))
    share = total / count
    percentage = HUNDRED / count
    return [SplitAllocation(user_id=m, amount=share, percentage=percentage) for m in members]


def _allocate_custom(
    total: Decimal, members: List[str], assigned: Mapping[str, str]
) -> List[SplitAllocation]:
    amounts = _parse_assigned(members, assigned, "amount")

    assigned_total = sum(amounts.values(), Decimal(0))
    if not within_tolerance(assigned_total, total):
        logger.warning("Custom split rejected: assigned %s against total %s", assigned_total, total)
        raise AmountMismatch(
            f"Amounts don't match: assigned {assigned_total} of {total}"
        )

    return [
        SplitAllocation(user_id=m, amount=amounts[m], percentage=amounts[m] / total * HUNDRED)
        for m in members
    ]


def _allocate_percentage(
    total: Decimal, members: List[str], assigned: Mapping[str, str]
) -> List[SplitAllocation]:
    percentages = _parse_assigned(members, assigned, "percentage")
    for user_id, pct in percentages.items():
        if pct > HUNDRED:
            raise InvalidAmount(f"Invalid percentage for {user_id}: {pct}")

    assigned_total = sum(percentages.values(), Decimal(0))
    if not within_tolerance(assigned_total, HUNDRED):
        logger.warning("Percentage split rejected: percentages total %s", assigned_total)
        raise PercentageMismatch(
            f"Percentages don't add up: total is {assigned_total}%"
        )

    return [
        SplitAllocation(user_id=m, amount=percentages[m] / HUNDRED * total, percentage=percentages[m])
        for m in members
    ]


def _parse_assigned(members: List[str], assigned: Mapping[str, str], field: str) -> Dict[str, Decimal]:
    """Parse per-member inputs; unselected keys are ignored, missing members count as 0."""
    parsed = {}
    for user_id in members:
        value = parse_decimal(assigned.get(user_id), field)
        if value < 0:
            raise InvalidAmount(f"Invalid {field} for {user_id}: must not be negative")
        parsed[user_id] = value
    return parsed
