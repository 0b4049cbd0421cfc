import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from bson import ObjectId

from splitledger.core.config import settings
from splitledger.core.exceptions import InvalidStateTransition, SameParty
from splitledger.db.session import get_database
from splitledger.models.base import Currency
from splitledger.models.settlement import Settlement, SettlementStatus
from splitledger.repositories.group_repo import GroupRepository
from splitledger.repositories.settlement_repo import SettlementRepository
from splitledger.schemas.settlement import SettlementCreate
from splitledger.services.group_service import ensure_members
from splitledger.utils.money import parse_positive_amount

logger = logging.getLogger(__name__)

OnSettlementComplete = Callable[[Settlement], Awaitable[None]]

# Statuses a settlement may be cancelled from
CANCELLABLE = {SettlementStatus.PENDING, SettlementStatus.COMPLETED}

# Strong references so pending notifications are not garbage collected
_pending_notifications = set()


class SettlementService:
    @staticmethod
    async def record(
        group_id: str,
        settlement_in: SettlementCreate,
        on_complete: Optional[OnSettlementComplete] = None,
    ) -> Settlement:
        """
        Record a real-world payment from payer to receiver as completed.

        The record is free-standing: it is not tied to individual splits.
        When on_complete is given it is called in the background once the
        acknowledgement delay has passed, so callers can refresh balances.
        """
        amount = parse_positive_amount(settlement_in.amount)
        if settlement_in.payer_id == settlement_in.receiver_id:
            raise SameParty()

        db = await get_database()
        group = await GroupRepository(db).get_group(group_id)
        ensure_members(group, settlement_in.payer_id, settlement_in.receiver_id)

        currency = (
            Currency(**settlement_in.currency.model_dump())
            if settlement_in.currency
            else group.default_currency
        )
        notes = (settlement_in.notes or "").strip() or f"Payment via {settlement_in.payment_method.label}"

        settlement = Settlement(
            group_id=group.id,
            payer_id=ObjectId(settlement_in.payer_id),
            receiver_id=ObjectId(settlement_in.receiver_id),
            amount=amount,
            currency=currency,
            status=SettlementStatus.COMPLETED,
            payment_method=settlement_in.payment_method,
            notes=notes,
            settled_at=datetime.now(timezone.utc),
        )

        settlement = await SettlementRepository(db).create(settlement)
        logger.info(
            "Recorded settlement %s: %s paid %s %s%s",
            settlement.id, settlement.payer_id, settlement.receiver_id, currency.symbol, amount,
        )

        if on_complete is not None:
            task = asyncio.create_task(_notify_later(on_complete, settlement))
            _pending_notifications.add(task)
            task.add_done_callback(_pending_notifications.discard)

        return settlement

    @staticmethod
    async def list_for_group(group_id: str) -> List[Settlement]:
        db = await get_database()
        return await SettlementRepository(db).list_group_settlements(group_id)

    @staticmethod
    async def cancel(settlement_id: str) -> Settlement:
        db = await get_database()
        repo = SettlementRepository(db)

        settlement = await repo.get(settlement_id)
        if settlement.status not in CANCELLABLE:
            raise InvalidStateTransition(
                f"Cannot cancel a settlement that is {settlement.status.value}"
            )

        settlement = await repo.update_status(settlement_id, SettlementStatus.CANCELLED)
        logger.info("Cancelled settlement %s", settlement_id)
        return settlement


async def _notify_later(callback: OnSettlementComplete, settlement: Settlement) -> None:
    await asyncio.sleep(settings.SETTLEMENT_ACK_DELAY_SECONDS)
    try:
        await callback(settlement)
    except Exception:
        # Nobody awaits this task; make sure the failure reaches the log
        logger.exception("Settlement completion callback failed for %s", settlement.id)
