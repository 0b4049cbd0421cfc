import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId

from splitledger.core.exceptions import (
    InvalidAmount,
    InvalidStateTransition,
    NotGroupMember,
    SameParty,
)
from splitledger.models.settlement import PaymentMethod, SettlementStatus
from splitledger.schemas.settlement import SettlementCreate
from splitledger.services.settlement_service import SettlementService


@pytest.mark.asyncio
async def test_record_settlement(mock_db, group_doc, alice, bob):
    mock_db.groups.find_one.return_value = group_doc
    inserted_id = ObjectId()
    mock_db.settlements.insert_one.return_value.inserted_id = inserted_id

    settlement_in = SettlementCreate(
        payer_id=str(bob),
        receiver_id=str(alice),
        amount="60",
        payment_method=PaymentMethod.BANK,
    )

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        settlement = await SettlementService.record(str(group_doc["_id"]), settlement_in)

    assert settlement.id == inserted_id
    assert settlement.status == SettlementStatus.COMPLETED
    assert settlement.settled_at is not None
    assert settlement.amount == Decimal(60)
    assert settlement.currency.code == "EUR"
    assert settlement.notes == "Payment via Bank Transfer"

    doc = mock_db.settlements.insert_one.call_args[0][0]
    assert doc["payer_id"] == bob
    assert doc["receiver_id"] == alice
    assert doc["status"] == SettlementStatus.COMPLETED


@pytest.mark.asyncio
async def test_record_keeps_user_notes(mock_db, group_doc, alice, bob):
    mock_db.groups.find_one.return_value = group_doc
    settlement_in = SettlementCreate(
        payer_id=str(bob), receiver_id=str(alice), amount=12.5, notes="  dinner money  "
    )

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        settlement = await SettlementService.record(str(group_doc["_id"]), settlement_in)

    assert settlement.notes == "dinner money"
    assert settlement.payment_method == PaymentMethod.CASH


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["0", "-10", "abc", "inf", "NaN"])
async def test_invalid_amount_rejected_before_write(mock_db, group_doc, alice, bob, amount):
    mock_db.groups.find_one.return_value = group_doc
    settlement_in = SettlementCreate(payer_id=str(bob), receiver_id=str(alice), amount=amount)

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        with pytest.raises(InvalidAmount):
            await SettlementService.record(str(group_doc["_id"]), settlement_in)

    mock_db.settlements.insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_payer_and_receiver_must_differ(mock_db, group_doc, alice):
    settlement_in = SettlementCreate(payer_id=str(alice), receiver_id=str(alice), amount="5")

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        with pytest.raises(SameParty):
            await SettlementService.record(str(group_doc["_id"]), settlement_in)


@pytest.mark.asyncio
async def test_receiver_must_be_member(mock_db, group_doc, alice):
    mock_db.groups.find_one.return_value = group_doc
    settlement_in = SettlementCreate(payer_id=str(alice), receiver_id=str(ObjectId()), amount="5")

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        with pytest.raises(NotGroupMember):
            await SettlementService.record(str(group_doc["_id"]), settlement_in)

    mock_db.settlements.insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_completion_callback_runs_after_delay(mock_db, group_doc, alice, bob):
    mock_db.groups.find_one.return_value = group_doc
    on_complete = AsyncMock()
    settlement_in = SettlementCreate(payer_id=str(bob), receiver_id=str(alice), amount="10")

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db), \
            patch("splitledger.services.settlement_service.settings.SETTLEMENT_ACK_DELAY_SECONDS", 0):
        settlement = await SettlementService.record(
            str(group_doc["_id"]), settlement_in, on_complete=on_complete
        )
        # Not called inline; runs once the event loop gets a turn
        on_complete.assert_not_called()
        await asyncio.sleep(0.01)

    on_complete.assert_awaited_once_with(settlement)


@pytest.mark.asyncio
async def test_cancel_completed_settlement(mock_db, group_doc, alice, bob):
    settlement_id = ObjectId()
    doc = {
        "_id": settlement_id,
        "group_id": group_doc["_id"],
        "payer_id": bob,
        "receiver_id": alice,
        "amount": Decimal("60"),
        "currency": {"code": "EUR", "symbol": "€"},
        "status": "completed",
    }
    mock_db.settlements.find_one.return_value = doc
    mock_db.settlements.find_one_and_update.return_value = {**doc, "status": "cancelled"}

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        settlement = await SettlementService.cancel(str(settlement_id))

    assert settlement.status == SettlementStatus.CANCELLED
    update = mock_db.settlements.find_one_and_update.call_args[0][1]
    assert update["$set"]["status"] == "cancelled"


@pytest.mark.asyncio
async def test_cancel_twice_rejected(mock_db, group_doc, alice, bob):
    mock_db.settlements.find_one.return_value = {
        "_id": ObjectId(),
        "group_id": group_doc["_id"],
        "payer_id": bob,
        "receiver_id": alice,
        "amount": Decimal("60"),
        "currency": {"code": "EUR", "symbol": "€"},
        "status": "cancelled",
    }

    with patch("splitledger.services.settlement_service.get_database", return_value=mock_db):
        with pytest.raises(InvalidStateTransition):
            await SettlementService.cancel(str(ObjectId()))

    mock_db.settlements.find_one_and_update.assert_not_called()
