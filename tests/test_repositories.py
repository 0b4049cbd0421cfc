"""Tests for repositories against a mocked Motor database."""
from decimal import Decimal

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect, OperationFailure

from factories import USD
from splitledger.core.exceptions import NotFoundError, RepositoryReadError, RepositoryWriteError
from splitledger.models.group import GroupMember
from splitledger.models.settlement import Settlement, SettlementStatus
from splitledger.repositories.expense_repo import ExpenseRepository
from splitledger.repositories.group_repo import GroupRepository
from splitledger.repositories.settlement_repo import SettlementRepository


@pytest.mark.asyncio
class TestGroupRepository:
    """GroupRepository lookups."""

    async def test_get_group_found(self, mock_db, group_doc):
        mock_db.groups.find_one.return_value = group_doc
        repo = GroupRepository(mock_db)

        group = await repo.get_group(str(group_doc["_id"]))

        assert group.id == group_doc["_id"]
        assert group.name == "Lisbon trip"
        assert len(group.members) == 3

    async def test_get_group_not_found(self, mock_db):
        repo = GroupRepository(mock_db)

        with pytest.raises(NotFoundError):
            await repo.get_group(str(ObjectId()))

    async def test_get_group_invalid_id(self, mock_db):
        repo = GroupRepository(mock_db)

        with pytest.raises(NotFoundError):
            await repo.get_group("not-an-id")

        mock_db.groups.find_one.assert_not_called()

    async def test_read_failure_is_wrapped(self, mock_db):
        mock_db.groups.find_one.side_effect = AutoReconnect("connection reset")
        repo = GroupRepository(mock_db)

        with pytest.raises(RepositoryReadError) as exc_info:
            await repo.get_group(str(ObjectId()))

        assert "connection reset" not in exc_info.value.message

    async def test_list_groups_for_invalid_user(self, mock_db):
        repo = GroupRepository(mock_db)

        assert await repo.list_groups_for_user("nope") == []

    async def test_add_member_invalid_group_id(self, mock_db):
        repo = GroupRepository(mock_db)

        with pytest.raises(NotFoundError):
            await repo.add_member("not-an-id", GroupMember(user_id=ObjectId()))

        mock_db.groups.find_one_and_update.assert_not_called()


@pytest.mark.asyncio
class TestExpenseRepository:
    """Expenses are returned joined with their split rows."""

    async def test_list_group_expenses_joins_splits(self, mock_db, alice, bob):
        group_id = ObjectId()
        expense_a = ObjectId()
        expense_b = ObjectId()
        base = {
            "group_id": group_id,
            "description": "Dinner",
            "currency": {"code": "USD", "symbol": "$"},
            "paid_by": alice,
            "split_type": "equal",
            "expense_date": "2024-05-01",
        }
        mock_db.expenses.find.return_value.to_list.return_value = [
            {**base, "_id": expense_a, "amount": Decimal("20")},
            {**base, "_id": expense_b, "amount": Decimal("8")},
        ]
        mock_db.expense_splits.find.return_value.to_list.return_value = [
            {"_id": ObjectId(), "expense_id": expense_a, "user_id": alice, "amount": Decimal("10")},
            {"_id": ObjectId(), "expense_id": expense_a, "user_id": bob, "amount": Decimal("10")},
        ]
        repo = ExpenseRepository(mock_db)

        expenses = await repo.list_group_expenses(str(group_id))

        assert [e.id for e in expenses] == [expense_a, expense_b]
        assert [s.user_id for s in expenses[0].splits] == [alice, bob]
        assert expenses[1].splits == []
        assert expenses[0].expense_date.isoformat() == "2024-05-01"
        query = mock_db.expense_splits.find.call_args[0][0]
        assert query == {"expense_id": {"$in": [expense_a, expense_b]}}

    async def test_list_group_without_expenses_skips_split_query(self, mock_db):
        repo = ExpenseRepository(mock_db)

        assert await repo.list_group_expenses(str(ObjectId())) == []
        mock_db.expense_splits.find.assert_not_called()


@pytest.mark.asyncio
class TestSettlementRepository:

    async def test_create_assigns_inserted_id(self, mock_db, alice, bob):
        inserted_id = ObjectId()
        mock_db.settlements.insert_one.return_value.inserted_id = inserted_id
        settlement = Settlement(
            group_id=ObjectId(),
            payer_id=bob,
            receiver_id=alice,
            amount=Decimal("15"),
            currency=USD,
            status=SettlementStatus.COMPLETED,
        )

        saved = await SettlementRepository(mock_db).create(settlement)

        assert saved.id == inserted_id
        doc = mock_db.settlements.insert_one.call_args[0][0]
        assert doc["amount"] == Decimal("15")

    async def test_create_failure_is_generic(self, mock_db, alice, bob):
        mock_db.settlements.insert_one.side_effect = OperationFailure("disk full")
        settlement = Settlement(
            group_id=ObjectId(), payer_id=bob, receiver_id=alice, amount=Decimal("1"), currency=USD
        )

        with pytest.raises(RepositoryWriteError) as exc_info:
            await SettlementRepository(mock_db).create(settlement)

        assert exc_info.value.message == "Failed to record settlement, try again"

    async def test_list_filters_by_status(self, mock_db):
        group_id = ObjectId()

        await SettlementRepository(mock_db).list_group_settlements(
            str(group_id), status=SettlementStatus.COMPLETED
        )

        query = mock_db.settlements.find.call_args[0][0]
        assert query == {"group_id": group_id, "status": "completed"}

    async def test_update_status_missing(self, mock_db):
        with pytest.raises(NotFoundError):
            await SettlementRepository(mock_db).update_status(
                str(ObjectId()), SettlementStatus.CANCELLED
            )
