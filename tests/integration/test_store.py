"""Integration tests for LedgerStore against an in-memory database."""

from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from roomledger.models import DepositTransactionType
from roomledger.services.errors import DataFetchError, NotFoundError, ValidationError
from roomledger.services.store import DUPLICATE_ROOM_MESSAGE


class TestRooms:
    def test_create_and_list_rooms_sorted(self, store):
        store.create_room("B-202", 6000)
        store.create_room("A-101", 8000)

        rooms = store.list_rooms()

        assert [r.name for r in rooms] == ["A-101", "B-202"]
        assert store.count_rooms() == 2

    def test_duplicate_room_name_rejected_verbatim(self, store):
        store.create_room("A-101", 8000)

        with pytest.raises(ValidationError) as exc_info:
            store.create_room("A-101", 7000)

        assert str(exc_info.value) == DUPLICATE_ROOM_MESSAGE

    def test_rename_to_existing_name_rejected(self, store):
        store.create_room("A-101", 8000)
        other = store.create_room("B-202", 6000)

        with pytest.raises(ValidationError, match="already exists"):
            store.update_room(other.id, name="A-101")

    def test_update_room(self, store):
        room = store.create_room("A-101", 8000)

        updated = store.update_room(room.id, name="A-101", rent=8500)

        assert updated.rent == 8500

    @pytest.mark.parametrize("name,rent", [("", 1000), ("C-303", -1)])
    def test_invalid_room_rejected(self, store, name, rent):
        with pytest.raises(ValidationError):
            store.create_room(name, rent)

    def test_rejected_update_leaves_room_unchanged(self, store):
        room = store.create_room("A-101", 8000)
        other = store.create_room("B-202", 6000)

        with pytest.raises(ValidationError):
            store.update_room(room.id, name="Renamed", rent=-1)
        store.update_room(other.id, rent=6500)

        assert [r.name for r in store.list_rooms()] == ["A-101", "B-202"]
        assert store.get_room(room.id).rent == 8000

    def test_delete_empty_room(self, store):
        room = store.create_room("A-101", 8000)

        store.delete_room(room.id)

        assert store.get_room(room.id) is None

    def test_delete_room_with_tenants_rejected(self, store, seeded):
        with pytest.raises(ValidationError, match="has tenants"):
            store.delete_room(seeded["rooms"]["b"].id)

    def test_delete_unknown_room(self, store):
        with pytest.raises(NotFoundError):
            store.delete_room(999)


class TestTenants:
    def test_status_filters(self, store, seeded):
        assert [t.name for t in store.list_tenants("all")] == [
            "Asha Rao",
            "Meera Das",
            "Vikram Singh",
        ]
        assert [t.name for t in store.list_tenants("active")] == ["Asha Rao", "Vikram Singh"]
        assert [t.name for t in store.list_tenants("left")] == ["Meera Das"]

    def test_unknown_status_filter(self, store):
        with pytest.raises(ValidationError):
            store.list_tenants("former")

    def test_recent_tenants_newest_first(self, store, seeded):
        recent = store.recent_tenants(limit=2)

        assert [t.name for t in recent] == ["Meera Das", "Vikram Singh"]

    def test_create_tenant_requires_existing_room(self, store):
        with pytest.raises(ValidationError, match="does not exist"):
            store.create_tenant("Ghost", "1", 42, date(2024, 1, 1))

    def test_negative_deposit_rejected(self, store, seeded):
        room = seeded["rooms"]["a"]
        with pytest.raises(ValidationError):
            store.create_tenant("New", "1", room.id, date(2024, 1, 1), deposit_amount=-5)

    def test_deposit_amount_is_immutable(self, store, seeded):
        asha = seeded["tenants"]["asha"]

        with pytest.raises(ValidationError, match="cannot be changed"):
            store.update_tenant(asha.id, deposit_amount=9000)

        assert store.get_tenant(asha.id).deposit_amount == 5000

    def test_leave_date_before_join_date_rejected(self, store, seeded):
        asha = seeded["tenants"]["asha"]

        with pytest.raises(ValidationError, match="before join date"):
            store.mark_tenant_left(asha.id, date(2023, 12, 31))

        assert store.get_tenant(asha.id).is_active

    def test_mark_left_keeps_history(self, store, seeded):
        vikram = seeded["tenants"]["vikram"]
        store.add_rent_payment(vikram.id, date(2024, 6, 1), 6000, date(2024, 6, 3))

        store.mark_tenant_left(vikram.id, date(2024, 6, 30))

        assert store.get_tenant(vikram.id).is_active is False
        assert len(store.list_rent_payments(tenant_id=vikram.id)) == 1

    def test_update_tenant_fields(self, store, seeded):
        vikram = seeded["tenants"]["vikram"]

        updated = store.update_tenant(vikram.id, phone="9000000000", uses_mess=True)

        assert updated.phone == "9000000000"
        assert updated.uses_mess is True

    @pytest.mark.parametrize("field", ["join_date", "name", "room_id", "uses_mess"])
    def test_required_field_cannot_be_cleared(self, store, seeded, field):
        meera = seeded["tenants"]["meera"]

        with pytest.raises(ValidationError, match="cannot be empty"):
            store.update_tenant(meera.id, **{field: None})

        assert store.get_tenant(meera.id).join_date is not None

    def test_update_unknown_field(self, store, seeded):
        with pytest.raises(ValidationError, match="Unknown tenant fields"):
            store.update_tenant(seeded["tenants"]["asha"].id, nickname="A")

    def test_update_unknown_tenant(self, store):
        with pytest.raises(NotFoundError):
            store.update_tenant(404, phone="1")


class TestPayments:
    def test_month_is_normalized_on_insert(self, store, seeded):
        asha = seeded["tenants"]["asha"]

        payment = store.add_rent_payment(asha.id, date(2024, 6, 17), 8000, date(2024, 6, 17))

        assert payment.month == date(2024, 6, 1)
        assert store.list_rent_payments(month=date(2024, 6, 30)) == [payment]

    def test_list_by_tenant_and_month(self, store, seeded):
        asha = seeded["tenants"]["asha"]
        vikram = seeded["tenants"]["vikram"]
        store.add_mess_payment(asha.id, date(2024, 6, 1), 1500, date(2024, 6, 2))
        store.add_mess_payment(asha.id, date(2024, 5, 1), 1500, date(2024, 5, 2))
        store.add_mess_payment(vikram.id, date(2024, 6, 1), 1500, date(2024, 6, 2))

        assert len(store.list_mess_payments(tenant_id=asha.id)) == 2
        assert len(store.list_mess_payments(month=date(2024, 6, 1))) == 2
        assert len(store.list_mess_payments(tenant_id=asha.id, month=date(2024, 6, 1))) == 1

    def test_zero_amount_payment_allowed(self, store, seeded):
        asha = seeded["tenants"]["asha"]

        payment = store.add_rent_payment(asha.id, date(2024, 6, 1), 0, date(2024, 6, 1))

        assert payment.amount_paid == 0

    def test_negative_amount_rejected(self, store, seeded):
        with pytest.raises(ValidationError):
            store.add_rent_payment(seeded["tenants"]["asha"].id, date(2024, 6, 1), -1, date(2024, 6, 1))

    def test_unknown_tenant(self, store):
        with pytest.raises(NotFoundError):
            store.add_mess_payment(77, date(2024, 6, 1), 1500, date(2024, 6, 1))


class TestDepositTransactions:
    def test_add_and_list_newest_first(self, store, seeded):
        asha = seeded["tenants"]["asha"]
        store.add_deposit_transaction(asha.id, date(2024, 3, 1), 1200, "deduction", "damage")
        store.add_deposit_transaction(
            asha.id, date(2024, 4, 1), 300, "refund", "overcharge correction"
        )

        transactions = store.list_deposit_transactions(tenant_id=asha.id)

        assert [t.reason for t in transactions] == ["overcharge correction", "damage"]
        assert transactions[1].type == DepositTransactionType.DEDUCTION

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_amount_rejected(self, store, seeded, amount):
        with pytest.raises(ValidationError, match="must be positive"):
            store.add_deposit_transaction(
                seeded["tenants"]["asha"].id, date(2024, 3, 1), amount, "deduction"
            )

    def test_unknown_type_rejected(self, store, seeded):
        with pytest.raises(ValidationError, match="Unknown deposit transaction type"):
            store.add_deposit_transaction(
                seeded["tenants"]["asha"].id, date(2024, 3, 1), 100, "bonus"
            )


class TestDatabaseFailures:
    def test_query_failure_becomes_data_fetch_error(self, store):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(store.db, "query", side_effect=error):
            with pytest.raises(DataFetchError, match="Failed to load rooms"):
                store.list_rooms()

    def test_commit_failure_rolls_back(self, store, seeded):
        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(store.db, "commit", side_effect=error):
            with pytest.raises(DataFetchError):
                store.add_rent_payment(
                    seeded["tenants"]["asha"].id, date(2024, 6, 1), 8000, date(2024, 6, 1)
                )

        assert store.list_rent_payments() == []
