"""Database access for rooms, tenants, payments and deposit transactions.

LedgerStore is the only place that talks to the database. It validates
operator input, normalizes month keys, and turns SQLAlchemy failures into
DataFetchError so that callers never see driver exceptions.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Type

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from roomledger.models import (
    DepositTransaction,
    DepositTransactionType,
    MessPayment,
    RentPayment,
    Room,
    Tenant,
)
from roomledger.services.errors import DataFetchError, NotFoundError, ValidationError
from roomledger.services.ledger import month_start

logger = logging.getLogger(__name__)

TENANT_STATUSES = ("all", "active", "left")
DUPLICATE_ROOM_MESSAGE = "A room with this name already exists"

# Fields an operator may change after a tenant is created
_TENANT_UPDATABLE = {"name", "phone", "room_id", "join_date", "leave_date", "uses_mess"}
_TENANT_REQUIRED = {"name", "phone", "room_id", "join_date", "uses_mess"}


def _require_non_negative(value: int, field: str) -> None:
    if value is None or value < 0:
        raise ValidationError(f"{field} must be a non-negative amount")


def _require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    return text


class LedgerStore:
    """Read and write operations over the relational store."""

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db

    @contextmanager
    def _operation(self, action: str) -> Iterator[None]:
        """Roll back and wrap database failures for one store operation."""
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Constraint violation during {action}: {e.orig}")
            raise ValidationError(f"Could not {action}: constraint violated") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during {action}: {e}", exc_info=True)
            raise DataFetchError(f"Failed to {action}") from e

    # ------------------------------------------------------------------
    # Rooms
    # ------------------------------------------------------------------

    def list_rooms(self) -> list[Room]:
        with self._operation("load rooms"):
            return self.db.query(Room).order_by(Room.name).all()

    def get_room(self, room_id: int) -> Room | None:
        with self._operation("load room"):
            return self.db.query(Room).filter_by(id=room_id).first()

    def count_rooms(self) -> int:
        with self._operation("count rooms"):
            return self.db.query(func.count(Room.id)).scalar() or 0

    def _require_room(self, room_id: int) -> Room:
        room = self.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")
        return room

    def _check_room_name_free(self, name: str, exclude_id: int | None = None) -> None:
        with self._operation("check room name"):
            query = self.db.query(Room).filter(Room.name == name)
            if exclude_id is not None:
                query = query.filter(Room.id != exclude_id)
            exists = query.first() is not None
        if exists:
            logger.info(f"Rejected duplicate room name '{name}'")
            raise ValidationError(DUPLICATE_ROOM_MESSAGE)

    def create_room(self, name: str, rent: int) -> Room:
        """Create a room.

        Raises:
            ValidationError: Empty name, negative rent or duplicate name
        """
        name = _require_text(name, "Room name")
        _require_non_negative(rent, "Rent")
        self._check_room_name_free(name)

        room = Room(name=name, rent=rent)
        with self._operation("add room"):
            self.db.add(room)
            self.db.commit()
            self.db.refresh(room)
        logger.info(f"Created room: {name} (ID={room.id}, rent={rent})")
        return room

    def update_room(self, room_id: int, name: str | None = None, rent: int | None = None) -> Room:
        room = self._require_room(room_id)
        # Nothing is assigned until every field has been validated
        if name is not None:
            name = _require_text(name, "Room name")
            self._check_room_name_free(name, exclude_id=room_id)
        if rent is not None:
            _require_non_negative(rent, "Rent")

        if name is not None:
            room.name = name
        if rent is not None:
            room.rent = rent

        with self._operation("update room"):
            self.db.commit()
            self.db.refresh(room)
        logger.info(f"Updated room ID={room_id}: name={room.name}, rent={room.rent}")
        return room

    def delete_room(self, room_id: int) -> None:
        """Delete a room that no tenant references.

        Raises:
            NotFoundError: Unknown room
            ValidationError: Room still has tenants (current or past)
        """
        room = self._require_room(room_id)
        with self._operation("check room occupancy"):
            tenant_count = (
                self.db.query(func.count(Tenant.id)).filter(Tenant.room_id == room_id).scalar()
            )
        if tenant_count:
            raise ValidationError("Cannot delete a room that has tenants")

        with self._operation("delete room"):
            self.db.delete(room)
            self.db.commit()
        logger.info(f"Deleted room ID={room_id}")

    # ------------------------------------------------------------------
    # Tenants
    # ------------------------------------------------------------------

    def list_tenants(self, status: str = "all") -> list[Tenant]:
        """List tenants ordered by name.

        Args:
            status: 'all', 'active' (no leave date) or 'left'
        """
        if status not in TENANT_STATUSES:
            raise ValidationError(f"Unknown tenant status filter: {status}")

        with self._operation("load tenants"):
            query = self.db.query(Tenant)
            if status == "active":
                query = query.filter(Tenant.leave_date.is_(None))
            elif status == "left":
                query = query.filter(Tenant.leave_date.is_not(None))
            return query.order_by(Tenant.name).all()

    def get_tenant(self, tenant_id: int) -> Tenant | None:
        with self._operation("load tenant"):
            return self.db.query(Tenant).filter_by(id=tenant_id).first()

    def recent_tenants(self, limit: int = 5) -> list[Tenant]:
        """Most recently created tenants, newest first."""
        with self._operation("load recent tenants"):
            return (
                self.db.query(Tenant)
                .order_by(Tenant.created_at.desc(), Tenant.id.desc())
                .limit(limit)
                .all()
            )

    def _require_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.get_tenant(tenant_id)
        if tenant is None:
            raise NotFoundError(f"Tenant {tenant_id} not found")
        return tenant

    def create_tenant(
        self,
        name: str,
        phone: str,
        room_id: int,
        join_date: date,
        uses_mess: bool = False,
        deposit_amount: int = 0,
    ) -> Tenant:
        """Register a new (active) tenant.

        The deposit amount is stored as given and never changes afterwards.
        """
        name = _require_text(name, "Tenant name")
        _require_non_negative(deposit_amount, "Deposit")
        if self.get_room(room_id) is None:
            raise ValidationError(f"Room {room_id} does not exist")

        tenant = Tenant(
            name=name,
            phone=(phone or "").strip(),
            room_id=room_id,
            join_date=join_date,
            uses_mess=uses_mess,
            deposit_amount=deposit_amount,
        )
        with self._operation("add tenant"):
            self.db.add(tenant)
            self.db.commit()
            self.db.refresh(tenant)
        logger.info(
            f"Created tenant: {name} (ID={tenant.id}, room_id={room_id}, deposit={deposit_amount})"
        )
        return tenant

    def update_tenant(self, tenant_id: int, **changes) -> Tenant:
        """Update tenant details.

        Raises:
            ValidationError: Unknown or immutable field, a required field set
                to None, unknown room, or a leave date earlier than the join date
        """
        if "deposit_amount" in changes:
            raise ValidationError("Deposit amount cannot be changed after the tenant is created")
        unknown = set(changes) - _TENANT_UPDATABLE
        if unknown:
            raise ValidationError(f"Unknown tenant fields: {', '.join(sorted(unknown))}")
        missing = sorted(key for key in _TENANT_REQUIRED if key in changes and changes[key] is None)
        if missing:
            raise ValidationError(f"Tenant fields cannot be empty: {', '.join(missing)}")

        tenant = self._require_tenant(tenant_id)

        if "name" in changes:
            changes["name"] = _require_text(changes["name"], "Tenant name")
        if "room_id" in changes and self.get_room(changes["room_id"]) is None:
            raise ValidationError(f"Room {changes['room_id']} does not exist")

        join_date = changes.get("join_date", tenant.join_date)
        leave_date = changes.get("leave_date", tenant.leave_date)
        if leave_date is not None and leave_date < join_date:
            raise ValidationError("Leave date cannot be before join date")

        for key, value in changes.items():
            setattr(tenant, key, value)

        with self._operation("update tenant"):
            self.db.commit()
            self.db.refresh(tenant)
        logger.info(f"Updated tenant ID={tenant_id}: {sorted(changes)}")
        return tenant

    def mark_tenant_left(self, tenant_id: int, leave_date: date) -> Tenant:
        """Record the tenant's leave date. History is kept."""
        return self.update_tenant(tenant_id, leave_date=leave_date)

    # ------------------------------------------------------------------
    # Monthly payments
    # ------------------------------------------------------------------

    def _list_payments(
        self,
        model: Type[RentPayment] | Type[MessPayment],
        tenant_id: int | None,
        month: date | None,
    ) -> list:
        with self._operation(f"load {model.__tablename__}"):
            query = self.db.query(model)
            if tenant_id is not None:
                query = query.filter(model.tenant_id == tenant_id)
            if month is not None:
                query = query.filter(model.month == month_start(month))
            return query.order_by(model.month.desc(), model.payment_date.desc()).all()

    def _add_payment(
        self,
        model: Type[RentPayment] | Type[MessPayment],
        tenant_id: int,
        month: date,
        amount_paid: int,
        payment_date: date,
    ):
        _require_non_negative(amount_paid, "Amount paid")
        self._require_tenant(tenant_id)

        payment = model(
            tenant_id=tenant_id,
            month=month_start(month),
            amount_paid=amount_paid,
            payment_date=payment_date,
        )
        with self._operation(f"add {model.__tablename__}"):
            self.db.add(payment)
            self.db.commit()
            self.db.refresh(payment)
        logger.info(
            f"Recorded {model.__name__}: tenant_id={tenant_id}, "
            f"month={payment.month}, amount={amount_paid}"
        )
        return payment

    def list_rent_payments(
        self, tenant_id: int | None = None, month: date | None = None
    ) -> list[RentPayment]:
        return self._list_payments(RentPayment, tenant_id, month)

    def list_mess_payments(
        self, tenant_id: int | None = None, month: date | None = None
    ) -> list[MessPayment]:
        return self._list_payments(MessPayment, tenant_id, month)

    def add_rent_payment(
        self, tenant_id: int, month: date, amount_paid: int, payment_date: date
    ) -> RentPayment:
        return self._add_payment(RentPayment, tenant_id, month, amount_paid, payment_date)

    def add_mess_payment(
        self, tenant_id: int, month: date, amount_paid: int, payment_date: date
    ) -> MessPayment:
        return self._add_payment(MessPayment, tenant_id, month, amount_paid, payment_date)

    # ------------------------------------------------------------------
    # Deposit transactions
    # ------------------------------------------------------------------

    def list_deposit_transactions(self, tenant_id: int | None = None) -> list[DepositTransaction]:
        """Deposit transactions, newest date first."""
        with self._operation("load deposit transactions"):
            query = self.db.query(DepositTransaction)
            if tenant_id is not None:
                query = query.filter(DepositTransaction.tenant_id == tenant_id)
            return query.order_by(
                DepositTransaction.date.desc(), DepositTransaction.id.desc()
            ).all()

    def add_deposit_transaction(
        self,
        tenant_id: int,
        transaction_date: date,
        amount: int,
        transaction_type: str,
        reason: str = "",
    ) -> DepositTransaction:
        """Record a deduction from or refund to a tenant's deposit.

        Raises:
            ValidationError: Non-positive amount or unknown type
            NotFoundError: Unknown tenant
        """
        if amount is None or amount <= 0:
            raise ValidationError("Deposit transaction amount must be positive")
        try:
            kind = DepositTransactionType(transaction_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown deposit transaction type: {transaction_type}"
            ) from e
        self._require_tenant(tenant_id)

        transaction = DepositTransaction(
            tenant_id=tenant_id,
            date=transaction_date,
            amount=amount,
            type=kind.value,
            reason=(reason or "").strip(),
        )
        with self._operation("add deposit transaction"):
            self.db.add(transaction)
            self.db.commit()
            self.db.refresh(transaction)
        logger.info(
            f"Recorded deposit {kind.value}: tenant_id={tenant_id}, amount={amount}, "
            f"reason={transaction.reason!r}"
        )
        return transaction


__all__ = ["LedgerStore", "TENANT_STATUSES", "DUPLICATE_ROOM_MESSAGE"]
