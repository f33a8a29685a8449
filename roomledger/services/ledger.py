"""Ledger calculations for rent, mess and security deposits.

Every function here is a pure computation over rows that were already
fetched from the store. Nothing reads the clock or touches the database:
the month being evaluated is always passed in by the caller.

Deposit balance formula:
    balance = initial_deposit - sum(deductions) + sum(refunds)

Monthly status:
    amount_paid = sum of the tenant's payments whose month equals the target month
    paid = amount_paid > 0

Month keys are compared by exact date equality, so both the stored month and
the target month must be normalized with month_start().
"""

from datetime import date, datetime
from typing import Iterable, NamedTuple, Protocol, Sequence

from roomledger.models.deposit_transaction import DepositTransactionType


class TenantLike(Protocol):
    id: int
    leave_date: date | None
    uses_mess: bool
    deposit_amount: int | None


class PaymentLike(Protocol):
    tenant_id: int
    month: date
    amount_paid: int


class DepositTransactionLike(Protocol):
    tenant_id: int
    type: str
    amount: int


def month_start(value: date) -> date:
    """Normalize a date (or datetime) to the first day of its month."""
    if isinstance(value, datetime):
        value = value.date()
    return value.replace(day=1)


def parse_month(value: str) -> date:
    """Parse 'YYYY-MM' or 'YYYY-MM-DD' into a month key.

    Raises:
        ValueError: If the value is not a valid month or date
    """
    text = value.strip()
    try:
        if len(text) == 7:
            parsed = datetime.strptime(text, "%Y-%m").date()
        else:
            parsed = date.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from e
    return month_start(parsed)


def format_month(month: date) -> str:
    """Render a month key as 'YYYY-MM'."""
    return month.strftime("%Y-%m")


def is_active(tenant: TenantLike) -> bool:
    """A tenant is active while no leave date is recorded."""
    return tenant.leave_date is None


class MonthStatus(NamedTuple):
    """Payment status of one tenant for one month."""

    paid: bool
    amount_paid: int


class DepositSummary(NamedTuple):
    """Deposit balance together with the totals it was derived from."""

    initial_deposit: int
    total_deducted: int
    total_refunded: int
    balance: int


class DepositLedger:
    """Security deposit balance calculations.

    The balance is not clamped. Deductions larger than the deposit plus
    refunds give a negative balance, which is a valid state to display.
    """

    def summary(
        self, initial_deposit: int | None, transactions: Iterable[DepositTransactionLike]
    ) -> DepositSummary:
        """Compute balance plus total deducted and total refunded."""
        initial = initial_deposit or 0
        total_deducted = 0
        total_refunded = 0
        for transaction in transactions:
            if transaction.type == DepositTransactionType.DEDUCTION:
                total_deducted += transaction.amount
            elif transaction.type == DepositTransactionType.REFUND:
                total_refunded += transaction.amount

        return DepositSummary(
            initial_deposit=initial,
            total_deducted=total_deducted,
            total_refunded=total_refunded,
            balance=initial - total_deducted + total_refunded,
        )

    def current_balance(
        self, initial_deposit: int | None, transactions: Iterable[DepositTransactionLike]
    ) -> int:
        """Current held deposit: initial - deductions + refunds."""
        return self.summary(initial_deposit, transactions).balance


class MonthlyLedger:
    """Shared month-matching logic for rent and mess payments."""

    def applies_to(self, tenant: TenantLike) -> bool:
        return True

    def payments_for_month(
        self, month: date, payments: Iterable[PaymentLike]
    ) -> list[PaymentLike]:
        """Payments whose month key equals the given month."""
        key = month_start(month)
        return [p for p in payments if p.month == key]

    def total_for_month(self, month: date, payments: Iterable[PaymentLike]) -> int:
        """Sum of all payments for the month, whoever they belong to."""
        return sum(p.amount_paid for p in self.payments_for_month(month, payments))

    def status_for_month(
        self, tenant: TenantLike, month: date, payments: Iterable[PaymentLike]
    ) -> MonthStatus:
        """Paid status and amount for one tenant in one month.

        A month whose payments total zero counts as unpaid.
        """
        amount_paid = sum(
            p.amount_paid
            for p in self.payments_for_month(month, payments)
            if p.tenant_id == tenant.id
        )
        return MonthStatus(paid=amount_paid > 0, amount_paid=amount_paid)

    def pending(
        self,
        tenants: Iterable[TenantLike],
        month: date,
        payments: Sequence[PaymentLike],
    ) -> list[TenantLike]:
        """Active tenants this ledger applies to who have not paid for the month."""
        paid_by_tenant: dict[int, int] = {}
        for payment in self.payments_for_month(month, payments):
            paid_by_tenant[payment.tenant_id] = (
                paid_by_tenant.get(payment.tenant_id, 0) + payment.amount_paid
            )

        return [
            tenant
            for tenant in tenants
            if is_active(tenant)
            and self.applies_to(tenant)
            and paid_by_tenant.get(tenant.id, 0) <= 0
        ]


class RentLedger(MonthlyLedger):
    """Monthly rent status. Every tenant owes rent."""


class MessLedger(MonthlyLedger):
    """Monthly mess status. Only tenants with mess participation owe anything."""

    def applies_to(self, tenant: TenantLike) -> bool:
        return bool(tenant.uses_mess)


__all__ = [
    "month_start",
    "parse_month",
    "format_month",
    "is_active",
    "MonthStatus",
    "DepositSummary",
    "DepositLedger",
    "MonthlyLedger",
    "RentLedger",
    "MessLedger",
]
