"""Property-wide monthly figures built from per-tenant ledger results.

Composes RentLedger, MessLedger and DepositLedger over an already-fetched
snapshot of tenants, payments and deposit transactions. Holds no state
between calls.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Sequence

from roomledger.services.ledger import (
    DepositLedger,
    DepositTransactionLike,
    MessLedger,
    PaymentLike,
    RentLedger,
    TenantLike,
    is_active,
    month_start,
)

logger = logging.getLogger(__name__)


@dataclass
class MonthlySummary:
    """Dashboard figures for one month."""

    month: date
    active_count: int = 0
    inactive_count: int = 0
    pending_rent: list = field(default_factory=list)
    pending_mess: list = field(default_factory=list)
    total_rent_collected: int = 0
    total_mess_collected: int = 0
    total_deposits_held: int = 0

    @property
    def pending_rent_count(self) -> int:
        return len(self.pending_rent)

    @property
    def pending_mess_count(self) -> int:
        return len(self.pending_mess)

    @property
    def total_income(self) -> int:
        return self.total_rent_collected + self.total_mess_collected

    @classmethod
    def empty(cls, month: date) -> "MonthlySummary":
        """Zero-valued summary shown when the data could not be loaded."""
        return cls(month=month_start(month))


@dataclass
class DepositOverview:
    """Deposit totals across all tenants."""

    total_initial: int = 0
    total_deducted: int = 0
    total_refunded: int = 0
    total_held: int = 0


class AggregationService:
    """Fold ledger results over the tenant population."""

    def __init__(
        self,
        rent_ledger: RentLedger | None = None,
        mess_ledger: MessLedger | None = None,
        deposit_ledger: DepositLedger | None = None,
    ):
        self.rent_ledger = rent_ledger or RentLedger()
        self.mess_ledger = mess_ledger or MessLedger()
        self.deposit_ledger = deposit_ledger or DepositLedger()

    @staticmethod
    def _group_by_tenant(
        transactions: Iterable[DepositTransactionLike],
    ) -> dict[int, list[DepositTransactionLike]]:
        grouped: dict[int, list[DepositTransactionLike]] = defaultdict(list)
        for transaction in transactions:
            grouped[transaction.tenant_id].append(transaction)
        return grouped

    def summarize(
        self,
        tenants: Sequence[TenantLike],
        month: date,
        rent_payments: Sequence[PaymentLike],
        mess_payments: Sequence[PaymentLike],
        deposit_transactions: Iterable[DepositTransactionLike],
    ) -> MonthlySummary:
        """Build the monthly summary.

        Args:
            tenants: All tenants, active and departed
            month: Month being reported on (normalized to its first day)
            rent_payments: Rent payments; only those for `month` are counted
            mess_payments: Mess payments; only those for `month` are counted
            deposit_transactions: Deposit transactions of all tenants

        Returns:
            MonthlySummary. Collected totals include payments recorded for
            tenants who have since left.
        """
        month = month_start(month)
        active = [t for t in tenants if is_active(t)]

        transactions_by_tenant = self._group_by_tenant(deposit_transactions)
        total_deposits_held = sum(
            self.deposit_ledger.current_balance(
                tenant.deposit_amount, transactions_by_tenant.get(tenant.id, [])
            )
            for tenant in tenants
            if tenant.deposit_amount is not None
        )

        summary = MonthlySummary(
            month=month,
            active_count=len(active),
            inactive_count=len(tenants) - len(active),
            pending_rent=self.rent_ledger.pending(active, month, rent_payments),
            pending_mess=self.mess_ledger.pending(active, month, mess_payments),
            total_rent_collected=self.rent_ledger.total_for_month(month, rent_payments),
            total_mess_collected=self.mess_ledger.total_for_month(month, mess_payments),
            total_deposits_held=total_deposits_held,
        )
        logger.debug(
            "summary month=%s active=%d pending_rent=%d pending_mess=%d income=%d",
            month,
            summary.active_count,
            summary.pending_rent_count,
            summary.pending_mess_count,
            summary.total_income,
        )
        return summary

    def deposit_overview(
        self,
        tenants: Iterable[TenantLike],
        deposit_transactions: Iterable[DepositTransactionLike],
    ) -> DepositOverview:
        """Initial, deducted, refunded and held deposit totals across tenants."""
        transactions_by_tenant = self._group_by_tenant(deposit_transactions)
        overview = DepositOverview()
        for tenant in tenants:
            if tenant.deposit_amount is None:
                continue
            result = self.deposit_ledger.summary(
                tenant.deposit_amount, transactions_by_tenant.get(tenant.id, [])
            )
            overview.total_initial += result.initial_deposit
            overview.total_deducted += result.total_deducted
            overview.total_refunded += result.total_refunded
            overview.total_held += result.balance
        return overview


__all__ = ["AggregationService", "MonthlySummary", "DepositOverview"]
