"""Read models for the dashboard, tenant, rent, mess and deposit screens.

Each view fetches a fresh snapshot from LedgerStore and runs it through the
ledger calculators. When the store fails, the view logs the failure and
returns its empty variant with a notice for the operator instead of raising.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from roomledger.models import DepositTransaction, MessPayment, RentPayment, Room, Tenant
from roomledger.services.aggregation_service import (
    AggregationService,
    DepositOverview,
    MonthlySummary,
)
from roomledger.services.errors import DataFetchError, NotFoundError
from roomledger.services.ledger import DepositSummary, MonthStatus, month_start
from roomledger.services.store import LedgerStore

logger = logging.getLogger(__name__)

LOAD_FAILED_NOTICE = "Failed to load data"


@dataclass
class DashboardView:
    summary: MonthlySummary
    total_rooms: int = 0
    recent_tenants: list[Tenant] = field(default_factory=list)
    notice: str | None = None


@dataclass
class RoomListView:
    rooms: list[Room] = field(default_factory=list)
    notice: str | None = None


@dataclass
class TenantListItem:
    tenant: Tenant
    deposit_balance: int


@dataclass
class TenantListView:
    status: str
    query: str
    items: list[TenantListItem] = field(default_factory=list)
    notice: str | None = None


@dataclass
class TenantProfileView:
    tenant: Tenant
    room: Room | None
    month: date
    rent_status: MonthStatus
    mess_status: MonthStatus | None
    deposit: DepositSummary
    rent_payments: list[RentPayment] = field(default_factory=list)
    mess_payments: list[MessPayment] = field(default_factory=list)
    deposit_transactions: list[DepositTransaction] = field(default_factory=list)


@dataclass
class PaymentTrackingView:
    """Payments recorded for a month and the tenants still owing."""

    month: date
    payments: list = field(default_factory=list)
    total_collected: int = 0
    pending: list[Tenant] = field(default_factory=list)
    notice: str | None = None


@dataclass
class DepositManagementView:
    query: str
    transactions: list[DepositTransaction] = field(default_factory=list)
    overview: DepositOverview = field(default_factory=DepositOverview)
    notice: str | None = None


def matches_search(tenant: Tenant, query: str) -> bool:
    """Case-insensitive name match or plain phone substring match."""
    if not query:
        return True
    return query.lower() in tenant.name.lower() or query in (tenant.phone or "")


class LedgerViewService:
    """Assemble screen data from the store and the ledger calculators."""

    def __init__(self, store: LedgerStore, aggregation: AggregationService | None = None):
        self.store = store
        self.aggregation = aggregation or AggregationService()

    def dashboard(self, month: date) -> DashboardView:
        month = month_start(month)
        try:
            tenants = self.store.list_tenants()
            summary = self.aggregation.summarize(
                tenants,
                month,
                self.store.list_rent_payments(month=month),
                self.store.list_mess_payments(month=month),
                self.store.list_deposit_transactions(),
            )
            return DashboardView(
                summary=summary,
                total_rooms=self.store.count_rooms(),
                recent_tenants=self.store.recent_tenants(),
            )
        except DataFetchError as e:
            logger.warning(f"Dashboard for {month} fell back to empty view: {e}")
            return DashboardView(summary=MonthlySummary.empty(month), notice=LOAD_FAILED_NOTICE)

    def room_list(self) -> RoomListView:
        try:
            return RoomListView(rooms=self.store.list_rooms())
        except DataFetchError as e:
            logger.warning(f"Room list fell back to empty view: {e}")
            return RoomListView(notice="Failed to load rooms")

    def tenant_list(self, status: str = "all", query: str = "") -> TenantListView:
        query = (query or "").strip()
        view = TenantListView(status=status, query=query)
        try:
            tenants = self.store.list_tenants(status)
            transactions = self.store.list_deposit_transactions()
        except DataFetchError as e:
            logger.warning(f"Tenant list fell back to empty view: {e}")
            view.notice = "Failed to load tenants"
            return view

        by_tenant: dict[int, list[DepositTransaction]] = {}
        for transaction in transactions:
            by_tenant.setdefault(transaction.tenant_id, []).append(transaction)

        ledger = self.aggregation.deposit_ledger
        view.items = [
            TenantListItem(
                tenant=tenant,
                deposit_balance=ledger.current_balance(
                    tenant.deposit_amount, by_tenant.get(tenant.id, [])
                ),
            )
            for tenant in tenants
            if matches_search(tenant, query)
        ]
        return view

    def tenant_profile(self, tenant_id: int, month: date) -> TenantProfileView:
        """Everything shown on a tenant's page.

        Unlike list views, a failed fetch propagates: there is nothing
        meaningful to show for a tenant that could not be loaded.

        Raises:
            NotFoundError: Unknown tenant
            DataFetchError: Store failure
        """
        month = month_start(month)
        tenant = self.store.get_tenant(tenant_id)
        if tenant is None:
            raise NotFoundError(f"Tenant {tenant_id} not found")

        rent_payments = self.store.list_rent_payments(tenant_id=tenant_id)
        mess_payments = self.store.list_mess_payments(tenant_id=tenant_id)
        transactions = self.store.list_deposit_transactions(tenant_id=tenant_id)

        rent_ledger = self.aggregation.rent_ledger
        mess_ledger = self.aggregation.mess_ledger
        mess_status = None
        if mess_ledger.applies_to(tenant):
            mess_status = mess_ledger.status_for_month(tenant, month, mess_payments)

        return TenantProfileView(
            tenant=tenant,
            room=self.store.get_room(tenant.room_id),
            month=month,
            rent_status=rent_ledger.status_for_month(tenant, month, rent_payments),
            mess_status=mess_status,
            deposit=self.aggregation.deposit_ledger.summary(tenant.deposit_amount, transactions),
            rent_payments=rent_payments,
            mess_payments=mess_payments,
            deposit_transactions=transactions,
        )

    def rent_tracking(self, month: date) -> PaymentTrackingView:
        month = month_start(month)
        try:
            payments = self.store.list_rent_payments(month=month)
            active = self.store.list_tenants("active")
        except DataFetchError as e:
            logger.warning(f"Rent tracking for {month} fell back to empty view: {e}")
            return PaymentTrackingView(month=month, notice=LOAD_FAILED_NOTICE)

        ledger = self.aggregation.rent_ledger
        return PaymentTrackingView(
            month=month,
            payments=payments,
            total_collected=ledger.total_for_month(month, payments),
            pending=ledger.pending(active, month, payments),
        )

    def mess_tracking(self, month: date) -> PaymentTrackingView:
        month = month_start(month)
        try:
            payments = self.store.list_mess_payments(month=month)
            active = self.store.list_tenants("active")
        except DataFetchError as e:
            logger.warning(f"Mess tracking for {month} fell back to empty view: {e}")
            return PaymentTrackingView(month=month, notice=LOAD_FAILED_NOTICE)

        ledger = self.aggregation.mess_ledger
        return PaymentTrackingView(
            month=month,
            payments=payments,
            total_collected=ledger.total_for_month(month, payments),
            pending=ledger.pending(active, month, payments),
        )

    def deposit_management(self, query: str = "") -> DepositManagementView:
        query = (query or "").strip()
        view = DepositManagementView(query=query)
        try:
            tenants = self.store.list_tenants()
            transactions = self.store.list_deposit_transactions()
        except DataFetchError as e:
            logger.warning(f"Deposit management fell back to empty view: {e}")
            view.notice = LOAD_FAILED_NOTICE
            return view

        tenants_by_id = {tenant.id: tenant for tenant in tenants}
        view.overview = self.aggregation.deposit_overview(tenants, transactions)
        view.transactions = [
            transaction
            for transaction in transactions
            if transaction.tenant_id in tenants_by_id
            and matches_search(tenants_by_id[transaction.tenant_id], query)
        ]
        return view


__all__ = [
    "LedgerViewService",
    "DashboardView",
    "RoomListView",
    "TenantListItem",
    "TenantListView",
    "TenantProfileView",
    "PaymentTrackingView",
    "DepositManagementView",
    "matches_search",
    "LOAD_FAILED_NOTICE",
]
