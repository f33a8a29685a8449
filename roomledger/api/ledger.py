"""Ledger API endpoints for rooms, tenants, payments and deposits."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from roomledger.api.schemas import (
    DashboardResponse,
    DepositManagementResponse,
    DepositSummaryResponse,
    DepositTransactionCreateRequest,
    DepositTransactionResponse,
    LeaveRequest,
    MonthStatusResponse,
    PaymentCreateRequest,
    PaymentResponse,
    PaymentTrackingResponse,
    RoomCreateRequest,
    RoomListResponse,
    RoomResponse,
    RoomUpdateRequest,
    TenantCreateRequest,
    TenantListResponse,
    TenantProfileResponse,
    TenantResponse,
    TenantUpdateRequest,
)
from roomledger.services import get_db
from roomledger.services.dashboard_service import LedgerViewService
from roomledger.services.errors import (
    DataFetchError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from roomledger.services.ledger import month_start, parse_month
from roomledger.services.store import LedgerStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ledger"])


def get_store(db: Session = Depends(get_db)) -> LedgerStore:
    return LedgerStore(db)


def get_view_service(store: LedgerStore = Depends(get_store)) -> LedgerViewService:
    return LedgerViewService(store)


def _resolve_month(value: str | None) -> date:
    """Parse a month query value; the current month is the default.

    This is the only place the clock is read for month selection.
    """
    if not value:
        return month_start(date.today())
    try:
        return parse_month(value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


def _to_http(error: LedgerError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, DataFetchError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")


# Dashboard


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    month: str | None = Query(None, description="Month as YYYY-MM"),
    views: LedgerViewService = Depends(get_view_service),
) -> DashboardResponse:
    view = views.dashboard(_resolve_month(month))
    summary = view.summary
    return DashboardResponse(
        month=summary.month,
        active_count=summary.active_count,
        inactive_count=summary.inactive_count,
        total_rooms=view.total_rooms,
        pending_rent_count=summary.pending_rent_count,
        pending_mess_count=summary.pending_mess_count,
        pending_rent=[TenantResponse.model_validate(t) for t in summary.pending_rent],
        pending_mess=[TenantResponse.model_validate(t) for t in summary.pending_mess],
        total_rent_collected=summary.total_rent_collected,
        total_mess_collected=summary.total_mess_collected,
        total_income=summary.total_income,
        total_deposits_held=summary.total_deposits_held,
        recent_tenants=[TenantResponse.model_validate(t) for t in view.recent_tenants],
        notice=view.notice,
    )


# Rooms


@router.get("/rooms", response_model=RoomListResponse)
def list_rooms(views: LedgerViewService = Depends(get_view_service)) -> RoomListResponse:
    return RoomListResponse.model_validate(views.room_list())


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    request: RoomCreateRequest, store: LedgerStore = Depends(get_store)
) -> RoomResponse:
    try:
        return RoomResponse.model_validate(store.create_room(request.name, request.rent))
    except LedgerError as e:
        raise _to_http(e) from e


@router.put("/rooms/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int, request: RoomUpdateRequest, store: LedgerStore = Depends(get_store)
) -> RoomResponse:
    try:
        room = store.update_room(room_id, name=request.name, rent=request.rent)
        return RoomResponse.model_validate(room)
    except LedgerError as e:
        raise _to_http(e) from e


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: int, store: LedgerStore = Depends(get_store)) -> None:
    try:
        store.delete_room(room_id)
    except LedgerError as e:
        raise _to_http(e) from e


# Tenants


@router.get("/tenants", response_model=TenantListResponse)
def list_tenants(
    status_filter: str = Query("all", alias="status", description="all, active or left"),
    q: str = Query("", description="Search by name or phone"),
    views: LedgerViewService = Depends(get_view_service),
) -> TenantListResponse:
    try:
        return TenantListResponse.model_validate(views.tenant_list(status_filter, q))
    except LedgerError as e:
        raise _to_http(e) from e


@router.post("/tenants", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    request: TenantCreateRequest, store: LedgerStore = Depends(get_store)
) -> TenantResponse:
    try:
        tenant = store.create_tenant(
            name=request.name,
            phone=request.phone,
            room_id=request.room_id,
            join_date=request.join_date,
            uses_mess=request.uses_mess,
            deposit_amount=request.deposit_amount,
        )
        return TenantResponse.model_validate(tenant)
    except LedgerError as e:
        raise _to_http(e) from e


@router.get("/tenants/{tenant_id}", response_model=TenantProfileResponse)
def get_tenant_profile(
    tenant_id: int,
    month: str | None = Query(None, description="Month as YYYY-MM"),
    views: LedgerViewService = Depends(get_view_service),
) -> TenantProfileResponse:
    target_month = _resolve_month(month)
    try:
        profile = views.tenant_profile(tenant_id, target_month)
    except LedgerError as e:
        raise _to_http(e) from e

    return TenantProfileResponse(
        tenant=TenantResponse.model_validate(profile.tenant),
        room=RoomResponse.model_validate(profile.room) if profile.room else None,
        month=profile.month,
        rent_status=MonthStatusResponse(**profile.rent_status._asdict()),
        mess_status=(
            MonthStatusResponse(**profile.mess_status._asdict())
            if profile.mess_status is not None
            else None
        ),
        deposit=DepositSummaryResponse(**profile.deposit._asdict()),
        rent_payments=[PaymentResponse.model_validate(p) for p in profile.rent_payments],
        mess_payments=[PaymentResponse.model_validate(p) for p in profile.mess_payments],
        deposit_transactions=[
            DepositTransactionResponse.model_validate(t) for t in profile.deposit_transactions
        ],
    )


@router.put("/tenants/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: int, request: TenantUpdateRequest, store: LedgerStore = Depends(get_store)
) -> TenantResponse:
    try:
        tenant = store.update_tenant(tenant_id, **request.model_dump(exclude_unset=True))
        return TenantResponse.model_validate(tenant)
    except LedgerError as e:
        raise _to_http(e) from e


@router.post("/tenants/{tenant_id}/leave", response_model=TenantResponse)
def mark_tenant_left(
    tenant_id: int, request: LeaveRequest, store: LedgerStore = Depends(get_store)
) -> TenantResponse:
    try:
        tenant = store.mark_tenant_left(tenant_id, request.leave_date or date.today())
        return TenantResponse.model_validate(tenant)
    except LedgerError as e:
        raise _to_http(e) from e


# Payments and deposit transactions


@router.post(
    "/tenants/{tenant_id}/rent-payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_rent_payment(
    tenant_id: int, request: PaymentCreateRequest, store: LedgerStore = Depends(get_store)
) -> PaymentResponse:
    month = _resolve_month(request.month)
    try:
        payment = store.add_rent_payment(
            tenant_id, month, request.amount_paid, request.payment_date or date.today()
        )
        return PaymentResponse.model_validate(payment)
    except LedgerError as e:
        raise _to_http(e) from e


@router.post(
    "/tenants/{tenant_id}/mess-payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_mess_payment(
    tenant_id: int, request: PaymentCreateRequest, store: LedgerStore = Depends(get_store)
) -> PaymentResponse:
    month = _resolve_month(request.month)
    try:
        payment = store.add_mess_payment(
            tenant_id, month, request.amount_paid, request.payment_date or date.today()
        )
        return PaymentResponse.model_validate(payment)
    except LedgerError as e:
        raise _to_http(e) from e


@router.post(
    "/tenants/{tenant_id}/deposit-transactions",
    response_model=DepositTransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_deposit_transaction(
    tenant_id: int,
    request: DepositTransactionCreateRequest,
    store: LedgerStore = Depends(get_store),
) -> DepositTransactionResponse:
    try:
        transaction = store.add_deposit_transaction(
            tenant_id,
            request.date or date.today(),
            request.amount,
            request.type,
            request.reason,
        )
        return DepositTransactionResponse.model_validate(transaction)
    except LedgerError as e:
        raise _to_http(e) from e


# Tracking screens


@router.get("/rent", response_model=PaymentTrackingResponse)
def rent_tracking(
    month: str | None = Query(None, description="Month as YYYY-MM"),
    views: LedgerViewService = Depends(get_view_service),
) -> PaymentTrackingResponse:
    return PaymentTrackingResponse.model_validate(views.rent_tracking(_resolve_month(month)))


@router.get("/mess", response_model=PaymentTrackingResponse)
def mess_tracking(
    month: str | None = Query(None, description="Month as YYYY-MM"),
    views: LedgerViewService = Depends(get_view_service),
) -> PaymentTrackingResponse:
    return PaymentTrackingResponse.model_validate(views.mess_tracking(_resolve_month(month)))


@router.get("/deposits", response_model=DepositManagementResponse)
def deposit_management(
    q: str = Query("", description="Search by tenant name or phone"),
    views: LedgerViewService = Depends(get_view_service),
) -> DepositManagementResponse:
    view = views.deposit_management(q)
    return DepositManagementResponse(
        query=view.query,
        transactions=[DepositTransactionResponse.model_validate(t) for t in view.transactions],
        total_initial=view.overview.total_initial,
        total_deducted=view.overview.total_deducted,
        total_refunded=view.overview.total_refunded,
        total_held=view.overview.total_held,
        notice=view.notice,
    )
