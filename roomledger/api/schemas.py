"""Request and response schemas for the HTTP API."""

import datetime

from pydantic import BaseModel, ConfigDict


# Requests


class RoomCreateRequest(BaseModel):
    name: str
    rent: int = 0


class RoomUpdateRequest(BaseModel):
    name: str | None = None
    rent: int | None = None


class TenantCreateRequest(BaseModel):
    name: str
    phone: str = ""
    room_id: int
    join_date: datetime.date
    uses_mess: bool = False
    deposit_amount: int = 0


class TenantUpdateRequest(BaseModel):
    """Partial update; only fields present in the body are applied."""

    name: str | None = None
    phone: str | None = None
    room_id: int | None = None
    join_date: datetime.date | None = None
    leave_date: datetime.date | None = None
    uses_mess: bool | None = None
    deposit_amount: int | None = None  # rejected by the store, kept for a clear error


class LeaveRequest(BaseModel):
    leave_date: datetime.date | None = None  # defaults to today


class PaymentCreateRequest(BaseModel):
    month: str | None = None  # YYYY-MM, defaults to the current month
    amount_paid: int
    payment_date: datetime.date | None = None  # defaults to today


class DepositTransactionCreateRequest(BaseModel):
    amount: int
    type: str
    reason: str = ""
    date: datetime.date | None = None  # defaults to today


# Responses


class RoomResponse(BaseModel):
    id: int
    name: str
    rent: int

    model_config = ConfigDict(from_attributes=True)


class TenantResponse(BaseModel):
    id: int
    name: str
    phone: str
    room_id: int
    join_date: datetime.date
    leave_date: datetime.date | None
    uses_mess: bool
    deposit_amount: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class PaymentResponse(BaseModel):
    id: int
    tenant_id: int
    month: datetime.date
    amount_paid: int
    payment_date: datetime.date

    model_config = ConfigDict(from_attributes=True)


class DepositTransactionResponse(BaseModel):
    id: int
    tenant_id: int
    date: datetime.date
    amount: int
    type: str
    reason: str

    model_config = ConfigDict(from_attributes=True)


class MonthStatusResponse(BaseModel):
    paid: bool
    amount_paid: int

    model_config = ConfigDict(from_attributes=True)


class DepositSummaryResponse(BaseModel):
    initial_deposit: int
    total_deducted: int
    total_refunded: int
    balance: int

    model_config = ConfigDict(from_attributes=True)


class TenantListItemResponse(BaseModel):
    tenant: TenantResponse
    deposit_balance: int

    model_config = ConfigDict(from_attributes=True)


class RoomListResponse(BaseModel):
    rooms: list[RoomResponse]
    notice: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TenantListResponse(BaseModel):
    status: str
    query: str
    items: list[TenantListItemResponse]
    notice: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TenantProfileResponse(BaseModel):
    tenant: TenantResponse
    room: RoomResponse | None
    month: datetime.date
    rent_status: MonthStatusResponse
    mess_status: MonthStatusResponse | None
    deposit: DepositSummaryResponse
    rent_payments: list[PaymentResponse]
    mess_payments: list[PaymentResponse]
    deposit_transactions: list[DepositTransactionResponse]

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    month: datetime.date
    active_count: int
    inactive_count: int
    total_rooms: int
    pending_rent_count: int
    pending_mess_count: int
    pending_rent: list[TenantResponse]
    pending_mess: list[TenantResponse]
    total_rent_collected: int
    total_mess_collected: int
    total_income: int
    total_deposits_held: int
    recent_tenants: list[TenantResponse]
    notice: str | None = None


class PaymentTrackingResponse(BaseModel):
    month: datetime.date
    payments: list[PaymentResponse]
    total_collected: int
    pending: list[TenantResponse]
    notice: str | None = None

    model_config = ConfigDict(from_attributes=True)


class DepositManagementResponse(BaseModel):
    query: str
    transactions: list[DepositTransactionResponse]
    total_initial: int
    total_deducted: int
    total_refunded: int
    total_held: int
    notice: str | None = None
