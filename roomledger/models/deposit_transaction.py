"""DepositTransaction ORM model for security deposit movements."""

from datetime import date as date_type
from enum import Enum

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomledger.models import Base, BaseModel


class DepositTransactionType(str, Enum):
    """Direction of a deposit movement."""

    DEDUCTION = "deduction"
    """Amount withheld from the deposit (damages, dues)"""

    REFUND = "refund"
    """Amount credited back to the deposit"""


class DepositTransaction(Base, BaseModel):
    """Append-only deduction or refund against a tenant's security deposit."""

    __tablename__ = "deposit_transactions"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[DepositTransactionType] = mapped_column(
        String(20),
        nullable=False,
        comment="'deduction' or 'refund'",
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    tenant: Mapped["Tenant"] = relationship(  # noqa: F821
        "Tenant",
        back_populates="deposit_transactions",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_deposit_amount_positive"),
        Index("idx_deposit_tenant_date", "tenant_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<DepositTransaction(id={self.id}, tenant_id={self.tenant_id}, "
            f"type={self.type}, amount={self.amount}, date={self.date})>"
        )


__all__ = ["DepositTransaction", "DepositTransactionType"]
