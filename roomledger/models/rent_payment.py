"""RentPayment ORM model for monthly rent receipts."""

from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomledger.models import Base, BaseModel


class RentPayment(Base, BaseModel):
    """Append-only rent payment entry for one tenant and one month.

    month always holds the first day of the month it pays for. Several
    payments for the same month are allowed and are summed.
    """

    __tablename__ = "rent_payments"

    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"),
        nullable=False,
        index=True,
    )
    month: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day of the month being paid for",
    )
    amount_paid: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)

    tenant: Mapped["Tenant"] = relationship(  # noqa: F821
        "Tenant",
        back_populates="rent_payments",
    )

    __table_args__ = (
        CheckConstraint("amount_paid >= 0", name="ck_rent_amount_non_negative"),
        Index("idx_rent_payment_month", "month"),
        Index("idx_rent_payment_tenant_month", "tenant_id", "month"),
    )

    def __repr__(self) -> str:
        return (
            f"<RentPayment(id={self.id}, tenant_id={self.tenant_id}, "
            f"month={self.month}, amount_paid={self.amount_paid})>"
        )


__all__ = ["RentPayment"]
