"""Tenant ORM model."""

from datetime import date

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomledger.models import Base, BaseModel


class Tenant(Base, BaseModel):
    """
    A person renting a room.

    A tenant is active while leave_date is null. Leaving never removes the
    tenant's payment or deposit history. deposit_amount is fixed when the
    tenant is created.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id"),
        nullable=False,
        index=True,
    )
    join_date: Mapped[date] = mapped_column(Date, nullable=False)
    leave_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Null while the tenant is active",
    )
    uses_mess: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Whether the tenant subscribes to the mess",
    )
    deposit_amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Security deposit collected at joining",
    )

    room: Mapped["Room"] = relationship("Room", back_populates="tenants")  # noqa: F821
    rent_payments: Mapped[list["RentPayment"]] = relationship(  # noqa: F821
        "RentPayment",
        back_populates="tenant",
    )
    mess_payments: Mapped[list["MessPayment"]] = relationship(  # noqa: F821
        "MessPayment",
        back_populates="tenant",
    )
    deposit_transactions: Mapped[list["DepositTransaction"]] = relationship(  # noqa: F821
        "DepositTransaction",
        back_populates="tenant",
    )

    __table_args__ = (
        CheckConstraint("deposit_amount >= 0", name="ck_tenant_deposit_non_negative"),
        CheckConstraint(
            "leave_date IS NULL OR leave_date >= join_date",
            name="ck_tenant_leave_after_join",
        ),
        Index("idx_tenant_leave_date", "leave_date"),
        Index("idx_tenant_name", "name"),
    )

    @property
    def is_active(self) -> bool:
        return self.leave_date is None

    def __repr__(self) -> str:
        return (
            f"<Tenant(id={self.id}, name={self.name}, room_id={self.room_id}, "
            f"active={self.is_active}, uses_mess={self.uses_mess})>"
        )


__all__ = ["Tenant"]
