"""Room ORM model."""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomledger.models import Base, BaseModel


class Room(Base, BaseModel):
    """A rentable room with a fixed monthly rent.

    Room names are unique; the store reports a duplicate name as a
    validation error instead of letting the constraint violation escape.
    """

    __tablename__ = "rooms"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        comment="Display name, unique across rooms",
    )
    rent: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Monthly rent in whole currency units",
    )

    tenants: Mapped[list["Tenant"]] = relationship(  # noqa: F821
        "Tenant",
        back_populates="room",
    )

    __table_args__ = (CheckConstraint("rent >= 0", name="ck_room_rent_non_negative"),)

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name}, rent={self.rent})>"


__all__ = ["Room"]
