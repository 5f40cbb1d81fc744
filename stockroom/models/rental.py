# stockroom/models/rental.py
import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum as SqlEnum, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.db.session import Base
from stockroom.db.types import GUID, utcnow
from stockroom.domain.enums import RentalStatus


class Rental(Base):
    __tablename__ = "rentals"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("inventory_locations.id", ondelete="SET NULL"), nullable=True
    )
    rental_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    expected_return_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_amount: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)
    deposit_amount: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)
    status: Mapped[RentalStatus] = mapped_column(
        SqlEnum(RentalStatus, name="rental_status"), default=RentalStatus.active, nullable=False, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    items = relationship(
        "RentalItem",
        back_populates="rental",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def is_fully_returned(self) -> bool:
        return bool(self.items) and all(item.is_fully_returned for item in self.items)


class RentalItem(Base):
    __tablename__ = "rental_items"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    rental_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    total_price: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    returned_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    rental = relationship(Rental, back_populates="items")

    @property
    def outstanding_quantity(self) -> int:
        return self.quantity - (self.returned_quantity or 0)

    @property
    def is_fully_returned(self) -> bool:
        return (self.returned_quantity or 0) == self.quantity
