"""SQLAlchemy table mappings for the repair-shop store.

Rows here are persistence shapes only; the store maps them to and from
domain objects. Referential rules live in the schema:

- Vehicles → Customers: ON DELETE CASCADE
- ServiceOrders → Vehicles: ON DELETE RESTRICT
- line-item tables → ServiceOrders: no cascade; the order service deletes
  children explicitly before the header.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class CustomerRow(Base):
    __tablename__ = "Customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rfc: Mapped[str] = mapped_column(String(13), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    first_lastname: Mapped[str] = mapped_column(String(50), nullable=False)
    second_lastname: Mapped[str | None] = mapped_column(String(50), nullable=True)
    street: Mapped[str] = mapped_column(String(100), default="")
    street_number: Mapped[str] = mapped_column(String(10), default="")
    suburb: Mapped[str] = mapped_column(String(100), default="")
    postal_code: Mapped[str] = mapped_column(String(10), default="")
    city: Mapped[str] = mapped_column(String(100), default="")
    main_phone: Mapped[str] = mapped_column(String(20), default="")
    secondary_phone1: Mapped[str | None] = mapped_column(String(20), nullable=True)
    secondary_phone2: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(50), nullable=True)
    registration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class VehicleRow(Base):
    __tablename__ = "Vehicles"

    serial_number: Mapped[str] = mapped_column(String(50), primary_key=True)
    plate_number: Mapped[str] = mapped_column(String(15), nullable=False)
    brand: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str] = mapped_column(String(30), nullable=False)
    mileage: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    antiquity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("Customers.customer_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class MechanicRow(Base):
    __tablename__ = "Mechanics"

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rfc: Mapped[str] = mapped_column(String(13), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    first_lastname: Mapped[str] = mapped_column(String(50), nullable=False)
    second_lastname: Mapped[str | None] = mapped_column(String(50), nullable=True)
    fields: Mapped[str] = mapped_column(String(50), default="Otros")
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    experience: Mapped[int] = mapped_column(Integer, nullable=False)


class ServiceRow(Base):
    __tablename__ = "Services"

    service_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    estimated_time: Mapped[int] = mapped_column(Integer, nullable=False)


class ReplacementRow(Base):
    __tablename__ = "Replacements"

    replacement_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    brand: Mapped[str] = mapped_column(String(50), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    current_stock: Mapped[int] = mapped_column(Integer, default=0)
    minimum_stock: Mapped[int] = mapped_column(Integer, default=0)
    supplier: Mapped[str | None] = mapped_column(String(100), nullable=True)


class ServiceOrderRow(Base):
    __tablename__ = "ServiceOrders"
    # AUTOINCREMENT keeps SQLite from handing out a deleted folio again.
    __table_args__ = {"sqlite_autoincrement": True}

    folio: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    estimated_delivery_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    delivery_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    state: Mapped[str] = mapped_column(String(30), nullable=False, default="Abierta")
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    serial_number: Mapped[str] = mapped_column(
        ForeignKey("Vehicles.serial_number", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class OrderServiceRow(Base):
    __tablename__ = "OrderServices"
    __table_args__ = (
        CheckConstraint("quantity BETWEEN 1 AND 9999", name="ck_order_services_quantity"),
    )

    service_id: Mapped[int] = mapped_column(
        ForeignKey("Services.service_id"), primary_key=True
    )
    folio: Mapped[int] = mapped_column(
        ForeignKey("ServiceOrders.folio"), primary_key=True, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)


class OrderReplacementRow(Base):
    __tablename__ = "OrderReplacements"
    __table_args__ = (
        CheckConstraint("quantity BETWEEN 1 AND 9999", name="ck_order_replacements_quantity"),
    )

    replacement_id: Mapped[int] = mapped_column(
        ForeignKey("Replacements.replacement_id"), primary_key=True
    )
    folio: Mapped[int] = mapped_column(
        ForeignKey("ServiceOrders.folio"), primary_key=True, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)


class OrderMechanicRow(Base):
    __tablename__ = "OrderMechanics"

    employee_id: Mapped[int] = mapped_column(
        ForeignKey("Mechanics.employee_id"), primary_key=True
    )
    folio: Mapped[int] = mapped_column(
        ForeignKey("ServiceOrders.folio"), primary_key=True, index=True
    )
