"""SQLAlchemy models for all database tables."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TIMESTAMP,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


class Owner(Base):
    """Car owner."""

    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    # Relationships
    cars: Mapped[list["Car"]] = relationship("Car", back_populates="owner")


class Car(Base):
    """Insured vehicle, identified by its VIN."""

    __tablename__ = "cars"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vin: Mapped[str] = mapped_column(
        String(17), unique=True, nullable=False, comment="Vehicle identification number"
    )
    make: Mapped[str | None] = mapped_column(String, nullable=True)
    model: Mapped[str | None] = mapped_column(String, nullable=True)
    year_of_manufacture: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("owners.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    # Relationships
    owner: Mapped["Owner"] = relationship("Owner", back_populates="cars")
    policies: Mapped[list["InsurancePolicy"]] = relationship(
        "InsurancePolicy", back_populates="car", order_by="InsurancePolicy.id"
    )
    claims: Mapped[list["Claim"]] = relationship(
        "Claim", back_populates="car", order_by="Claim.id"
    )


class InsurancePolicy(Base):
    """Insurance policy covering a car for an inclusive date range."""

    __tablename__ = "insurance_policies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    car_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cars.id"), nullable=False, index=True
    )
    provider: Mapped[str | None] = mapped_column(String, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    # Relationships
    car: Mapped["Car"] = relationship("Car", back_populates="policies")


class Claim(Base):
    """Insurance claim registered against a car."""

    __tablename__ = "claims"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    car_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cars.id"), nullable=False, index=True
    )
    claim_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    # Relationships
    car: Mapped["Car"] = relationship("Car", back_populates="claims")


class ProcessedExpiration(Base):
    """Append-only ledger of policy expirations that were already reported."""

    __tablename__ = "processed_expirations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    policy_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("insurance_policies.id"),
        unique=True,
        nullable=False,
        comment="At most one row per policy",
    )
    expiration_date: Mapped[date] = mapped_column(
        Date, nullable=False, comment="Policy end date at processing time"
    )
    processed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
