"""Database module for SQLAlchemy models."""

from app.database.models import (
    Car,
    Claim,
    InsurancePolicy,
    Owner,
    ProcessedExpiration,
)

__all__ = [
    "Owner",
    "Car",
    "InsurancePolicy",
    "Claim",
    "ProcessedExpiration",
]
