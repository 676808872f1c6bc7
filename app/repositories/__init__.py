"""Repository layer modules."""

from app.repositories.car_repository import CarRepository
from app.repositories.claim_repository import ClaimRepository
from app.repositories.owner_repository import OwnerRepository
from app.repositories.policy_repository import PolicyRepository
from app.repositories.processed_expiration_repository import ProcessedExpirationRepository

__all__ = [
    "CarRepository",
    "ClaimRepository",
    "OwnerRepository",
    "PolicyRepository",
    "ProcessedExpirationRepository",
]
