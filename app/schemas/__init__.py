"""Pydantic request and response schemas."""

from app.schemas.cars import (
    CarResponse,
    CreateCarRequest,
    CreateOwnerRequest,
    InsuranceValidityResponse,
    OwnerResponse,
)
from app.schemas.expiration import ExpirationCheckResponse, ExpirationCheckResult
from app.schemas.history import (
    CarHistoryResponse,
    ClaimEvent,
    HistoryEvent,
    HistoryEventType,
    PolicyEndEvent,
    PolicyStartEvent,
)
from app.schemas.policies import (
    ClaimResponse,
    CreateClaimRequest,
    CreatePolicyRequest,
    PolicyResponse,
)

__all__ = [
    "CarHistoryResponse",
    "CarResponse",
    "ClaimEvent",
    "ClaimResponse",
    "CreateCarRequest",
    "CreateClaimRequest",
    "CreateOwnerRequest",
    "CreatePolicyRequest",
    "ExpirationCheckResponse",
    "ExpirationCheckResult",
    "HistoryEvent",
    "HistoryEventType",
    "InsuranceValidityResponse",
    "OwnerResponse",
    "PolicyEndEvent",
    "PolicyResponse",
    "PolicyStartEvent",
]
