"""Insurance policy and claim schemas."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreatePolicyRequest(BaseModel):
    """Payload for adding a policy to a car."""

    provider: str = Field(..., description="Insurer display name")
    start_date: date = Field(..., description="First covered day (inclusive)")
    end_date: date = Field(..., description="Last covered day (inclusive)")


class PolicyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    car_id: int
    provider: Optional[str] = None
    start_date: date
    end_date: date


class CreateClaimRequest(BaseModel):
    """Payload for registering a claim against a car."""

    claim_date: date = Field(..., description="Day of the incident, not in the future")
    description: str = Field(..., description="What happened")
    amount: Decimal = Field(..., description="Claimed amount, greater than zero")


class ClaimResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    car_id: int
    claim_date: date
    description: str
    amount: Decimal
