"""Car history event schemas.

History events form a closed tagged union; ``event_type`` is the
discriminator and only takes the values of ``HistoryEventType``.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field


class HistoryEventType(str, Enum):
    """Discriminator labels for history events."""

    POLICY_START = "PolicyStart"
    POLICY_END = "PolicyEnd"
    CLAIM = "Claim"


class PolicyStartEvent(BaseModel):
    event_type: Literal[HistoryEventType.POLICY_START] = HistoryEventType.POLICY_START
    date: date
    provider: str


class PolicyEndEvent(BaseModel):
    event_type: Literal[HistoryEventType.POLICY_END] = HistoryEventType.POLICY_END
    date: date
    provider: str


class ClaimEvent(BaseModel):
    event_type: Literal[HistoryEventType.CLAIM] = HistoryEventType.CLAIM
    date: date
    description: str
    amount: Decimal


HistoryEvent = Annotated[
    Union[PolicyStartEvent, PolicyEndEvent, ClaimEvent],
    Field(discriminator="event_type"),
]


class CarHistoryResponse(BaseModel):
    """Chronological history of a car."""

    car_id: int
    events: List[HistoryEvent] = Field(default_factory=list)
