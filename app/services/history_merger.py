"""Merge a car's policies and claims into one chronological event list."""

from typing import Iterable, List, Union

from app.database.models import Claim, InsurancePolicy
from app.schemas.history import ClaimEvent, PolicyEndEvent, PolicyStartEvent

UNKNOWN_PROVIDER = "Unknown"

HistoryEventModel = Union[PolicyStartEvent, PolicyEndEvent, ClaimEvent]


def merge_history(
    policies: Iterable[InsurancePolicy], claims: Iterable[Claim]
) -> List[HistoryEventModel]:
    """Build the ascending-by-date event list for a car.

    Each policy yields a start and an end event; each claim yields one event.
    Events are generated policies first, then claims, each in the given
    order, and sorted by date only. ``sorted`` is stable, so events sharing
    a date keep that generation order.

    Args:
        policies: The car's policies
        claims: The car's claims

    Returns:
        Events sorted ascending by date
    """
    events: List[HistoryEventModel] = []

    for policy in policies:
        provider = policy.provider or UNKNOWN_PROVIDER
        events.append(PolicyStartEvent(date=policy.start_date, provider=provider))
        events.append(PolicyEndEvent(date=policy.end_date, provider=provider))

    for claim in claims:
        events.append(
            ClaimEvent(date=claim.claim_date, description=claim.description, amount=claim.amount)
        )

    return sorted(events, key=lambda event: event.date)
