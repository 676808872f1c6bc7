"""Tests for the car history merger."""

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

from app.schemas.history import CarHistoryResponse, HistoryEventType
from app.services.history_merger import UNKNOWN_PROVIDER, merge_history


def _policy(start: date, end: date, provider="Allianz"):
    return SimpleNamespace(start_date=start, end_date=end, provider=provider)


def _claim(claim_date: date, description="Windshield", amount=Decimal("300.00")):
    return SimpleNamespace(claim_date=claim_date, description=description, amount=amount)


class TestMergeHistory:
    """Chronological merging of policies and claims."""

    def test_policy_and_claim_events_are_sorted_by_date(self) -> None:
        policies = [_policy(date(2024, 1, 1), date(2024, 12, 31))]
        claims = [_claim(date(2024, 6, 10), description="Hail damage", amount=Decimal("850.50"))]

        events = merge_history(policies, claims)

        assert [e.event_type for e in events] == [
            HistoryEventType.POLICY_START,
            HistoryEventType.CLAIM,
            HistoryEventType.POLICY_END,
        ]
        assert [e.date for e in events] == [date(2024, 1, 1), date(2024, 6, 10), date(2024, 12, 31)]
        assert events[1].amount == Decimal("850.50")
        assert events[0].provider == "Allianz"

    def test_claims_on_both_sides_of_a_policy_midpoint(self) -> None:
        day = date(2024, 5, 20)
        policies = [_policy(day - timedelta(days=10), day + timedelta(days=10))]
        claims = [_claim(day + timedelta(days=5), description="late"), _claim(day - timedelta(days=1), description="early")]

        events = merge_history(policies, claims)

        assert len(events) == 4
        assert [e.date for e in events] == sorted(e.date for e in events)
        assert events[0].event_type == HistoryEventType.POLICY_START
        assert [e.description for e in events[1:3]] == ["early", "late"]
        assert events[3].event_type == HistoryEventType.POLICY_END

    def test_two_policies_and_claim_interleave(self) -> None:
        policies = [
            _policy(date(2024, 1, 1), date(2024, 6, 30), provider="Allianz"),
            _policy(date(2024, 7, 1), date(2024, 12, 31), provider="Groupama"),
        ]
        claims = [_claim(date(2024, 8, 15))]

        events = merge_history(policies, claims)

        assert [(e.event_type, e.date) for e in events] == [
            (HistoryEventType.POLICY_START, date(2024, 1, 1)),
            (HistoryEventType.POLICY_END, date(2024, 6, 30)),
            (HistoryEventType.POLICY_START, date(2024, 7, 1)),
            (HistoryEventType.CLAIM, date(2024, 8, 15)),
            (HistoryEventType.POLICY_END, date(2024, 12, 31)),
        ]
        assert events[2].provider == "Groupama"

    def test_ties_keep_generation_order(self) -> None:
        same_day = date(2024, 3, 1)
        policies = [_policy(same_day, date(2024, 9, 1))]
        claims = [_claim(same_day, description="first"), _claim(same_day, description="second")]

        events = merge_history(policies, claims)

        assert events[0].event_type == HistoryEventType.POLICY_START
        assert [e.description for e in events[1:3]] == ["first", "second"]
        assert events[3].event_type == HistoryEventType.POLICY_END

    def test_missing_provider_is_reported_as_unknown(self) -> None:
        events = merge_history([_policy(date(2024, 1, 1), date(2024, 2, 1), provider=None)], [])

        assert [e.provider for e in events] == [UNKNOWN_PROVIDER, UNKNOWN_PROVIDER]

    def test_empty_inputs(self) -> None:
        assert merge_history([], []) == []

    def test_serialized_events_carry_type_tag(self) -> None:
        events = merge_history(
            [_policy(date(2024, 1, 1), date(2024, 2, 1))], [_claim(date(2024, 1, 15))]
        )

        payload = CarHistoryResponse(car_id=1, events=events).model_dump(mode="json")

        assert [e["event_type"] for e in payload["events"]] == ["PolicyStart", "Claim", "PolicyEnd"]
        assert "provider" not in payload["events"][1]
