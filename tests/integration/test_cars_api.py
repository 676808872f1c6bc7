"""End-to-end tests for the HTTP API over an in-memory database."""

from datetime import date, timedelta
from typing import Annotated

import pytest
from fastapi import Depends
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.admin import get_expiration_service
from app.core.database import get_async_session
from app.main import app
from app.services.expiration.detector import PolicyExpirationService

VIN = "1HGCM82633A004352"
API = "/api/v1"


async def _create_owner(client: AsyncClient, name: str = "Ana Popescu") -> dict:
    response = await client.post(f"{API}/owners", json={"name": name, "email": "ana@example.com"})
    assert response.status_code == 201
    return response.json()


async def _create_car(client: AsyncClient, vin: str = VIN) -> dict:
    owner = await _create_owner(client)
    response = await client.post(
        f"{API}/cars",
        json={"vin": vin, "make": "Dacia", "model": "Logan", "year_of_manufacture": 2020, "owner_id": owner["id"]},
    )
    assert response.status_code == 201
    return response.json()


def _future_range(offset_days: int = 0, length_days: int = 365) -> dict:
    start = date.today() + timedelta(days=offset_days)
    return {
        "provider": "Allianz",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=length_days)).isoformat(),
    }


class TestCarEndpoints:
    """Car registration and listing."""

    @pytest.mark.asyncio
    async def test_create_and_list_cars(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)

        assert car["vin"] == VIN
        assert car["owner_name"] == "Ana Popescu"

        response = await api_client.get(f"{API}/cars")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [car["id"]]

    @pytest.mark.asyncio
    async def test_duplicate_vin_returns_409(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)

        response = await api_client.post(
            f"{API}/cars",
            json={"vin": VIN, "year_of_manufacture": 2015, "owner_id": car["owner_id"]},
        )

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "ConflictError"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("vin", [VIN[:16], VIN + "X"])
    async def test_wrong_length_vin_returns_400(self, api_client: AsyncClient, vin: str) -> None:
        owner = await _create_owner(api_client)

        response = await api_client.post(
            f"{API}/cars",
            json={"vin": vin, "year_of_manufacture": 2015, "owner_id": owner["id"]},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "Vin"

    @pytest.mark.asyncio
    async def test_unknown_owner_returns_404(self, api_client: AsyncClient) -> None:
        response = await api_client.post(
            f"{API}/cars", json={"vin": VIN, "year_of_manufacture": 2015, "owner_id": 404}
        )

        assert response.status_code == 404


class TestPolicyEndpoints:
    """Policy creation and insurance validity."""

    @pytest.mark.asyncio
    async def test_overlapping_policy_returns_409(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)
        first = await api_client.post(f"{API}/cars/{car['id']}/policies", json=_future_range())
        assert first.status_code == 201

        second = await api_client.post(
            f"{API}/cars/{car['id']}/policies", json=_future_range(offset_days=365)
        )

        assert second.status_code == 409
        assert second.json()["detail"]["message"] == "Policy dates overlap with existing policy."

    @pytest.mark.asyncio
    async def test_policy_with_start_after_end_returns_400(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)
        payload = _future_range()
        payload["start_date"], payload["end_date"] = payload["end_date"], payload["start_date"]

        response = await api_client.post(f"{API}/cars/{car['id']}/policies", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "StartDate"

    @pytest.mark.asyncio
    async def test_insurance_valid_within_and_outside_policy(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)
        policy = _future_range(offset_days=10, length_days=30)
        await api_client.post(f"{API}/cars/{car['id']}/policies", json=policy)

        inside = await api_client.get(
            f"{API}/cars/{car['id']}/insurance-valid", params={"date": policy["end_date"]}
        )
        outside = await api_client.get(
            f"{API}/cars/{car['id']}/insurance-valid", params={"date": date.today().isoformat()}
        )

        assert inside.status_code == 200
        assert inside.json() == {"car_id": car["id"], "date": policy["end_date"], "valid": True}
        assert outside.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_insurance_valid_with_bad_date_format(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)

        response = await api_client.get(
            f"{API}/cars/{car['id']}/insurance-valid", params={"date": "15/06/2025"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Invalid date format. Use YYYY-MM-DD."

    @pytest.mark.asyncio
    async def test_insurance_valid_for_unknown_car(self, api_client: AsyncClient) -> None:
        response = await api_client.get(
            f"{API}/cars/999/insurance-valid", params={"date": "2025-01-01"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_insurance_valid_for_non_positive_car_id(self, api_client: AsyncClient) -> None:
        response = await api_client.get(f"{API}/cars/0/insurance-valid", params={"date": "2025-01-01"})

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "carId"


class TestClaimsAndHistoryEndpoints:
    """Claims and the merged car history."""

    @pytest.mark.asyncio
    async def test_claim_then_history(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)
        policy = _future_range(offset_days=0, length_days=30)
        await api_client.post(f"{API}/cars/{car['id']}/policies", json=policy)
        claim = await api_client.post(
            f"{API}/cars/{car['id']}/claims",
            json={"claim_date": date.today().isoformat(), "description": "Scratch", "amount": "250.00"},
        )
        assert claim.status_code == 201

        response = await api_client.get(f"{API}/cars/{car['id']}/history")

        assert response.status_code == 200
        events = response.json()["events"]
        assert [e["event_type"] for e in events] == ["PolicyStart", "Claim", "PolicyEnd"]
        assert events[1]["description"] == "Scratch"

    @pytest.mark.asyncio
    async def test_claim_with_zero_amount_returns_400(self, api_client: AsyncClient) -> None:
        car = await _create_car(api_client)

        response = await api_client.post(
            f"{API}/cars/{car['id']}/claims",
            json={"claim_date": date.today().isoformat(), "description": "Scratch", "amount": "0"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "Amount"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "/cars/99999999999999999999/history",
            "/cars/2147483648/insurance-valid?date=2025-01-01",
        ],
    )
    async def test_car_id_too_large_returns_400(self, api_client: AsyncClient, path: str) -> None:
        response = await api_client.get(f"{API}{path}")

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "carId"

    @pytest.mark.asyncio
    async def test_claim_for_car_id_too_large_returns_400(self, api_client: AsyncClient) -> None:
        response = await api_client.post(
            f"{API}/cars/99999999999999999999/claims",
            json={"claim_date": date.today().isoformat(), "description": "Scratch", "amount": "10"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_car_with_owner_id_too_large_returns_404(self, api_client: AsyncClient) -> None:
        response = await api_client.post(
            f"{API}/cars",
            json={"vin": VIN, "year_of_manufacture": 2015, "owner_id": 99999999999999999999},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_history_for_unknown_car(self, api_client: AsyncClient) -> None:
        response = await api_client.get(f"{API}/cars/12345/history")

        assert response.status_code == 404


class TestAdminAndHealthEndpoints:
    @pytest.mark.asyncio
    async def test_manual_expiration_check(self, api_client: AsyncClient, make_car, make_policy) -> None:
        # An end date of yesterday is always more than 24 hours back from midnight
        async def wide_threshold_service(
            db_session: Annotated[AsyncSession, Depends(get_async_session)]
        ) -> PolicyExpirationService:
            return PolicyExpirationService(db_session, max_hours_since_expiration=72)

        app.dependency_overrides[get_expiration_service] = wide_threshold_service
        car = await make_car()
        yesterday = date.today() - timedelta(days=1)
        policy = await make_policy(car, yesterday - timedelta(days=30), yesterday)

        response = await api_client.post(f"{API}/admin/check-expirations")

        assert response.status_code == 200
        body = response.json()
        assert body["result"]["reported_policy_ids"] == [policy.id]

        again = await api_client.post(f"{API}/admin/check-expirations")
        assert again.json()["result"]["candidates"] == 0

    @pytest.mark.asyncio
    async def test_health(self, api_client: AsyncClient) -> None:
        response = await api_client.get("/health/")

        assert response.status_code == 200
        assert response.json()["expiration_poller"] is None
        assert response.json()["database"] == "sqlite"
