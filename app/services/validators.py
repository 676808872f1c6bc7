"""Field validators for owner, car, policy and claim input.

Each validator returns ``None`` when the value is acceptable and raises
``InvalidInputError`` naming the offending field otherwise. They have no side
effects; the caller decides how the error is surfaced.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from app.core.exceptions import InvalidInputError

VIN_LENGTH = 17
MIN_YEAR = 1900
MAX_YEAR = 9999
MIN_QUERY_DATE = date(1900, 1, 1)
MAX_QUERY_YEARS_AHEAD = 50
# Upper bound of the 32-bit integer id columns
MAX_ID = 2**31 - 1


def _today(today: Optional[date]) -> date:
    return today or date.today()


def _add_years(day: date, years: int) -> date:
    """Shift a date by whole years, mapping Feb 29 to Feb 28 when needed."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return day.replace(year=day.year + years, day=28)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_car_id(car_id: int) -> None:
    if car_id <= 0:
        raise InvalidInputError("carId", "Car ID must be a positive number.")
    if car_id > MAX_ID:
        raise InvalidInputError("carId", f"Car ID must not exceed {MAX_ID}.")


def validate_vin(vin: Optional[str]) -> None:
    if _is_blank(vin):
        raise InvalidInputError("Vin", "VIN is required.")
    if len(vin) != VIN_LENGTH:
        raise InvalidInputError("Vin", f"VIN must be exactly {VIN_LENGTH} characters long.")


def validate_year(year: int) -> None:
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidInputError(
            "YearOfManufacture",
            f"Year of manufacture must be between {MIN_YEAR} and {MAX_YEAR}.",
        )


def validate_query_date(value: date, today: Optional[date] = None) -> None:
    """Check that a validity query date is within [1900-01-01, today + 50 years]."""
    max_date = _add_years(_today(today), MAX_QUERY_YEARS_AHEAD)
    if value < MIN_QUERY_DATE or value > max_date:
        raise InvalidInputError(
            "date",
            f"Date must be between {MIN_QUERY_DATE.isoformat()} and {max_date.isoformat()}.",
        )


def validate_owner_name(name: Optional[str]) -> None:
    if _is_blank(name):
        raise InvalidInputError("Name", "Owner name is required.")


def validate_claim_amount(amount: Decimal) -> None:
    if amount <= 0:
        raise InvalidInputError("Amount", "Claim amount must be greater than zero.")


def validate_claim_description(description: Optional[str]) -> None:
    if _is_blank(description):
        raise InvalidInputError("Description", "Claim description is required.")


def validate_claim_date(claim_date: date, today: Optional[date] = None) -> None:
    if claim_date > _today(today):
        raise InvalidInputError("ClaimDate", "Claim date cannot be in the future.")


def validate_provider(provider: Optional[str]) -> None:
    if _is_blank(provider):
        raise InvalidInputError("Provider", "Provider is required.")


def validate_policy_dates(start_date: date, end_date: date, today: Optional[date] = None) -> None:
    """Check start < end and that the policy has not already ended."""
    if start_date >= end_date:
        raise InvalidInputError("StartDate", "Start date must be before end date.")
    if end_date < _today(today):
        raise InvalidInputError("EndDate", "End date cannot be in the past.")
