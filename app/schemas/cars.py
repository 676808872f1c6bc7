"""Owner and car request/response schemas.

Request models only enforce types; field constraints are checked by the
domain validators so violations map to InvalidInputError with a field name.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateOwnerRequest(BaseModel):
    """Payload for registering an owner."""

    name: str = Field(..., description="Owner full name")
    email: Optional[str] = Field(default=None, description="Contact email")


class OwnerResponse(BaseModel):
    """Owner as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None


class CreateCarRequest(BaseModel):
    """Payload for registering a car."""

    vin: str = Field(..., description="17-character vehicle identification number")
    make: Optional[str] = Field(default=None, description="Manufacturer")
    model: Optional[str] = Field(default=None, description="Model name")
    year_of_manufacture: int = Field(..., description="Year between 1900 and 9999")
    owner_id: int = Field(..., description="ID of an existing owner")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "vin": "1HGCM82633A004352",
                    "make": "Honda",
                    "model": "Accord",
                    "year_of_manufacture": 2018,
                    "owner_id": 1,
                }
            ]
        }
    }


class CarResponse(BaseModel):
    """Car with its owner's display fields."""

    id: int
    vin: str
    make: Optional[str] = None
    model: Optional[str] = None
    year: int
    owner_id: int
    owner_name: str
    owner_email: Optional[str] = None


class InsuranceValidityResponse(BaseModel):
    """Result of an insurance validity check for one day."""

    car_id: int
    date: date
    valid: bool
