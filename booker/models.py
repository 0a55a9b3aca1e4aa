from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for models exchanged with the booking API.

    Attributes use Python names; the JSON keys are the lowercase aliases the
    API expects. Either form is accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]):
        return cls.model_validate(payload)


class BookingDates(WireModel):
    check_in: date = Field(..., alias="checkin")
    check_out: date = Field(..., alias="checkout")


class Booking(WireModel):
    first_name: Optional[str] = Field(None, alias="firstname")
    last_name: Optional[str] = Field(None, alias="lastname")
    total_price: Optional[int] = Field(None, alias="totalprice")
    deposit_paid: Optional[bool] = Field(None, alias="depositpaid")
    booking_dates: Optional[BookingDates] = Field(None, alias="bookingdates")
    additional_needs: Optional[str] = Field(None, alias="additionalneeds")


class BookingResponse(WireModel):
    booking_id: int = Field(..., alias="bookingid")
    booking: Booking


class BookingId(WireModel):
    """One entry of the GET /booking listing."""
    booking_id: int = Field(..., alias="bookingid")


class AuthRequest(WireModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(WireModel):
    token: Optional[str] = None
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return bool(self.token)
