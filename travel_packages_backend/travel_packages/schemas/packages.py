from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # Stored in UTC; SQLite hands the value back without its offset.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class _BaseSchema(BaseModel):
    # Package documents are exchanged in camelCase (`flightNumber`, `imgUrls`, ...).
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class Flight(_BaseSchema):
    details: Optional[str] = Field(None, description="Free-form flight details")
    flight_number: Optional[str] = Field(None, description="Flight number")
    departure_date: Optional[UtcDatetime] = Field(None, description="Outbound departure")
    return_date: Optional[UtcDatetime] = Field(None, description="Return departure")


class Hotel(_BaseSchema):
    details: Optional[str] = Field(None, description="Free-form hotel details")
    name: Optional[str] = Field(None, description="Hotel name")
    address: Optional[str] = Field(None, description="Hotel address")
    check_in: Optional[UtcDatetime] = Field(None, description="Check-in time")
    check_out: Optional[UtcDatetime] = Field(None, description="Check-out time")
    booking_details: Optional[str] = Field(None, description="Booking reference or notes")


class Policy(_BaseSchema):
    title: Optional[str] = Field(None, description="Policy title")
    description: Optional[str] = Field(None, description="Policy text")


class ItineraryDay(_BaseSchema):
    day: Optional[int] = Field(None, description="Day number within the package")
    date: Optional[UtcDatetime] = Field(None, description="Calendar date of the day")
    hotel: Optional[str] = Field(None, description="Hotel for the night")
    hotel_stars: Optional[str] = Field(None, description="Hotel rating")
    car: Optional[str] = Field(None, description="Car / transfer arrangement")
    sightseeing: Optional[str] = Field(None, description="Sightseeing plan")


class Activity(_BaseSchema):
    name: Optional[str] = Field(None, description="Activity name")
    img: Optional[str] = Field(None, description="Activity image URL")
    description: Optional[str] = Field(None, description="Activity description")


class PackageBase(_BaseSchema):
    destination: Optional[str] = Field(None, description="Destination (exact-match lookup key)", max_length=200)
    name: Optional[str] = Field(None, description="Package name", max_length=200)
    duration: Optional[str] = Field(None, description="Human readable duration, e.g. '5 Nights / 6 Days'")
    flights: Flight = Field(..., description="The package's flight")
    hotels: Hotel = Field(..., description="The package's hotel")
    transfers: Optional[str] = Field(None, description="Transfers included")
    activities: list[Activity] = Field(default_factory=list, description="Activities, in display order")
    meals: Optional[str] = Field(None, description="Meals included")
    price: Optional[str] = Field(None, description="Display price")
    img: Optional[str] = Field(None, description="Cover image URL")
    img_urls: list[str] = Field(default_factory=list, description="Gallery image URLs, in display order")
    policies: list[Policy] = Field(default_factory=list, description="Policies, in display order")
    itinerary: list[ItineraryDay] = Field(default_factory=list, description="Day-by-day itinerary")


class PackageCreate(PackageBase):
    pass


class PackageRead(PackageBase):
    id: uuid.UUID = Field(..., description="Package UUID")
