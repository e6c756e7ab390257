import json
import datetime as dt
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


ItemType = Literal["activity", "accommodation", "transportation", "custom"]
AccessLevel = Literal["view", "edit"]
InviteStatus = Literal["pending", "accepted"]
ClaimStatus = Literal["pending", "approved", "rejected"]
ServiceType = Literal["driver", "taxi", "shuttle", "car_rental", "public_transport"]
BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]
PaymentStatus = Literal["unpaid", "partial", "paid"]


class ApiModel(BaseModel):
    """Wire models use camelCase on the outside and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# --- Search ---------------------------------------------------------------


def _expand_tokens(values: List[str]) -> List[str]:
    # The filter sidebar sends amenities as one JSON-encoded array
    tokens: List[str] = []
    for value in values:
        if value.startswith("["):
            try:
                parsed = json.loads(value)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                tokens.extend(str(v) for v in parsed)
                continue
        tokens.append(value)
    return tokens


class SearchFilter(ApiModel):
    keyword: Optional[str] = None
    category_id: Optional[int] = None
    price_level: Optional[List[int]] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    amenities: Optional[List[str]] = None
    accessibility: Optional[List[str]] = None
    near_me: bool = False
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: Optional[float] = Field(default=None, gt=0)

    @field_validator("keyword")
    @classmethod
    def _blank_keyword(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_near_me(self) -> "SearchFilter":
        if self.near_me and (self.latitude is None or self.longitude is None):
            raise ValueError("nearMe requires both latitude and longitude")
        return self

    @classmethod
    def from_query(cls, params: Mapping[str, List[str]]) -> "SearchFilter":
        """
        Parses a multi-valued query string into a validated filter.
        Raises pydantic.ValidationError on anything that does not parse.
        """

        def first(name: str) -> Optional[str]:
            values = params.get(name) or []
            return values[0] if values else None

        raw: Dict[str, Any] = {}
        for name in ("keyword", "categoryId", "rating", "radius"):
            value = first(name)
            if value not in (None, ""):
                raw[name] = value

        if params.get("priceLevel"):
            raw["priceLevel"] = list(params["priceLevel"])
        if params.get("amenities"):
            raw["amenities"] = _expand_tokens(list(params["amenities"]))
        if params.get("accessibility"):
            raw["accessibility"] = _expand_tokens(list(params["accessibility"]))

        latitude, longitude = first("latitude"), first("longitude")
        if latitude or longitude:
            raw["nearMe"] = True
            raw["latitude"] = latitude
            raw["longitude"] = longitude
        elif first("nearMe"):
            raw["nearMe"] = first("nearMe")

        return cls.model_validate(raw)


def _reject_null(value):
    # Partial updates may omit a required column but never null it out
    if value is None:
        raise ValueError("may not be null")
    return value


# --- Directory ------------------------------------------------------------


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    icon: str = Field(min_length=1)


class CategoryRead(CategoryCreate):
    id: int


class UserCreate(ApiModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    full_name: Optional[str] = None
    is_business: bool = False


class UserRead(ApiModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    is_business: Optional[bool] = False
    created_at: Optional[dt.datetime] = None


class BusinessCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    category_id: int
    owner_id: Optional[int] = None
    claimed: bool = False
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    price_level: Optional[int] = Field(default=None, ge=0)
    website: Optional[str] = None
    phone: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    external_place_id: Optional[str] = None


class BusinessUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    category_id: Optional[int] = None
    owner_id: Optional[int] = None
    claimed: Optional[bool] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    price_level: Optional[int] = Field(default=None, ge=0)
    website: Optional[str] = None
    phone: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    external_place_id: Optional[str] = None

    @field_validator("latitude", "longitude", "name", "category_id")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class BusinessRead(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: float
    longitude: float
    category_id: int
    owner_id: Optional[int] = None
    claimed: Optional[bool] = False
    rating: Optional[float] = None
    price_level: Optional[int] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    external_place_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class ClaimRequestCreate(ApiModel):
    business_id: int
    user_id: int
    document_url: Optional[str] = None


class ClaimDecision(ApiModel):
    status: Literal["approved", "rejected"]


class ClaimRequestRead(ApiModel):
    id: int
    business_id: int
    user_id: int
    status: ClaimStatus
    document_url: Optional[str] = None
    created_at: Optional[dt.datetime] = None


# --- Itineraries ----------------------------------------------------------


class ItineraryCreate(ApiModel):
    user_id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    is_public: bool = False
    cover_image: Optional[str] = None
    total_budget: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_dates(self) -> "ItineraryCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class ItineraryUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    is_public: Optional[bool] = None
    cover_image: Optional[str] = None
    total_budget: Optional[int] = Field(default=None, ge=0)

    @field_validator("title", "start_date", "end_date")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ItineraryRead(ApiModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    is_public: Optional[bool] = False
    cover_image: Optional[str] = None
    total_budget: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class DayCreate(ApiModel):
    date: dt.date
    notes: Optional[str] = None


class DayUpdate(ApiModel):
    date: Optional[dt.date] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class DayRead(ApiModel):
    id: int
    itinerary_id: int
    day_number: int
    date: dt.date
    notes: Optional[str] = None


class ItemCreate(ApiModel):
    business_id: Optional[int] = None
    type: ItemType
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    cost: Optional[int] = Field(default=None, ge=0)
    reservation_confirmation: Optional[str] = None
    custom_details: Optional[Dict[str, Any]] = None


class ItemUpdate(ApiModel):
    day_id: Optional[int] = None
    business_id: Optional[int] = None
    type: Optional[ItemType] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    cost: Optional[int] = Field(default=None, ge=0)
    reservation_confirmation: Optional[str] = None
    custom_details: Optional[Dict[str, Any]] = None

    @field_validator("day_id", "type", "title")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ItemRead(ApiModel):
    id: int
    day_id: int
    business_id: Optional[int] = None
    type: str
    title: str
    description: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = None
    cost: Optional[int] = None
    reservation_confirmation: Optional[str] = None
    custom_details: Optional[Dict[str, Any]] = None


class CollaboratorCreate(ApiModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    name: Optional[str] = None
    access_level: Optional[AccessLevel] = None
    invite_status: Optional[InviteStatus] = None


class CollaboratorUpdate(ApiModel):
    name: Optional[str] = None
    access_level: Optional[AccessLevel] = None
    invite_status: Optional[InviteStatus] = None

    @field_validator("access_level", "invite_status")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class CollaboratorRead(ApiModel):
    itinerary_id: int
    email: str
    name: Optional[str] = None
    access_level: AccessLevel
    invite_status: InviteStatus
    created_at: Optional[dt.datetime] = None


class BookingCreate(ApiModel):
    user_id: int
    itinerary_id: Optional[int] = None
    service_type: ServiceType
    provider_name: Optional[str] = None
    provider_contact: Optional[str] = None
    booking_date: dt.date
    pickup_time: dt.time
    pickup_location: str = Field(min_length=1)
    dropoff_location: str = Field(min_length=1)
    number_of_passengers: int = Field(default=1, ge=1)
    special_requests: Optional[str] = None
    confirmation_code: Optional[str] = None
    cost: Optional[int] = Field(default=None, ge=0)
    payment_status: PaymentStatus = "unpaid"


class BookingUpdate(ApiModel):
    itinerary_id: Optional[int] = None
    service_type: Optional[ServiceType] = None
    provider_name: Optional[str] = None
    provider_contact: Optional[str] = None
    booking_date: Optional[dt.date] = None
    pickup_time: Optional[dt.time] = None
    pickup_location: Optional[str] = Field(default=None, min_length=1)
    dropoff_location: Optional[str] = Field(default=None, min_length=1)
    number_of_passengers: Optional[int] = Field(default=None, ge=1)
    special_requests: Optional[str] = None
    confirmation_code: Optional[str] = None
    status: Optional[BookingStatus] = None
    cost: Optional[int] = Field(default=None, ge=0)
    payment_status: Optional[PaymentStatus] = None

    @field_validator(
        "service_type",
        "booking_date",
        "pickup_time",
        "pickup_location",
        "dropoff_location",
        "number_of_passengers",
        "status",
        "payment_status",
    )
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class BookingRead(ApiModel):
    id: int
    user_id: int
    itinerary_id: Optional[int] = None
    service_type: str
    provider_name: Optional[str] = None
    provider_contact: Optional[str] = None
    booking_date: dt.date
    pickup_time: dt.time
    pickup_location: str
    dropoff_location: str
    number_of_passengers: Optional[int] = 1
    special_requests: Optional[str] = None
    confirmation_code: Optional[str] = None
    status: BookingStatus
    cost: Optional[int] = None
    payment_status: Optional[PaymentStatus] = "unpaid"
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class DayDetail(DayRead):
    items: List[ItemRead] = Field(default_factory=list)


class ItinerarySummary(ApiModel):
    itinerary: ItineraryRead
    days: List[DayDetail]
    collaborators: List[CollaboratorRead]
    transport_bookings: List[BookingRead]
    total_cost: int = 0
    remaining_budget: Optional[int] = None


class Message(BaseModel):
    message: str
