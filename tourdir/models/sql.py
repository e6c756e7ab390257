from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from tourdir.core.database import Base
import datetime
from datetime import timezone


def utcnow() -> datetime.datetime:
    # Naive UTC so values compare equal before and after a SQLite round trip
    return datetime.datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    is_business = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    claimed = Column(Boolean, default=False)
    rating = Column(Float, nullable=True)
    # Unit depends on the category: per night, per meal, per person...
    price_level = Column(Integer, nullable=True)
    website = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    images = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    amenities = Column(JSON, nullable=True)
    external_place_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)


class ClaimRequest(Base):
    __tablename__ = "claim_requests"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, default="pending")
    document_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class Itinerary(Base):
    __tablename__ = "itineraries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_public = Column(Boolean, default=False)
    cover_image = Column(String, nullable=True)
    total_budget = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)


class ItineraryDay(Base):
    __tablename__ = "itinerary_days"

    id = Column(Integer, primary_key=True, index=True)
    itinerary_id = Column(Integer, ForeignKey("itineraries.id"), nullable=False)
    day_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class ItineraryItem(Base):
    __tablename__ = "itinerary_items"

    id = Column(Integer, primary_key=True, index=True)
    day_id = Column(Integer, ForeignKey("itinerary_days.id"), nullable=False)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    location = Column(String, nullable=True)
    cost = Column(Integer, nullable=True)
    reservation_confirmation = Column(String, nullable=True)
    custom_details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class ItineraryCollaborator(Base):
    __tablename__ = "itinerary_collaborators"

    itinerary_id = Column(Integer, ForeignKey("itineraries.id"), primary_key=True)
    email = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    access_level = Column(String, nullable=False, default="view")
    invite_status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=utcnow)


class TransportBooking(Base):
    __tablename__ = "transport_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    itinerary_id = Column(Integer, ForeignKey("itineraries.id"), nullable=True)
    service_type = Column(String, nullable=False)
    provider_name = Column(String, nullable=True)
    provider_contact = Column(String, nullable=True)
    booking_date = Column(Date, nullable=False)
    pickup_time = Column(Time, nullable=False)
    pickup_location = Column(String, nullable=False)
    dropoff_location = Column(String, nullable=False)
    number_of_passengers = Column(Integer, default=1)
    special_requests = Column(Text, nullable=True)
    confirmation_code = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")
    cost = Column(Integer, nullable=True)
    payment_status = Column(String, default="unpaid")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow)
