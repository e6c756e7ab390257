"""
Persistence boundary for the directory and itinerary services.

The services only talk to `Repository`. `SqlRepository` is the production
implementation over a SQLAlchemy session; the test-suite ships an in-memory
fake of the same interface.

`add` and `delete` stage changes; `transaction()` is the unit of work that
either commits everything staged inside it or rolls all of it back.
"""

from __future__ import annotations

import abc
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from tourdir.models.sql import (
    Business,
    Category,
    ClaimRequest,
    Itinerary,
    ItineraryCollaborator,
    ItineraryDay,
    ItineraryItem,
    TransportBooking,
    User,
)


class Repository(abc.ABC):
    @abc.abstractmethod
    def add(self, record) -> None:
        """Stage a new or modified record; ids are assigned on return."""

    @abc.abstractmethod
    def delete(self, record) -> None:
        """Stage removal of a record."""

    @abc.abstractmethod
    def transaction(self):
        """Context manager: commit on clean exit, roll back on exception."""

    # users
    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abc.abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    # categories
    @abc.abstractmethod
    def list_categories(self) -> List[Category]: ...

    @abc.abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]: ...

    # businesses
    @abc.abstractmethod
    def list_businesses(self) -> List[Business]: ...

    @abc.abstractmethod
    def get_business(self, business_id: int) -> Optional[Business]: ...

    @abc.abstractmethod
    def get_business_by_place_id(self, place_id: str) -> Optional[Business]: ...

    @abc.abstractmethod
    def list_businesses_by_owner(self, owner_id: int) -> List[Business]: ...

    # claim requests
    @abc.abstractmethod
    def get_claim(self, claim_id: int) -> Optional[ClaimRequest]: ...

    @abc.abstractmethod
    def list_claims_by_business(self, business_id: int) -> List[ClaimRequest]: ...

    @abc.abstractmethod
    def list_claims_by_user(self, user_id: int) -> List[ClaimRequest]: ...

    # itineraries
    @abc.abstractmethod
    def get_itinerary(self, itinerary_id: int) -> Optional[Itinerary]: ...

    @abc.abstractmethod
    def list_itineraries_by_user(self, user_id: int) -> List[Itinerary]: ...

    @abc.abstractmethod
    def list_public_itineraries(self) -> List[Itinerary]: ...

    # days, ordered by day number
    @abc.abstractmethod
    def get_day(self, day_id: int) -> Optional[ItineraryDay]: ...

    @abc.abstractmethod
    def list_days(self, itinerary_id: int) -> List[ItineraryDay]: ...

    # items, ordered by start time with untimed items last
    @abc.abstractmethod
    def get_item(self, item_id: int) -> Optional[ItineraryItem]: ...

    @abc.abstractmethod
    def list_items(self, day_id: int) -> List[ItineraryItem]: ...

    # collaborators
    @abc.abstractmethod
    def get_collaborator(
        self, itinerary_id: int, email: str
    ) -> Optional[ItineraryCollaborator]: ...

    @abc.abstractmethod
    def list_collaborators(self, itinerary_id: int) -> List[ItineraryCollaborator]: ...

    # transport bookings
    @abc.abstractmethod
    def get_booking(self, booking_id: int) -> Optional[TransportBooking]: ...

    @abc.abstractmethod
    def list_bookings_by_user(self, user_id: int) -> List[TransportBooking]: ...

    @abc.abstractmethod
    def list_bookings_by_itinerary(self, itinerary_id: int) -> List[TransportBooking]: ...


class SqlRepository(Repository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, record) -> None:
        self.session.add(record)
        self.session.flush()

    def delete(self, record) -> None:
        self.session.delete(record)
        self.session.flush()

    @contextmanager
    def transaction(self) -> Iterator["SqlRepository"]:
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def get_user(self, user_id):
        return self.session.get(User, user_id)

    def get_user_by_username(self, username):
        return self.session.query(User).filter(User.username == username).first()

    def get_user_by_email(self, email):
        return self.session.query(User).filter(User.email == email).first()

    def list_categories(self):
        return self.session.query(Category).order_by(Category.id).all()

    def get_category(self, category_id):
        return self.session.get(Category, category_id)

    def list_businesses(self):
        return self.session.query(Business).order_by(Business.id).all()

    def get_business(self, business_id):
        return self.session.get(Business, business_id)

    def get_business_by_place_id(self, place_id):
        return (
            self.session.query(Business)
            .filter(Business.external_place_id == place_id)
            .first()
        )

    def list_businesses_by_owner(self, owner_id):
        return (
            self.session.query(Business)
            .filter(Business.owner_id == owner_id)
            .order_by(Business.id)
            .all()
        )

    def get_claim(self, claim_id):
        return self.session.get(ClaimRequest, claim_id)

    def list_claims_by_business(self, business_id):
        return (
            self.session.query(ClaimRequest)
            .filter(ClaimRequest.business_id == business_id)
            .order_by(ClaimRequest.id)
            .all()
        )

    def list_claims_by_user(self, user_id):
        return (
            self.session.query(ClaimRequest)
            .filter(ClaimRequest.user_id == user_id)
            .order_by(ClaimRequest.id)
            .all()
        )

    def get_itinerary(self, itinerary_id):
        return self.session.get(Itinerary, itinerary_id)

    def list_itineraries_by_user(self, user_id):
        return (
            self.session.query(Itinerary)
            .filter(Itinerary.user_id == user_id)
            .order_by(Itinerary.id)
            .all()
        )

    def list_public_itineraries(self):
        return (
            self.session.query(Itinerary)
            .filter(Itinerary.is_public.is_(True))
            .order_by(Itinerary.id)
            .all()
        )

    def get_day(self, day_id):
        return self.session.get(ItineraryDay, day_id)

    def list_days(self, itinerary_id):
        return (
            self.session.query(ItineraryDay)
            .filter(ItineraryDay.itinerary_id == itinerary_id)
            .order_by(ItineraryDay.day_number, ItineraryDay.id)
            .all()
        )

    def get_item(self, item_id):
        return self.session.get(ItineraryItem, item_id)

    def list_items(self, day_id):
        return (
            self.session.query(ItineraryItem)
            .filter(ItineraryItem.day_id == day_id)
            .order_by(
                ItineraryItem.start_time.is_(None),
                ItineraryItem.start_time,
                ItineraryItem.id,
            )
            .all()
        )

    def get_collaborator(self, itinerary_id, email):
        return self.session.get(ItineraryCollaborator, (itinerary_id, email))

    def list_collaborators(self, itinerary_id):
        return (
            self.session.query(ItineraryCollaborator)
            .filter(ItineraryCollaborator.itinerary_id == itinerary_id)
            .order_by(ItineraryCollaborator.created_at, ItineraryCollaborator.email)
            .all()
        )

    def get_booking(self, booking_id):
        return self.session.get(TransportBooking, booking_id)

    def list_bookings_by_user(self, user_id):
        return (
            self.session.query(TransportBooking)
            .filter(TransportBooking.user_id == user_id)
            .order_by(TransportBooking.id)
            .all()
        )

    def list_bookings_by_itinerary(self, itinerary_id):
        return (
            self.session.query(TransportBooking)
            .filter(TransportBooking.itinerary_id == itinerary_id)
            .order_by(TransportBooking.id)
            .all()
        )
