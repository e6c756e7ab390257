"""
Consistency rules for the itinerary aggregate.

An itinerary owns its days and each day owns its items. Collaborators and
transport bookings point back at an itinerary without owning it. Every
mutation below an itinerary advances the itinerary's `updated_at`, and
every multi-row change runs inside a single repository transaction so a
failure half-way through leaves nothing behind.
"""

import datetime
import logging
from typing import Callable, Dict, List, Optional

from tourdir.core.errors import NotFoundError, StateConflictError, ValidationFailed
from tourdir.core.repository import Repository
from tourdir.models.domain import (
    BookingCreate,
    BookingRead,
    BookingUpdate,
    CollaboratorCreate,
    CollaboratorRead,
    CollaboratorUpdate,
    DayCreate,
    DayDetail,
    DayUpdate,
    ItemCreate,
    ItemRead,
    ItemUpdate,
    ItineraryCreate,
    ItineraryRead,
    ItinerarySummary,
    ItineraryUpdate,
)
from tourdir.models.sql import (
    Itinerary,
    ItineraryCollaborator,
    ItineraryDay,
    ItineraryItem,
    TransportBooking,
    utcnow,
)

logger = logging.getLogger("tourdir.itinerary")

# pending -> confirmed -> completed, cancelled from pending or confirmed
BOOKING_TRANSITIONS: Dict[str, frozenset] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def compute_day_number(start_date: datetime.date, day_date: datetime.date) -> int:
    return (day_date - start_date).days + 1


def check_booking_transition(current: str, target: str) -> None:
    if current == target:
        return
    if target not in BOOKING_TRANSITIONS.get(current, frozenset()):
        raise StateConflictError(f"Cannot change booking status from {current} to {target}")


class ItineraryManager:
    def __init__(
        self,
        repo: Repository,
        clock: Callable[[], datetime.datetime] = utcnow,
    ):
        self.repo = repo
        self.clock = clock

    # --- helpers ----------------------------------------------------------

    def _now(self) -> datetime.datetime:
        return self.clock()

    def _touch(self, itinerary: Itinerary) -> None:
        # updated_at must strictly advance even when two writes share a clock tick
        now = self._now()
        previous = itinerary.updated_at
        if previous is not None and now <= previous:
            now = previous + datetime.timedelta(microseconds=1)
        itinerary.updated_at = now
        self.repo.add(itinerary)

    def _touch_id(self, itinerary_id: Optional[int]) -> None:
        if itinerary_id is None:
            return
        itinerary = self.repo.get_itinerary(itinerary_id)
        if itinerary is not None:
            self._touch(itinerary)

    def _check_day_date(self, itinerary: Itinerary, day_date: datetime.date) -> int:
        if day_date < itinerary.start_date:
            raise ValidationFailed.for_field(
                "date", "Day date is before the itinerary start date"
            )
        return compute_day_number(itinerary.start_date, day_date)

    def _check_business(self, business_id: Optional[int]) -> None:
        if business_id is not None and self.repo.get_business(business_id) is None:
            raise NotFoundError("Business not found")

    def _require_user(self, user_id: int) -> None:
        if self.repo.get_user(user_id) is None:
            raise NotFoundError("User not found")

    # --- itineraries ------------------------------------------------------

    def get_itinerary(self, itinerary_id: int) -> Itinerary:
        itinerary = self.repo.get_itinerary(itinerary_id)
        if itinerary is None:
            raise NotFoundError("Itinerary not found")
        return itinerary

    def list_for_user(self, user_id: int) -> List[Itinerary]:
        self._require_user(user_id)
        return self.repo.list_itineraries_by_user(user_id)

    def list_public(self) -> List[Itinerary]:
        return self.repo.list_public_itineraries()

    def create_itinerary(self, data: ItineraryCreate) -> Itinerary:
        self._require_user(data.user_id)
        now = self._now()
        itinerary = Itinerary(created_at=now, updated_at=now, **data.model_dump())
        with self.repo.transaction():
            self.repo.add(itinerary)
        logger.info(f"Created itinerary {itinerary.id} for user {itinerary.user_id}")
        return itinerary

    def update_itinerary(self, itinerary_id: int, data: ItineraryUpdate) -> Itinerary:
        with self.repo.transaction():
            itinerary = self.get_itinerary(itinerary_id)
            changes = data.model_dump(exclude_unset=True)

            start = changes.get("start_date", itinerary.start_date)
            end = changes.get("end_date", itinerary.end_date)
            if end < start:
                raise ValidationFailed.for_field(
                    "endDate", "endDate must not be before startDate"
                )

            days = self.repo.list_days(itinerary.id)
            if start != itinerary.start_date:
                for day in days:
                    if day.date < start:
                        raise ValidationFailed.for_field(
                            "startDate", f"Day {day.day_number} falls before the new start date"
                        )

            for field, value in changes.items():
                setattr(itinerary, field, value)

            if "start_date" in changes:
                for day in days:
                    day.day_number = compute_day_number(start, day.date)
                    self.repo.add(day)

            self._touch(itinerary)
        logger.info(f"Updated itinerary {itinerary_id}: {sorted(changes)}")
        return itinerary

    def delete_itinerary(self, itinerary_id: int) -> None:
        """
        Removes the whole aggregate: items, then days, then collaborators.
        Linked transport bookings stay with their user and are detached.
        """
        with self.repo.transaction():
            itinerary = self.get_itinerary(itinerary_id)
            now = self._now()

            days = self.repo.list_days(itinerary.id)
            item_count = 0
            for day in days:
                for item in self.repo.list_items(day.id):
                    self.repo.delete(item)
                    item_count += 1
                self.repo.delete(day)

            collaborators = self.repo.list_collaborators(itinerary.id)
            for collaborator in collaborators:
                self.repo.delete(collaborator)

            bookings = self.repo.list_bookings_by_itinerary(itinerary.id)
            for booking in bookings:
                booking.itinerary_id = None
                booking.updated_at = now
                self.repo.add(booking)

            self.repo.delete(itinerary)

        logger.info(
            f"Deleted itinerary {itinerary_id}: {len(days)} days, {item_count} items, "
            f"{len(collaborators)} collaborators, {len(bookings)} bookings detached"
        )

    # --- days -------------------------------------------------------------

    def get_day(self, day_id: int) -> ItineraryDay:
        day = self.repo.get_day(day_id)
        if day is None:
            raise NotFoundError("Day not found")
        return day

    def list_days(self, itinerary_id: int) -> List[ItineraryDay]:
        self.get_itinerary(itinerary_id)
        return self.repo.list_days(itinerary_id)

    def create_day(self, itinerary_id: int, data: DayCreate) -> ItineraryDay:
        with self.repo.transaction():
            itinerary = self.get_itinerary(itinerary_id)
            day = ItineraryDay(
                itinerary_id=itinerary.id,
                day_number=self._check_day_date(itinerary, data.date),
                date=data.date,
                notes=data.notes,
                created_at=self._now(),
            )
            self.repo.add(day)
            self._touch(itinerary)
        logger.info(f"Added day {day.day_number} ({day.date}) to itinerary {itinerary_id}")
        return day

    def update_day(self, day_id: int, data: DayUpdate) -> ItineraryDay:
        with self.repo.transaction():
            day = self.get_day(day_id)
            itinerary = self.get_itinerary(day.itinerary_id)
            changes = data.model_dump(exclude_unset=True)
            if "date" in changes:
                day.day_number = self._check_day_date(itinerary, changes["date"])
                day.date = changes["date"]
            if "notes" in changes:
                day.notes = changes["notes"]
            self.repo.add(day)
            self._touch(itinerary)
        logger.info(f"Updated day {day_id} of itinerary {itinerary.id}")
        return day

    def delete_day(self, day_id: int) -> None:
        with self.repo.transaction():
            day = self.get_day(day_id)
            items = self.repo.list_items(day.id)
            for item in items:
                self.repo.delete(item)
            self.repo.delete(day)
            self._touch_id(day.itinerary_id)
        logger.info(f"Deleted day {day_id} and {len(items)} items")

    # --- items ------------------------------------------------------------

    def get_item(self, item_id: int) -> ItineraryItem:
        item = self.repo.get_item(item_id)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    def list_items(self, day_id: int) -> List[ItineraryItem]:
        self.get_day(day_id)
        return self.repo.list_items(day_id)

    def create_item(self, day_id: int, data: ItemCreate) -> ItineraryItem:
        with self.repo.transaction():
            day = self.get_day(day_id)
            self._check_business(data.business_id)
            item = ItineraryItem(day_id=day.id, created_at=self._now(), **data.model_dump())
            self.repo.add(item)
            self._touch_id(day.itinerary_id)
        logger.info(f"Added item {item.id} to day {day_id}")
        return item

    def update_item(self, item_id: int, data: ItemUpdate) -> ItineraryItem:
        with self.repo.transaction():
            item = self.get_item(item_id)
            changes = data.model_dump(exclude_unset=True)
            old_day = self.get_day(item.day_id)
            new_day = old_day
            if "day_id" in changes and changes["day_id"] != item.day_id:
                new_day = self.get_day(changes["day_id"])
            if "business_id" in changes:
                self._check_business(changes["business_id"])

            for field, value in changes.items():
                setattr(item, field, value)
            self.repo.add(item)

            self._touch_id(old_day.itinerary_id)
            if new_day.itinerary_id != old_day.itinerary_id:
                self._touch_id(new_day.itinerary_id)
        logger.info(f"Updated item {item_id}: {sorted(changes)}")
        return item

    def delete_item(self, item_id: int) -> None:
        with self.repo.transaction():
            item = self.get_item(item_id)
            day = self.get_day(item.day_id)
            self.repo.delete(item)
            self._touch_id(day.itinerary_id)
        logger.info(f"Deleted item {item_id} from day {day.id}")

    # --- collaborators ----------------------------------------------------

    def list_collaborators(self, itinerary_id: int) -> List[ItineraryCollaborator]:
        self.get_itinerary(itinerary_id)
        return self.repo.list_collaborators(itinerary_id)

    def _get_collaborator(self, itinerary_id: int, email: str) -> ItineraryCollaborator:
        collaborator = self.repo.get_collaborator(itinerary_id, email.lower())
        if collaborator is None:
            raise NotFoundError("Collaborator not found")
        return collaborator

    def add_collaborator(
        self, itinerary_id: int, data: CollaboratorCreate
    ) -> ItineraryCollaborator:
        with self.repo.transaction():
            itinerary = self.get_itinerary(itinerary_id)
            email = data.email.lower()
            if self.repo.get_collaborator(itinerary.id, email) is not None:
                raise StateConflictError("Collaborator already exists")

            collaborator = ItineraryCollaborator(
                itinerary_id=itinerary.id,
                email=email,
                name=data.name,
                access_level=data.access_level or "view",
                invite_status=data.invite_status or "pending",
                created_at=self._now(),
            )
            self.repo.add(collaborator)
            self._touch(itinerary)
        logger.info(f"Shared itinerary {itinerary_id} with {email} ({collaborator.access_level})")
        return collaborator

    def update_collaborator(
        self, itinerary_id: int, email: str, data: CollaboratorUpdate
    ) -> ItineraryCollaborator:
        with self.repo.transaction():
            collaborator = self._get_collaborator(itinerary_id, email)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(collaborator, field, value)
            self.repo.add(collaborator)
            self._touch_id(itinerary_id)
        logger.info(f"Updated collaborator {collaborator.email} on itinerary {itinerary_id}")
        return collaborator

    def remove_collaborator(self, itinerary_id: int, email: str) -> None:
        with self.repo.transaction():
            collaborator = self._get_collaborator(itinerary_id, email)
            self.repo.delete(collaborator)
            self._touch_id(itinerary_id)
        logger.info(f"Removed collaborator {email.lower()} from itinerary {itinerary_id}")

    # --- transport bookings -----------------------------------------------

    def get_booking(self, booking_id: int) -> TransportBooking:
        booking = self.repo.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings_for_user(self, user_id: int) -> List[TransportBooking]:
        self._require_user(user_id)
        return self.repo.list_bookings_by_user(user_id)

    def list_bookings_for_itinerary(self, itinerary_id: int) -> List[TransportBooking]:
        self.get_itinerary(itinerary_id)
        return self.repo.list_bookings_by_itinerary(itinerary_id)

    def create_booking(self, data: BookingCreate) -> TransportBooking:
        with self.repo.transaction():
            self._require_user(data.user_id)
            if data.itinerary_id is not None:
                self.get_itinerary(data.itinerary_id)

            now = self._now()
            booking = TransportBooking(
                status="pending", created_at=now, updated_at=now, **data.model_dump()
            )
            self.repo.add(booking)
            self._touch_id(booking.itinerary_id)
        logger.info(f"Created {booking.service_type} booking {booking.id} for user {booking.user_id}")
        return booking

    def update_booking(self, booking_id: int, data: BookingUpdate) -> TransportBooking:
        with self.repo.transaction():
            booking = self.get_booking(booking_id)
            changes = data.model_dump(exclude_unset=True)
            previous_itinerary = booking.itinerary_id

            if changes.get("itinerary_id") is not None:
                self.get_itinerary(changes["itinerary_id"])
            if "status" in changes:
                check_booking_transition(booking.status, changes["status"])

            for field, value in changes.items():
                setattr(booking, field, value)
            booking.updated_at = self._now()
            self.repo.add(booking)

            self._touch_id(previous_itinerary)
            if booking.itinerary_id != previous_itinerary:
                self._touch_id(booking.itinerary_id)
        logger.info(f"Updated booking {booking_id}: status={booking.status}")
        return booking

    def delete_booking(self, booking_id: int) -> None:
        with self.repo.transaction():
            booking = self.get_booking(booking_id)
            itinerary_id = booking.itinerary_id
            self.repo.delete(booking)
            self._touch_id(itinerary_id)
        logger.info(f"Deleted booking {booking_id}")

    # --- aggregate view ---------------------------------------------------

    def summarize(self, itinerary_id: int) -> ItinerarySummary:
        """Whole itinerary with ordered days and items plus cost totals."""
        itinerary = self.get_itinerary(itinerary_id)

        days = []
        total = 0
        for day in self.repo.list_days(itinerary.id):
            items = [ItemRead.model_validate(i) for i in self.repo.list_items(day.id)]
            total += sum(i.cost or 0 for i in items)
            detail = DayDetail.model_validate(day)
            detail.items = items
            days.append(detail)

        bookings = [
            BookingRead.model_validate(b)
            for b in self.repo.list_bookings_by_itinerary(itinerary.id)
        ]
        total += sum(b.cost or 0 for b in bookings if b.status != "cancelled")

        remaining = None
        if itinerary.total_budget is not None:
            remaining = itinerary.total_budget - total

        return ItinerarySummary(
            itinerary=ItineraryRead.model_validate(itinerary),
            days=days,
            collaborators=[
                CollaboratorRead.model_validate(c)
                for c in self.repo.list_collaborators(itinerary.id)
            ],
            transport_bookings=bookings,
            total_cost=total,
            remaining_budget=remaining,
        )
