import datetime

import pytest

from tourdir.core.errors import NotFoundError, StateConflictError
from tourdir.core.itinerary import check_booking_transition
from tourdir.models.domain import BookingCreate, BookingUpdate, ItineraryCreate


@pytest.fixture
def booking_data(user, itinerary):
    return dict(
        user_id=user.id,
        itinerary_id=itinerary.id,
        service_type="driver",
        provider_name="Safari Transit",
        booking_date=datetime.date(2025, 5, 1),
        pickup_time=datetime.time(6, 30),
        pickup_location="Victoria Falls Airport",
        dropoff_location="Victoria Falls Hotel",
        number_of_passengers=2,
        cost=35,
    )


@pytest.mark.parametrize(
    "current,target",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
        ("completed", "completed"),
    ],
)
def test_allowed_transitions(current, target):
    check_booking_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("pending", "completed"),
        ("confirmed", "pending"),
        ("completed", "cancelled"),
        ("cancelled", "confirmed"),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(StateConflictError):
        check_booking_transition(current, target)


def test_new_booking_is_pending(planner, booking_data, itinerary):
    before = itinerary.updated_at
    booking = planner.create_booking(BookingCreate(**booking_data))
    assert booking.status == "pending"
    assert booking.payment_status == "unpaid"
    assert itinerary.updated_at > before
    assert planner.list_bookings_for_itinerary(itinerary.id) == [booking]


def test_booking_without_itinerary(planner, booking_data, user):
    booking_data["itinerary_id"] = None
    booking = planner.create_booking(BookingCreate(**booking_data))
    assert planner.list_bookings_for_user(user.id) == [booking]


def test_booking_for_unknown_itinerary(planner, booking_data):
    booking_data["itinerary_id"] = 123
    with pytest.raises(NotFoundError):
        planner.create_booking(BookingCreate(**booking_data))


def test_booking_lifecycle(planner, booking_data, clock):
    booking = planner.create_booking(BookingCreate(**booking_data))
    clock.advance(minutes=5)
    planner.update_booking(booking.id, BookingUpdate(status="confirmed", payment_status="paid"))
    assert booking.status == "confirmed"
    assert booking.updated_at == clock.now

    planner.update_booking(booking.id, BookingUpdate(status="completed"))
    with pytest.raises(StateConflictError):
        planner.update_booking(booking.id, BookingUpdate(status="cancelled"))
    assert booking.status == "completed"


def test_failed_transition_changes_nothing(planner, booking_data):
    booking = planner.create_booking(BookingCreate(**booking_data))
    with pytest.raises(StateConflictError):
        planner.update_booking(
            booking.id, BookingUpdate(status="completed", pickup_location="Elsewhere")
        )
    assert booking.status == "pending"
    assert booking.pickup_location == "Victoria Falls Airport"


def test_delete_booking(planner, booking_data):
    booking = planner.create_booking(BookingCreate(**booking_data))
    planner.delete_booking(booking.id)
    with pytest.raises(NotFoundError):
        planner.get_booking(booking.id)


def test_null_status_is_rejected():
    with pytest.raises(ValueError):
        BookingUpdate(status=None)


def test_update_booking_touches_itinerary(planner, booking_data, itinerary):
    booking = planner.create_booking(BookingCreate(**booking_data))
    before = itinerary.updated_at
    planner.update_booking(booking.id, BookingUpdate(status="confirmed"))
    assert itinerary.updated_at > before


def test_delete_booking_touches_itinerary(planner, booking_data, itinerary):
    booking = planner.create_booking(BookingCreate(**booking_data))
    before = itinerary.updated_at
    planner.delete_booking(booking.id)
    assert itinerary.updated_at > before


def test_moving_booking_touches_both_itineraries(planner, booking_data, itinerary, user):
    other = planner.create_itinerary(
        ItineraryCreate(
            user_id=user.id,
            title="Hwange",
            start_date=datetime.date(2025, 6, 1),
            end_date=datetime.date(2025, 6, 3),
        )
    )
    booking = planner.create_booking(BookingCreate(**booking_data))
    before = (itinerary.updated_at, other.updated_at)

    planner.update_booking(booking.id, BookingUpdate(itinerary_id=other.id))

    assert booking.itinerary_id == other.id
    assert itinerary.updated_at > before[0]
    assert other.updated_at > before[1]
