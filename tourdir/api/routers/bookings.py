from typing import List

from fastapi import APIRouter, Depends

from tourdir.api.deps import get_planner
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import BookingCreate, BookingRead, BookingUpdate, Message

router = APIRouter(prefix="/api/transport-bookings", tags=["Transport Bookings"])


@router.post("", response_model=BookingRead, status_code=201)
def create_booking(
    booking: BookingCreate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.create_booking(booking)


@router.get("/user/{user_id}", response_model=List[BookingRead])
def list_user_bookings(user_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.list_bookings_for_user(user_id)


@router.get("/{booking_id}", response_model=BookingRead)
def get_booking(booking_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.get_booking(booking_id)


@router.put("/{booking_id}", response_model=BookingRead)
def update_booking(
    booking_id: int,
    booking: BookingUpdate,
    planner: ItineraryManager = Depends(get_planner),
):
    return planner.update_booking(booking_id, booking)


@router.delete("/{booking_id}", response_model=Message)
def delete_booking(booking_id: int, planner: ItineraryManager = Depends(get_planner)):
    planner.delete_booking(booking_id)
    return {"message": "Booking deleted successfully"}
