import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from tourdir.api.deps import get_planner, get_settings
from tourdir.core.config import Settings
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import (
    BookingRead,
    CollaboratorCreate,
    CollaboratorRead,
    CollaboratorUpdate,
    DayCreate,
    DayRead,
    ItineraryCreate,
    ItineraryRead,
    ItinerarySummary,
    ItineraryUpdate,
    Message,
)
from tourdir.services.calendar import generate_ics

logger = logging.getLogger("tourdir.api")

router = APIRouter(prefix="/api/itineraries", tags=["Itineraries"])


@router.get("", response_model=List[ItineraryRead])
def list_public_itineraries(planner: ItineraryManager = Depends(get_planner)):
    return planner.list_public()


@router.post("", response_model=ItineraryRead, status_code=201)
def create_itinerary(
    itinerary: ItineraryCreate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.create_itinerary(itinerary)


@router.get("/user/{user_id}", response_model=List[ItineraryRead])
def list_user_itineraries(user_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.list_for_user(user_id)


@router.get("/{itinerary_id}", response_model=ItineraryRead)
def get_itinerary(itinerary_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.get_itinerary(itinerary_id)


@router.put("/{itinerary_id}", response_model=ItineraryRead)
def update_itinerary(
    itinerary_id: int,
    itinerary: ItineraryUpdate,
    planner: ItineraryManager = Depends(get_planner),
):
    return planner.update_itinerary(itinerary_id, itinerary)


@router.delete("/{itinerary_id}", response_model=Message)
def delete_itinerary(itinerary_id: int, planner: ItineraryManager = Depends(get_planner)):
    planner.delete_itinerary(itinerary_id)
    return {"message": "Itinerary deleted successfully"}


@router.get("/{itinerary_id}/summary", response_model=ItinerarySummary)
def get_itinerary_summary(
    itinerary_id: int, planner: ItineraryManager = Depends(get_planner)
):
    return planner.summarize(itinerary_id)


@router.get("/{itinerary_id}/calendar")
def export_itinerary_calendar(
    itinerary_id: int,
    planner: ItineraryManager = Depends(get_planner),
    settings: Settings = Depends(get_settings),
):
    summary = planner.summarize(itinerary_id)
    ics_bytes = generate_ics(summary, settings.timezone)
    filename = f"itinerary_{itinerary_id}.ics"
    return Response(
        content=ics_bytes,
        media_type="text/calendar",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# Days


@router.get("/{itinerary_id}/days", response_model=List[DayRead])
def list_days(itinerary_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.list_days(itinerary_id)


@router.post("/{itinerary_id}/days", response_model=DayRead, status_code=201)
def create_day(
    itinerary_id: int, day: DayCreate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.create_day(itinerary_id, day)


# Collaborators


@router.get("/{itinerary_id}/collaborators", response_model=List[CollaboratorRead])
def list_collaborators(
    itinerary_id: int, planner: ItineraryManager = Depends(get_planner)
):
    return planner.list_collaborators(itinerary_id)


@router.post(
    "/{itinerary_id}/collaborators", response_model=CollaboratorRead, status_code=201
)
def add_collaborator(
    itinerary_id: int,
    collaborator: CollaboratorCreate,
    planner: ItineraryManager = Depends(get_planner),
):
    return planner.add_collaborator(itinerary_id, collaborator)


@router.put("/{itinerary_id}/collaborators/{email}", response_model=CollaboratorRead)
def update_collaborator(
    itinerary_id: int,
    email: str,
    collaborator: CollaboratorUpdate,
    planner: ItineraryManager = Depends(get_planner),
):
    return planner.update_collaborator(itinerary_id, email, collaborator)


@router.delete("/{itinerary_id}/collaborators/{email}", response_model=Message)
def remove_collaborator(
    itinerary_id: int, email: str, planner: ItineraryManager = Depends(get_planner)
):
    planner.remove_collaborator(itinerary_id, email)
    return {"message": "Collaborator removed successfully"}


# Transport bookings linked to the itinerary


@router.get("/{itinerary_id}/transport-bookings", response_model=List[BookingRead])
def list_itinerary_bookings(
    itinerary_id: int, planner: ItineraryManager = Depends(get_planner)
):
    return planner.list_bookings_for_itinerary(itinerary_id)
