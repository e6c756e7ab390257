from typing import List

from fastapi import APIRouter, Depends

from tourdir.api.deps import get_planner
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import DayRead, DayUpdate, ItemCreate, ItemRead, Message

router = APIRouter(prefix="/api/itinerary-days", tags=["Itinerary Days"])


@router.get("/{day_id}", response_model=DayRead)
def get_day(day_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.get_day(day_id)


@router.put("/{day_id}", response_model=DayRead)
def update_day(
    day_id: int, day: DayUpdate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.update_day(day_id, day)


@router.delete("/{day_id}", response_model=Message)
def delete_day(day_id: int, planner: ItineraryManager = Depends(get_planner)):
    planner.delete_day(day_id)
    return {"message": "Day deleted successfully"}


@router.get("/{day_id}/items", response_model=List[ItemRead])
def list_items(day_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.list_items(day_id)


@router.post("/{day_id}/items", response_model=ItemRead, status_code=201)
def create_item(
    day_id: int, item: ItemCreate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.create_item(day_id, item)
