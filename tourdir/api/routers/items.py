from fastapi import APIRouter, Depends

from tourdir.api.deps import get_planner
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import ItemRead, ItemUpdate, Message

router = APIRouter(prefix="/api/itinerary-items", tags=["Itinerary Items"])


@router.get("/{item_id}", response_model=ItemRead)
def get_item(item_id: int, planner: ItineraryManager = Depends(get_planner)):
    return planner.get_item(item_id)


@router.put("/{item_id}", response_model=ItemRead)
def update_item(
    item_id: int, item: ItemUpdate, planner: ItineraryManager = Depends(get_planner)
):
    return planner.update_item(item_id, item)


@router.delete("/{item_id}", response_model=Message)
def delete_item(item_id: int, planner: ItineraryManager = Depends(get_planner)):
    planner.delete_item(item_id)
    return {"message": "Item deleted successfully"}
