from fastapi import APIRouter, Depends

from tourdir.api.deps import get_directory, get_planner, get_settings
from tourdir.core.config import Settings
from tourdir.core.data import seed_store
from tourdir.core.directory import DirectoryService
from tourdir.core.itinerary import ItineraryManager
from tourdir.models.domain import CategoryRead

router = APIRouter(prefix="/api", tags=["System"])


@router.get("/seed-data")
def seed_data(
    directory: DirectoryService = Depends(get_directory),
    planner: ItineraryManager = Depends(get_planner),
):
    seeded = seed_store(directory, planner)
    return {
        "message": "Data seeded successfully" if seeded else "Data already present",
        "count": len(directory.search()),
        "categories": [
            CategoryRead.model_validate(c).model_dump(by_alias=True)
            for c in directory.list_categories()
        ],
    }


@router.get("/config/maps")
def maps_config(settings: Settings = Depends(get_settings)):
    return {"apiKey": settings.maps_api_key}
