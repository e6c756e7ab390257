from fastapi import Depends, Request
from sqlalchemy.orm import Session

from tourdir.core.config import Settings
from tourdir.core.database import get_db
from tourdir.core.directory import DirectoryService
from tourdir.core.itinerary import ItineraryManager
from tourdir.core.repository import SqlRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(db: Session = Depends(get_db)) -> SqlRepository:
    return SqlRepository(db)


def get_directory(
    repo: SqlRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> DirectoryService:
    return DirectoryService(repo, default_radius_km=settings.default_radius_km)


def get_planner(repo: SqlRepository = Depends(get_repository)) -> ItineraryManager:
    return ItineraryManager(repo)
