import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from tourdir.api.deps import get_directory
from tourdir.core.directory import DirectoryService
from tourdir.models.domain import (
    BusinessCreate,
    BusinessRead,
    BusinessUpdate,
    SearchFilter,
)

logger = logging.getLogger("tourdir.api")

router = APIRouter(prefix="/api/businesses", tags=["Businesses"])


@router.get("", response_model=List[BusinessRead])
def list_businesses(
    request: Request, directory: DirectoryService = Depends(get_directory)
):
    """
    Searches the catalog. Accepts keyword, categoryId, priceLevel (repeatable),
    rating, amenities, accessibility, latitude, longitude and radius.
    """
    params = {
        key: request.query_params.getlist(key) for key in request.query_params.keys()
    }
    search = SearchFilter.from_query(params)
    results = directory.search(search)
    logger.info(f"Business search {params} returned {len(results)} results")
    return results


@router.get("/owner/{owner_id}", response_model=List[BusinessRead])
def list_owner_businesses(
    owner_id: int, directory: DirectoryService = Depends(get_directory)
):
    return directory.list_businesses_by_owner(owner_id)


@router.get("/{business_id}", response_model=BusinessRead)
def get_business(business_id: int, directory: DirectoryService = Depends(get_directory)):
    return directory.get_business(business_id)


@router.post("", response_model=BusinessRead, status_code=201)
def create_business(
    business: BusinessCreate, directory: DirectoryService = Depends(get_directory)
):
    return directory.create_business(business)


@router.put("/{business_id}", response_model=BusinessRead)
def update_business(
    business_id: int,
    business: BusinessUpdate,
    directory: DirectoryService = Depends(get_directory),
):
    return directory.update_business(business_id, business)
