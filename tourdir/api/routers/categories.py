from typing import List

from fastapi import APIRouter, Depends

from tourdir.api.deps import get_directory
from tourdir.core.directory import DirectoryService
from tourdir.models.domain import CategoryCreate, CategoryRead

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(directory: DirectoryService = Depends(get_directory)):
    return directory.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, directory: DirectoryService = Depends(get_directory)):
    return directory.get_category(category_id)


@router.post("", response_model=CategoryRead, status_code=201)
def create_category(
    category: CategoryCreate, directory: DirectoryService = Depends(get_directory)
):
    return directory.create_category(category)
