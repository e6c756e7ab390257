from fastapi import APIRouter, Depends

from tourdir.api.deps import get_directory
from tourdir.core.directory import DirectoryService
from tourdir.models.domain import UserCreate, UserRead

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", response_model=UserRead, status_code=201)
def create_user(user: UserCreate, directory: DirectoryService = Depends(get_directory)):
    # UserRead has no password field, so the hash never leaves the server
    return directory.create_user(user)
