from typing import List

from fastapi import APIRouter, Depends

from tourdir.api.deps import get_directory
from tourdir.core.directory import DirectoryService
from tourdir.models.domain import ClaimDecision, ClaimRequestCreate, ClaimRequestRead

router = APIRouter(prefix="/api/claim-requests", tags=["Claims"])


@router.post("", response_model=ClaimRequestRead, status_code=201)
def create_claim_request(
    claim: ClaimRequestCreate, directory: DirectoryService = Depends(get_directory)
):
    return directory.create_claim(claim)


@router.get("/user/{user_id}", response_model=List[ClaimRequestRead])
def list_user_claim_requests(
    user_id: int, directory: DirectoryService = Depends(get_directory)
):
    return directory.list_claims_by_user(user_id)


@router.put("/{claim_id}", response_model=ClaimRequestRead)
def decide_claim_request(
    claim_id: int,
    decision: ClaimDecision,
    directory: DirectoryService = Depends(get_directory),
):
    return directory.decide_claim(claim_id, decision.status)
