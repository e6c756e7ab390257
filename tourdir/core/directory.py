import logging
from typing import List, Optional

from tourdir.core.errors import NotFoundError, StateConflictError, ValidationFailed
from tourdir.core.repository import Repository
from tourdir.core.search import DEFAULT_RADIUS_KM, search_businesses
from tourdir.models.domain import (
    BusinessCreate,
    BusinessUpdate,
    CategoryCreate,
    ClaimRequestCreate,
    SearchFilter,
    UserCreate,
)
from tourdir.models.sql import Business, Category, ClaimRequest, User
from tourdir.services.auth import get_password_hash

logger = logging.getLogger("tourdir.directory")

CLAIM_PENDING = "pending"
CLAIM_DECISIONS = ("approved", "rejected")


class DirectoryService:
    """Business catalog, categories, users and the ownership-claim workflow."""

    def __init__(self, repo: Repository, default_radius_km: float = DEFAULT_RADIUS_KM):
        self.repo = repo
        self.default_radius_km = default_radius_km

    # --- categories -------------------------------------------------------

    def list_categories(self) -> List[Category]:
        return self.repo.list_categories()

    def get_category(self, category_id: int) -> Category:
        category = self.repo.get_category(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, data: CategoryCreate) -> Category:
        category = Category(**data.model_dump())
        with self.repo.transaction():
            self.repo.add(category)
        return category

    # --- users ------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        if self.repo.get_user_by_username(data.username):
            raise StateConflictError("Username already exists")
        if self.repo.get_user_by_email(data.email):
            raise StateConflictError("Email already exists")

        fields = data.model_dump(exclude={"password"})
        user = User(hashed_password=get_password_hash(data.password), **fields)
        with self.repo.transaction():
            self.repo.add(user)
        logger.info(f"Created user {user.id} ({user.username})")
        return user

    # --- businesses -------------------------------------------------------

    def search(self, search: Optional[SearchFilter] = None) -> List[Business]:
        return search_businesses(
            self.repo.list_businesses(), search, self.default_radius_km
        )

    def get_business(self, business_id: int) -> Business:
        business = self.repo.get_business(business_id)
        if business is None:
            raise NotFoundError("Business not found")
        return business

    def list_businesses_by_owner(self, owner_id: int) -> List[Business]:
        return self.repo.list_businesses_by_owner(owner_id)

    def _check_business(self, business: Business) -> None:
        if self.repo.get_category(business.category_id) is None:
            raise NotFoundError("Category not found")
        if business.owner_id is not None and self.repo.get_user(business.owner_id) is None:
            raise NotFoundError("Owner not found")
        if business.claimed and business.owner_id is None:
            raise ValidationFailed.for_field("ownerId", "A claimed business needs an owner")
        if business.external_place_id:
            existing = self.repo.get_business_by_place_id(business.external_place_id)
            if existing is not None and existing is not business:
                raise StateConflictError("A business with this place id already exists")

    def create_business(self, data: BusinessCreate) -> Business:
        business = Business(**data.model_dump())
        self._check_business(business)
        with self.repo.transaction():
            self.repo.add(business)
        return business

    def update_business(self, business_id: int, data: BusinessUpdate) -> Business:
        with self.repo.transaction():
            business = self.get_business(business_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(business, field, value)
            self._check_business(business)
            self.repo.add(business)
        return business

    # --- claim requests ---------------------------------------------------

    def create_claim(self, data: ClaimRequestCreate) -> ClaimRequest:
        with self.repo.transaction():
            business = self.get_business(data.business_id)
            self.get_user(data.user_id)

            if business.claimed:
                raise StateConflictError("Business is already claimed")
            pending = [
                r
                for r in self.repo.list_claims_by_business(business.id)
                if r.status == CLAIM_PENDING
            ]
            if pending:
                raise StateConflictError(
                    "There is already a pending claim request for this business"
                )

            claim = ClaimRequest(status=CLAIM_PENDING, **data.model_dump())
            self.repo.add(claim)
        logger.info(f"Claim {claim.id} opened on business {business.id} by user {claim.user_id}")
        return claim

    def list_claims_by_user(self, user_id: int) -> List[ClaimRequest]:
        return self.repo.list_claims_by_user(user_id)

    def decide_claim(self, claim_id: int, status: str) -> ClaimRequest:
        """
        Moves a pending claim to approved or rejected. Both are terminal.
        Approval transfers ownership of the business in the same transaction.
        """
        if status not in CLAIM_DECISIONS:
            raise ValidationFailed.for_field("status", "Invalid status")

        with self.repo.transaction():
            claim = self.repo.get_claim(claim_id)
            if claim is None:
                raise NotFoundError("Claim request not found")
            if claim.status != CLAIM_PENDING:
                raise StateConflictError("Claim request is not pending")

            claim.status = status
            self.repo.add(claim)
            if status == "approved":
                business = self.get_business(claim.business_id)
                business.claimed = True
                business.owner_id = claim.user_id
                self.repo.add(business)

        logger.info(f"Claim {claim.id} {status}")
        return claim
