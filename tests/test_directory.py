import pytest
from argon2.exceptions import VerifyMismatchError

from tourdir.core.data import seed_store
from tourdir.core.errors import NotFoundError, StateConflictError, ValidationFailed
from tourdir.models.domain import (
    BusinessCreate,
    BusinessUpdate,
    ClaimRequestCreate,
    SearchFilter,
    UserCreate,
)
from tourdir.services.auth import ph


def make_business(directory, category, **kwargs):
    fields = dict(
        name="Boma Restaurant",
        latitude=-17.8252,
        longitude=31.0335,
        category_id=category.id,
        rating=4.6,
    )
    fields.update(kwargs)
    return directory.create_business(BusinessCreate(**fields))


def test_create_user_hashes_password(directory, user):
    assert user.hashed_password != "secret123"
    assert ph.verify(user.hashed_password, "secret123")
    with pytest.raises(VerifyMismatchError):
        ph.verify(user.hashed_password, "wrong")


def test_duplicate_username_and_email(directory, user):
    with pytest.raises(StateConflictError, match="Username"):
        directory.create_user(
            UserCreate(username="tendai", email="other@example.com", password="secret123")
        )
    with pytest.raises(StateConflictError, match="Email"):
        directory.create_user(
            UserCreate(username="other", email="tendai@example.com", password="secret123")
        )


def test_get_missing_category(directory):
    with pytest.raises(NotFoundError):
        directory.get_category(1)


def test_create_business_requires_category(directory):
    with pytest.raises(NotFoundError):
        directory.create_business(
            BusinessCreate(name="Lost", latitude=0, longitude=0, category_id=9)
        )


def test_claimed_business_needs_owner(directory, category):
    with pytest.raises(ValidationFailed):
        make_business(directory, category, claimed=True)


def test_duplicate_place_id_is_a_conflict(directory, category):
    make_business(directory, category, external_place_id="ChIJ123")
    with pytest.raises(StateConflictError):
        make_business(directory, category, name="Copy", external_place_id="ChIJ123")


def test_update_business(directory, category):
    business = make_business(directory, category, external_place_id="ChIJ123")
    updated = directory.update_business(
        business.id, BusinessUpdate(rating=4.9, external_place_id="ChIJ123")
    )
    assert updated.rating == 4.9
    assert updated.name == "Boma Restaurant"


def test_update_business_rolls_back_on_bad_owner(directory, category, repo):
    business = make_business(directory, category)
    with pytest.raises(NotFoundError):
        directory.update_business(business.id, BusinessUpdate(owner_id=77, rating=1.0))
    assert business.owner_id is None
    assert business.rating == 4.6


def test_search_through_service(directory, category):
    make_business(directory, category)
    make_business(directory, category, name="Zambezi House", rating=4.7)
    names = [b.name for b in directory.search(SearchFilter(rating=4.7))]
    assert names == ["Zambezi House"]


def test_claim_approval_transfers_ownership(directory, category, user):
    business = make_business(directory, category)
    claim = directory.create_claim(
        ClaimRequestCreate(business_id=business.id, user_id=user.id)
    )
    assert claim.status == "pending"

    decided = directory.decide_claim(claim.id, "approved")

    assert decided.status == "approved"
    assert business.claimed is True
    assert business.owner_id == user.id
    assert directory.list_businesses_by_owner(user.id) == [business]


def test_claim_rejection_leaves_business_unclaimed(directory, category, user):
    business = make_business(directory, category)
    claim = directory.create_claim(
        ClaimRequestCreate(business_id=business.id, user_id=user.id)
    )
    directory.decide_claim(claim.id, "rejected")
    assert not business.claimed
    assert business.owner_id is None

    # a rejected claim does not block a fresh one
    again = directory.create_claim(
        ClaimRequestCreate(business_id=business.id, user_id=user.id)
    )
    assert [c.id for c in directory.list_claims_by_user(user.id)] == [claim.id, again.id]


def test_decided_claim_is_terminal(directory, category, user):
    business = make_business(directory, category)
    claim = directory.create_claim(
        ClaimRequestCreate(business_id=business.id, user_id=user.id)
    )
    directory.decide_claim(claim.id, "rejected")
    with pytest.raises(StateConflictError):
        directory.decide_claim(claim.id, "approved")


def test_only_one_pending_claim(directory, category, user):
    business = make_business(directory, category)
    directory.create_claim(ClaimRequestCreate(business_id=business.id, user_id=user.id))
    with pytest.raises(StateConflictError):
        directory.create_claim(
            ClaimRequestCreate(business_id=business.id, user_id=user.id)
        )


def test_claiming_a_claimed_business(directory, category, user):
    business = make_business(directory, category, claimed=True, owner_id=user.id)
    with pytest.raises(StateConflictError, match="already claimed"):
        directory.create_claim(
            ClaimRequestCreate(business_id=business.id, user_id=user.id)
        )


def test_decide_unknown_claim(directory):
    with pytest.raises(NotFoundError):
        directory.decide_claim(5, "approved")
    with pytest.raises(ValidationFailed):
        directory.decide_claim(5, "maybe")


def test_seed_store_is_idempotent(directory, planner):
    assert seed_store(directory, planner) is True
    count = len(directory.search())
    assert count == 10
    assert len(directory.list_categories()) == 6
    public = planner.list_public()
    assert len(public) == 1
    assert len(planner.list_days(public[0].id)) == 2

    assert seed_store(directory, planner) is False
    assert len(directory.search()) == count


def test_rejected_claim_is_rolled_back(directory, category, user, repo):
    business = make_business(directory, category)
    directory.create_claim(ClaimRequestCreate(business_id=business.id, user_id=user.id))
    rollbacks = repo.rollbacks

    with pytest.raises(StateConflictError):
        directory.create_claim(
            ClaimRequestCreate(business_id=business.id, user_id=user.id)
        )
    with pytest.raises(NotFoundError):
        directory.create_claim(ClaimRequestCreate(business_id=business.id, user_id=99))

    assert repo.rollbacks == rollbacks + 2
    assert len(directory.list_claims_by_user(user.id)) == 1
