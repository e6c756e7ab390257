import logging
from typing import Iterable, List, Optional, Sequence

from tourdir.core.geo import haversine_km
from tourdir.models.domain import SearchFilter
from tourdir.models.sql import Business

logger = logging.getLogger("tourdir.search")

DEFAULT_RADIUS_KM = 10.0


def _has_any(values: Optional[Sequence[str]], wanted: Sequence[str]) -> bool:
    # OR semantics: one shared token is enough
    if not values:
        return False
    present = set(values)
    return any(token in present for token in wanted)


def matches(business: Business, search: SearchFilter) -> bool:
    """True when the business satisfies every predicate set on the filter."""
    if search.keyword:
        keyword = search.keyword.lower()
        name = (business.name or "").lower()
        description = (business.description or "").lower()
        if keyword not in name and keyword not in description:
            return False

    if search.category_id is not None and business.category_id != search.category_id:
        return False

    if search.price_level:
        if business.price_level is None or business.price_level not in search.price_level:
            return False

    if search.rating is not None:
        if business.rating is None or business.rating < search.rating:
            return False

    if search.amenities and not _has_any(business.amenities, search.amenities):
        return False

    if search.accessibility and not _has_any(business.tags, search.accessibility):
        return False

    return True


def search_businesses(
    businesses: Iterable[Business],
    search: Optional[SearchFilter] = None,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Business]:
    """
    Applies a filter to a business collection.

    Without nearMe the input order is preserved. With nearMe only businesses
    within the radius (inclusive) are kept and the result is sorted by
    distance; the sort is stable so equal distances keep their input order.
    """
    businesses = list(businesses)
    if search is None:
        return businesses

    results = [b for b in businesses if matches(b, search)]

    if search.near_me:
        radius = search.radius if search.radius is not None else default_radius_km
        in_range = []
        for business in results:
            distance = haversine_km(
                search.latitude, search.longitude, business.latitude, business.longitude
            )
            if distance <= radius:
                in_range.append((distance, business))
        in_range.sort(key=lambda pair: pair[0])
        results = [business for _, business in in_range]
        logger.debug(
            f"Near-me search at ({search.latitude}, {search.longitude}) r={radius}km: "
            f"{len(results)} hits"
        )

    return results
