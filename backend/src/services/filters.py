from __future__ import annotations

from typing import Iterable, List, Optional

from models import FilterOptions, Recommendation
from utils import parse_leading_number

MILES_TO_KM = 1.60934


def distance_in_unit(distance: Optional[str], unit: str) -> Optional[float]:
    """Convert a free-text distance (always recorded in miles) into ``unit``.

    Returns None when the text has no leading number, so callers treat the
    distance as unknown rather than failing.
    """
    miles = parse_leading_number(distance)
    if miles is None:
        return None
    return miles * MILES_TO_KM if unit == "km" else miles


def passes(item: Recommendation, opts: FilterOptions) -> bool:
    if item.rating < opts.min_rating:
        return False

    if opts.open_now_only and item.open_now is not True:
        return False

    distance = distance_in_unit(item.distance, opts.distance_unit)
    if distance is not None and distance > opts.max_distance:
        return False

    if item.price_level and len(item.price_level) > opts.price_level:
        return False

    return True


def filter_recommendations(items: Iterable[Recommendation], opts: FilterOptions) -> List[Recommendation]:
    """Stable post-fetch filter; keeps input order."""
    return [item for item in items if passes(item, opts)]
