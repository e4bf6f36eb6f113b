"""
Spot list filtering.

Filter and facet helpers behind the list panel: category, country and city
drop-downs plus a free-text search box. Spots are plain dictionaries as
returned by TravelSpot.to_dict().
"""

from typing import Any, Dict, List, Optional

ALL = "all"


def _is_unset(value: Optional[str]) -> bool:
    return value is None or value == "" or value == ALL


def matches_search(spot: Dict[str, Any], query: Optional[str]) -> bool:
    """Check whether a spot matches the free-text search box.

    Args:
        spot: Spot dictionary.
        query: Search text; empty or None matches everything.

    Returns:
        True if the query occurs in the name, city or country (case-insensitive).
    """
    if not query:
        return True
    needle = query.strip().lower()
    return any(
        needle in (spot.get(field) or "").lower()
        for field in ("name", "city", "country")
    )


def filter_spots(
        spots: List[Dict[str, Any]],
        category: Optional[str] = None,
        country: Optional[str] = None,
        city: Optional[str] = None,
        query: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Apply the list panel filters, preserving input order.

    Args:
        spots: Spot dictionaries, usually newest first.
        category: Exact category or "all".
        country: Exact country or "all".
        city: Exact city or "all".
        query: Free-text search.

    Returns:
        Spots that satisfy every active filter.
    """
    result = []
    for spot in spots:
        if not _is_unset(category) and spot.get("category") != category:
            continue
        if not _is_unset(country) and spot.get("country") != country:
            continue
        if not _is_unset(city) and spot.get("city") != city:
            continue
        if not matches_search(spot, query):
            continue
        result.append(spot)
    return result


def spot_facets(spots: List[Dict[str, Any]], country: Optional[str] = None) -> Dict[str, List[str]]:
    """Compute drop-down options for the list panel.

    Cities are only offered once a country is chosen.

    Args:
        spots: All spot dictionaries.
        country: Currently selected country, or "all".

    Returns:
        Dictionary with "categories", "countries" and "cities", each starting with "all".
    """
    categories: List[str] = []
    for spot in spots:
        value = spot.get("category")
        if value and value not in categories:
            categories.append(value)

    countries = sorted({spot.get("country") for spot in spots if spot.get("country")})

    if _is_unset(country):
        cities: List[str] = []
    else:
        cities = sorted(
            {
                spot.get("city")
                for spot in spots
                if spot.get("country") == country and spot.get("city")
            }
        )

    return {
        "categories": [ALL] + categories,
        "countries": [ALL] + countries,
        "cities": [ALL] + cities,
    }
