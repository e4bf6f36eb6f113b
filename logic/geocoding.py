"""
Location search for the add-spot form.

Queries the Nominatim geocoder and turns its results into suggestions that
pre-fill a spot's name, city, country, category and coordinates.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

from logic.config import Settings, get_settings
from logic.validation import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
DEFAULT_DEBOUNCE_SECONDS = 0.5
SEARCH_ERROR_MESSAGE = "Failed to fetch locations. Please try again."

# Checked in order; the first category with a matching keyword wins.
CATEGORY_TYPES = (
    ("LANDMARKS", ("tourism", "historic", "monument")),
    ("NATURE", ("natural", "park", "leisure")),
    ("BEACH", ("beach", "natural")),
    ("RESTAURANTS", ("amenity", "restaurant")),
)


class GeocodingError(Exception):
    """Raised when the geocoding service cannot be reached or refuses a query."""


def _match_category(text: Any, exact: bool = False) -> Optional[str]:
    if not isinstance(text, str) or not text:
        return None
    text = text.lower()
    for category, keywords in CATEGORY_TYPES:
        if exact and text in keywords:
            return category
        if not exact and any(keyword in text for keyword in keywords):
            return category
    return None


def guess_category(display_name: str, osm_class: Optional[str] = None, osm_type: Optional[str] = None) -> str:
    """Guess a spot category for a geocoder result.

    The OSM type (e.g. "beach") is checked first, then the OSM class
    (e.g. "tourism"), both as exact keywords. The display name is the
    fallback and matches on any keyword it contains.

    Args:
        display_name: Full display name of the place.
        osm_class: Nominatim "class" field, if present.
        osm_type: Nominatim "type" field, if present.

    Returns:
        Matching category, or DEFAULT_CATEGORY.
    """
    for osm_value in (osm_type, osm_class):
        category = _match_category(osm_value, exact=True)
        if category is not None:
            return category
    return _match_category(display_name) or DEFAULT_CATEGORY


def parse_suggestion(item: Any) -> Optional[Dict[str, Any]]:
    """Convert one Nominatim result into a suggestion.

    Args:
        item: One element of the Nominatim JSON array.

    Returns:
        Suggestion dictionary, or None if the item is unusable.
    """
    if not isinstance(item, dict):
        return None

    try:
        latitude = float(item["lat"])
        longitude = float(item["lon"])
    except (KeyError, TypeError, ValueError):
        return None

    display_name = item.get("display_name") or ""
    if not isinstance(display_name, str):
        display_name = str(display_name)
    address = item.get("address")
    if not isinstance(address, dict):
        address = {}

    name = address.get("amenity") or address.get("road") or display_name.split(",")[0].strip()
    city = address.get("city") or address.get("town") or address.get("village") or ""
    state = address.get("state") or ""
    country = address.get("country") or ""

    return {
        "name": name,
        "city": city,
        "state": state,
        "country": country,
        "label": ", ".join(part for part in (name, city, state, country) if part),
        "category": guess_category(display_name, item.get("class"), item.get("type")),
        "latitude": latitude,
        "longitude": longitude,
        "display_name": display_name,
    }


def parse_suggestions(data: Any) -> List[Dict[str, Any]]:
    """Convert a Nominatim response body into suggestions.

    Anything that is not a list counts as "no suggestions".

    Args:
        data: Decoded JSON body.

    Returns:
        List of suggestions, skipping unusable items.
    """
    if not isinstance(data, list):
        logger.warning("Unexpected geocoder response type: %s", type(data).__name__)
        return []
    suggestions = []
    for item in data:
        suggestion = parse_suggestion(item)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


async def _fetch_json(url: str, params: Dict[str, Any], headers: Dict[str, str], timeout: float) -> Any:
    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
        async with session.get(url, params=params, headers=headers) as resp:
            if resp.status != 200:
                raise GeocodingError(f"Geocoder returned HTTP {resp.status}")
            return await resp.json(content_type=None)


async def search_places(query: str, settings: Optional[Settings] = None) -> List[Dict[str, Any]]:
    """Search for places matching free text.

    Args:
        query: Text typed into the location search box.
        settings: Settings to use; read from the environment when omitted.

    Returns:
        Up to settings.geocoder_limit suggestions. Short queries return an
        empty list without contacting the geocoder.

    Raises:
        GeocodingError: If the geocoder is unreachable or answers with an error.
    """
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    settings = settings or get_settings()
    params = {
        "format": "json",
        "q": query,
        "limit": settings.geocoder_limit,
        "addressdetails": 1,
    }
    headers = {
        "Accept-Language": "en-US,en;q=0.9",
        "User-Agent": settings.geocoder_user_agent,
    }

    try:
        data = await _fetch_json(
            f"{settings.nominatim_url}/search", params, headers, settings.geocoder_timeout
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning("Geocoder request failed for %r: %s", query, e)
        raise GeocodingError(str(e)) from e
    except ValueError as e:
        logger.warning("Geocoder returned invalid JSON for %r: %s", query, e)
        return []

    return parse_suggestions(data)[: settings.geocoder_limit]


class DebouncedSearch:
    """Cancellable delayed location search.

    Server-side counterpart of the add form's search box in static/app.js,
    which applies the same delay, minimum length and stale-reply rule in
    the browser. Async clients of search_places use this directly.

    Every submitted query invalidates the pending one before it starts, so
    only the latest keystroke ever reaches the geocoder, and a reply to a
    superseded query is dropped.
    """

    def __init__(
            self,
            search: Callable[[str], Awaitable[List[Dict[str, Any]]]] = search_places,
            delay: float = DEFAULT_DEBOUNCE_SECONDS,
            on_results: Optional[Callable[[str, List[Dict[str, Any]]], None]] = None,
    ):
        self._search = search
        self._delay = delay
        self._on_results = on_results
        self._token = 0
        self._pending: Optional[asyncio.Task] = None
        self.results: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    @property
    def is_searching(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def submit(self, query: str) -> Optional[asyncio.Task]:
        """Schedule a search for query, replacing any pending one.

        Must be called from a running event loop.

        Args:
            query: Current contents of the search box.

        Returns:
            The scheduled task, or None for queries too short to search.
        """
        self.cancel()
        self.error = None
        if len((query or "").strip()) < MIN_QUERY_LENGTH:
            self.results = []
            return None
        token = self._token
        self._pending = asyncio.ensure_future(self._run(token, query))
        return self._pending

    def cancel(self) -> None:
        """Invalidate the pending query, if any."""
        self._token += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, token: int, query: str) -> Optional[List[Dict[str, Any]]]:
        await asyncio.sleep(self._delay)
        if token != self._token:
            return None
        try:
            results = await self._search(query)
        except GeocodingError:
            if token == self._token:
                self.results = []
                self.error = SEARCH_ERROR_MESSAGE
            return None
        if token != self._token:
            return None
        self.results = results
        if self._on_results is not None:
            self._on_results(query, results)
        return results
