import logging
import requests
from geopy.distance import geodesic
from pydantic import ValidationError
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from metarbar import config
from metarbar.errors import MetarServiceError
from metarbar.models.airport import Airport

logger = logging.getLogger(__name__)

Location = Tuple[float, float]


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Geodesic distance in statute miles."""
    return geodesic((lat1, lon1), (lat2, lon2)).miles


def fetch_airports(states: Optional[Sequence[str]] = None, session=None) -> List[Airport]:
    """Fetch the airport catalog for state groups such as "@WA".

    Entries without a usable ICAO id are skipped.
    """
    states = list(states) if states is not None else list(config.DEFAULT_AIRPORT_STATES)
    http = session or requests
    params = {"ids": ",".join(states), "format": "json"}
    logger.info(f"🌐 Fetching airports for {params['ids']}")

    try:
        r = http.get(config.AIRPORT_API_URL, params=params, timeout=config.HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.error(f"❌ Airport request failed: {e}")
        raise MetarServiceError(f"Network error: {e}") from e

    if r.status_code != 200:
        logger.error(f"❌ Airport API Error {r.status_code}: {r.text}")
        raise MetarServiceError(f"HTTP error: {r.status_code}")

    try:
        data = r.json()
    except ValueError as e:
        raise MetarServiceError(f"Parsing error: {e}") from e
    if not isinstance(data, list):
        raise MetarServiceError(f"Parsing error: expected a list of airports, got {type(data).__name__}")

    airports = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            airports.append(Airport.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Skipping airport entry {item.get('icaoId')!r}: {e}")
    logger.info(f"✅ Loaded {len(airports)} airports")
    return airports


def sort_by_distance(airports: Iterable[Airport], location: Location) -> List[Airport]:
    """Fill in distance_mi from `location` and order nearest first.

    Airports without coordinates go last.
    """
    lat, lon = location
    result = []
    for airport in airports:
        if airport.lat is not None and airport.lon is not None:
            airport.distance_mi = distance_miles(lat, lon, airport.lat, airport.lon)
        else:
            airport.distance_mi = None
        result.append(airport)
    result.sort(key=lambda a: (a.distance_mi is None, a.distance_mi or 0.0))
    return result


class TrackedAirports:
    """The airports whose METARs are shown, in display order.

    Held in memory only. Pass `tracked.codes` to MetarService so refreshes
    follow the current selection.
    """

    def __init__(self, airports: Optional[Iterable[Airport]] = None):
        self._airports: List[Airport] = []
        for airport in airports or []:
            self.add(airport)

    @classmethod
    def from_codes(cls, codes: Iterable[str]) -> "TrackedAirports":
        # placeholders until refresh_details() has the catalog entries
        return cls(Airport(icao_id=code) for code in codes if code and code.strip())

    @property
    def airports(self) -> List[Airport]:
        return list(self._airports)

    def codes(self) -> List[str]:
        return [airport.icao_id for airport in self._airports]

    def add(self, airport: Union[Airport, str]) -> bool:
        if isinstance(airport, str):
            airport = Airport(icao_id=airport)
        if airport in self._airports:
            return False
        self._airports.append(airport)
        return True

    def remove(self, airport: Union[Airport, str]) -> bool:
        code = airport.icao_id if isinstance(airport, Airport) else airport.strip().upper()
        before = len(self._airports)
        self._airports = [a for a in self._airports if a.icao_id != code]
        return len(self._airports) != before

    def refresh_details(self, catalog: Iterable[Airport]) -> None:
        """Swap placeholder entries for full catalog records, keeping order."""
        by_code: Dict[str, Airport] = {airport.icao_id: airport for airport in catalog}
        self._airports = [by_code.get(airport.icao_id, airport) for airport in self._airports]

    def sort_by_distance(self, location: Location) -> None:
        self._airports = sort_by_distance(self._airports, location)

    def __len__(self) -> int:
        return len(self._airports)

    def __iter__(self) -> Iterator[Airport]:
        return iter(list(self._airports))

    def __contains__(self, airport) -> bool:
        code = airport.icao_id if isinstance(airport, Airport) else str(airport).strip().upper()
        return code in self.codes()
