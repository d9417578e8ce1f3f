import logging
import requests
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional, Sequence, Tuple, Union

from metarbar import config
from metarbar.errors import MalformedBatch, MetarServiceError
from metarbar.models.observation import NormalizedObservation
from metarbar.models.weather import RawWeatherRecord
from metarbar.services.condensed import build_condensed_title
from metarbar.services.decoder import decode_batch
from metarbar.services.formatting import normalize_batch

logger = logging.getLogger(__name__)

AirportCodes = Union[Sequence[str], Callable[[], Sequence[str]], None]


def _clean_codes(codes: Sequence[str]) -> List[str]:
    return [code.strip().upper() for code in codes if code and code.strip()]


def fetch_metars(codes: Sequence[str], session=None) -> List[RawWeatherRecord]:
    """Fetch the latest METAR for each airport code.

    Raises MetarServiceError when no codes are given or the API fails, and
    MalformedBatch when the response body is not a list of records.
    """
    codes = _clean_codes(codes)
    if not codes:
        raise MetarServiceError("No airports selected")

    http = session or requests
    params = {"ids": ",".join(codes), "format": "json", "taf": "false"}
    logger.info(f"🌐 Fetching METARs for {len(codes)} airports: {params['ids']}")

    try:
        r = http.get(config.METAR_API_URL, params=params, timeout=config.HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        logger.error(f"❌ METAR request failed: {e}")
        raise MetarServiceError(f"Network error: {e}") from e

    if r.status_code == 204:
        return []
    if r.status_code != 200:
        logger.error(f"❌ METAR API Error {r.status_code}: {r.text}")
        raise MetarServiceError(f"HTTP error: {r.status_code}")

    # the API answers an unknown station list with an empty body
    if not r.text.strip():
        return []
    return decode_batch(r.text)


class MetarService:
    """Keeps the latest normalized observations for the tracked airports.

    Each successful refresh replaces the whole set; a failed refresh keeps
    the previous set and records the reason in `last_error`. Scheduling
    refreshes every `config.REFRESH_INTERVAL_SECONDS` is up to the caller.
    """

    def __init__(self, airport_codes: AirportCodes = None, session=None, tz: Optional[tzinfo] = None):
        self._airport_codes = airport_codes
        self.session = session
        self.tz = tz
        self.observations: Tuple[NormalizedObservation, ...] = ()
        self.last_error: Optional[str] = None
        self.last_updated: Optional[datetime] = None

    def airport_codes(self) -> List[str]:
        codes = self._airport_codes() if callable(self._airport_codes) else self._airport_codes
        if codes is None:
            return list(config.DEFAULT_AIRPORTS)
        return list(codes)

    def refresh(self) -> bool:
        try:
            records = fetch_metars(self.airport_codes(), session=self.session)
        except MalformedBatch as e:
            return self._fail(f"Parsing error: {e}")
        except MetarServiceError as e:
            return self._fail(str(e))

        self.observations = tuple(normalize_batch(records, self.tz))
        self.last_error = None
        self.last_updated = datetime.now(timezone.utc)
        logger.info(f"✅ Refreshed {len(self.observations)} observations")
        return True

    def _fail(self, message: str) -> bool:
        self.last_error = message
        logger.warning(f"⚠️ METAR refresh failed, keeping {len(self.observations)} previous observations: {message}")
        return False

    def condensed_titles(self) -> List[str]:
        return [build_condensed_title(observation) for observation in self.observations]

    def primary_title(self) -> Optional[str]:
        if not self.observations:
            return None
        return build_condensed_title(self.observations[0])
