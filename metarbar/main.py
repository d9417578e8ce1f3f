import logging
from typing import List, Optional

from metarbar import config

config.configure_logging()
logger = logging.getLogger(__name__)

logger.info("🔧 Configuration:")
logger.info(f"   METAR_API_URL: {config.METAR_API_URL}")
logger.info(f"   AIRPORT_API_URL: {config.AIRPORT_API_URL}")
logger.info(f"   DEFAULT_AIRPORTS: {', '.join(config.DEFAULT_AIRPORTS)}")

from fastapi import FastAPI, HTTPException
from metarbar.errors import MalformedBatch, MetarServiceError
from metarbar.models.airport import Airport
from metarbar.models.observation import NormalizedObservation
from metarbar.models.response import MetarResponse, ObservationView, TitleResponse, TrackedResponse
from metarbar.services.airports import TrackedAirports, fetch_airports, sort_by_distance
from metarbar.services.condensed import build_condensed_title
from metarbar.services.formatting import normalize_batch
from metarbar.services.weather import MetarService, fetch_metars

app = FastAPI(
    title="METAR Menubar",
    description="Flight categories and condensed METAR summaries for tracked airports",
    version="1.0.0",
)

# In-memory selection; the refresh service follows it on every refresh
tracked = TrackedAirports.from_codes(config.DEFAULT_AIRPORTS)
service = MetarService(airport_codes=tracked.codes)


def _split_ids(ids: Optional[str]) -> List[str]:
    if not ids:
        return []
    return [code.upper() for code in ids.replace(",", " ").split()]


def _view(observation: NormalizedObservation) -> ObservationView:
    return ObservationView(
        **observation.model_dump(),
        condensed_title=build_condensed_title(observation),
        category_color=observation.flight_category.color,
    )


@app.get("/")
def health():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "METAR Menubar",
        "version": "1.0.0",
        "tracked_airports": len(tracked),
    }


@app.get("/metars", response_model=MetarResponse)
def get_metars(ids: Optional[str] = None):
    """Observations for the given ICAO codes, or a refresh of the tracked airports.

    Without `ids` the shared service refreshes; if that fails the previous
    observations are returned together with the error.
    """
    codes = _split_ids(ids)
    if not codes:
        service.refresh()
        return MetarResponse(
            observations=[_view(o) for o in service.observations],
            error=service.last_error,
            last_updated=service.last_updated,
        )

    try:
        records = fetch_metars(codes, session=service.session)
    except MalformedBatch as e:
        raise HTTPException(status_code=502, detail=f"Parsing error: {e}")
    except MetarServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return MetarResponse(observations=[_view(o) for o in normalize_batch(records, service.tz)])


@app.get("/metars/title", response_model=TitleResponse)
def get_title(ids: Optional[str] = None):
    """Condensed title of the first airport, for the status bar.

    Without `ids` the tracked airports are refreshed first.
    """
    codes = _split_ids(ids)
    if not codes:
        service.refresh()
        return TitleResponse(title=service.primary_title(), error=service.last_error)

    try:
        records = fetch_metars(codes, session=service.session)
    except MalformedBatch as e:
        raise HTTPException(status_code=502, detail=f"Parsing error: {e}")
    except MetarServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    observations = normalize_batch(records, service.tz)
    title = build_condensed_title(observations[0]) if observations else None
    return TitleResponse(title=title)


@app.get("/airports", response_model=List[Airport])
def get_airports(states: Optional[str] = None, lat: Optional[float] = None, lon: Optional[float] = None):
    groups = _split_ids(states) or None
    try:
        airports = fetch_airports(groups, session=service.session)
    except MetarServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if lat is not None and lon is not None:
        airports = sort_by_distance(airports, (lat, lon))
    return airports


@app.get("/tracked", response_model=TrackedResponse)
def get_tracked():
    return TrackedResponse(airports=tracked.airports)


@app.post("/tracked/{code}", response_model=TrackedResponse)
def add_tracked(code: str):
    if not code.strip():
        raise HTTPException(status_code=400, detail="Airport code required")
    if tracked.add(code):
        logger.info(f"➕ Tracking {code.upper()}")
    return TrackedResponse(airports=tracked.airports)


@app.delete("/tracked/{code}", response_model=TrackedResponse)
def remove_tracked(code: str):
    if not tracked.remove(code):
        raise HTTPException(status_code=404, detail=f"{code.upper()} is not tracked")
    logger.info(f"➖ Stopped tracking {code.upper()}")
    return TrackedResponse(airports=tracked.airports)
