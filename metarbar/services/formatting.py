"""Presentation strings for decoded METAR fields.

Every formatter is total: absent input renders as a fixed sentinel
("Unknown", "Calm", "SKC") rather than raising.
"""

import re
import logging
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple

from metarbar.models.observation import NormalizedObservation
from metarbar.models.weather import CloudLayer, RawWeatherRecord, Visibility
from metarbar.services.flight_category import determine_flight_category, lowest_ceiling_layer

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
CALM = "Calm"
CLEAR_SKY = "SKC"

INHG_PER_HPA = 0.02953

# Weather group tokens, e.g. "-RA", "+TSRA", "SHRASN", "FZDZ"
_WEATHER_GROUP = re.compile(
    r"^(?P<intensity>[+-]|VC)?"
    r"(?P<descriptor>MI|PR|BC|DR|BL|SH|TS|FZ)?"
    r"(?P<precip>(?:DZ|RA|SN|SG|IC|PL|GR|GS|UP)+)$"
)


def format_wind(direction: Optional[str], speed: Optional[int], gust: Optional[int]) -> str:
    if direction is not None and not direction.strip():
        direction = None

    if not speed and direction is None:
        return CALM

    if direction is None or direction.strip().upper() in ("VRB", "VARIABLE"):
        direction_text = "Variable"
    elif direction.strip().isdecimal():
        direction_text = f"{int(direction):03d}°"
    else:
        direction_text = direction

    speed_text = f"{speed}kts" if speed is not None else "0kts"
    gust_text = f" G{gust}kts" if gust is not None else ""
    return f"{direction_text} @ {speed_text}{gust_text}"


def format_temperature(temperature: Optional[float], dewpoint: Optional[float]) -> str:
    temp_text = f"{temperature:.1f}°C" if temperature is not None else UNKNOWN
    dew_text = f"{dewpoint:.1f}°C" if dewpoint is not None else UNKNOWN
    return f"{temp_text} / {dew_text}"


def format_altimeter(altimeter: Optional[float]) -> str:
    if altimeter is None:
        return UNKNOWN
    # Anything above 100 is a hectopascal/millibar reading
    if altimeter > 100:
        altimeter = altimeter * INHG_PER_HPA
    return f"{altimeter:.2f} inHg"


def format_visibility(visibility: Optional[Visibility]) -> str:
    if visibility is None:
        return UNKNOWN
    return f"{visibility.canonical()}SM"


def format_cloud_layer(layer: CloudLayer) -> str:
    cover = layer.cover if layer.cover is not None else UNKNOWN
    if layer.base is None:
        return cover
    return f"{cover} {layer.base}ft"


def format_weather_conditions(cloud_layers: Optional[Sequence[CloudLayer]]) -> str:
    """Single-line sky summary: the lowest ceiling, else the highest layer."""
    if not cloud_layers:
        return CLEAR_SKY
    ceiling = lowest_ceiling_layer(cloud_layers)
    if ceiling is not None:
        return format_cloud_layer(ceiling)
    highest = max(cloud_layers, key=lambda layer: layer.base or 0)
    return format_cloud_layer(highest)


def format_cloud_layers(cloud_layers: Optional[Sequence[CloudLayer]]) -> List[str]:
    if not cloud_layers:
        return [CLEAR_SKY]
    ordered = sorted(cloud_layers, key=lambda layer: layer.base or 0)
    return [format_cloud_layer(layer) for layer in ordered]


def format_observation_time(epoch_seconds: Optional[int], tz: Optional[tzinfo] = None) -> Tuple[str, str]:
    """Render an observation timestamp as (local, zulu) strings.

    Local time uses `tz` when given, otherwise the host time zone:
    "MM.dd.yyyy HH:mm (PDT)". Zulu time is day-of-month, a literal Z and the
    UTC hour and minute: "12Z22:00".
    """
    if epoch_seconds is None:
        return UNKNOWN, UNKNOWN
    try:
        moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
        local = moment.astimezone(tz) if tz is not None else moment.astimezone()
    except (OverflowError, OSError, ValueError) as e:
        logger.debug(f"Cannot render observation time {epoch_seconds!r}: {e}")
        return UNKNOWN, UNKNOWN

    zone = local.tzname() or "Local"
    local_text = f"{local:%m.%d.%Y %H:%M} ({zone})"
    zulu_text = f"{moment:%d}Z{moment:%H:%M}"
    return local_text, zulu_text


def extract_additional_conditions(raw_text: Optional[str]) -> List[str]:
    """Rain reported in the body of a raw METAR.

    Only looks at weather groups before the remarks section and only reports
    rain, with its intensity when one is given.
    """
    if not raw_text:
        return []

    body = raw_text.split(" RMK", 1)[0]
    found = set()
    for token in body.split():
        match = _WEATHER_GROUP.match(token)
        if not match:
            continue
        precip = match.group("precip")
        codes = [precip[i:i + 2] for i in range(0, len(precip), 2)]
        if "RA" not in codes:
            continue
        found.add(match.group("intensity") or "")

    if "+" in found:
        return ["Heavy Rain"]
    if "-" in found:
        return ["Light Rain"]
    if found:
        return ["Rain"]
    return []


def normalize_record(record: RawWeatherRecord, tz: Optional[tzinfo] = None) -> NormalizedObservation:
    """Classify and format a decoded record into display strings."""
    local_time, zulu_time = format_observation_time(record.observation_epoch_seconds, tz)
    return NormalizedObservation(
        airport_code=record.identifier or UNKNOWN,
        airport_name=record.name or "",
        report_type=record.report_type or "METAR",
        flight_category=determine_flight_category(record.visibility, record.cloud_layers),
        weather_conditions=format_weather_conditions(record.cloud_layers),
        visibility=format_visibility(record.visibility),
        wind=format_wind(record.wind_direction, record.wind_speed_kts, record.wind_gust_kts),
        temperature=format_temperature(record.temperature_c, record.dewpoint_c),
        altimeter=format_altimeter(record.altimeter),
        observation_time=local_time,
        observation_time_zulu=zulu_time,
        additional_conditions=tuple(extract_additional_conditions(record.raw_text)),
        all_cloud_layers=tuple(format_cloud_layers(record.cloud_layers)),
    )


def normalize_batch(records: Iterable[RawWeatherRecord], tz: Optional[tzinfo] = None) -> List[NormalizedObservation]:
    return [normalize_record(record, tz) for record in records]
