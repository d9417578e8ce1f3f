import re
from typing import List

from metarbar.models.observation import NormalizedObservation
from metarbar.services.flight_category import CEILING_COVERS
from metarbar.services.formatting import CALM

SPECIAL_REPORT = "SPECI"
VISIBILITY_OMIT_ABOVE_SM = 9.0

# "240° @ 7kts", "Variable @ 3kts G12kts"
_WIND_PATTERN = re.compile(r"^(?P<direction>.+?) @ (?P<speed>\d+)kts(?: G(?P<gust>\d+)kts)?$")


def abbreviate_wind(wind: str) -> str:
    """Shorten a formatted wind string: "240° @ 7kts G25kts" -> "240°@7G25"."""
    if wind == CALM:
        return wind
    match = _WIND_PATTERN.match(wind)
    if not match:
        return wind

    direction = match.group("direction")
    if direction == "Variable":
        text = "VRB"
    elif direction.endswith("°") and direction[:-1].isdecimal():
        text = f"{int(direction[:-1]):03d}°"
    else:
        text = direction

    text += f"@{match.group('speed')}"
    if match.group("gust"):
        text += f"G{match.group('gust')}"
    return text


def shows_ceiling(weather_conditions: str) -> bool:
    cover = weather_conditions.split(" ", 1)[0]
    return cover in CEILING_COVERS


def should_omit_visibility(visibility: str) -> bool:
    """True when visibility is better than 9SM and not worth the space."""
    numeric = visibility.replace("SM", "").strip().rstrip("+")
    try:
        return float(numeric) > VISIBILITY_OMIT_ABOVE_SM
    except ValueError:
        return False


def build_condensed_title(observation: NormalizedObservation) -> str:
    """One-line label for narrow surfaces, e.g. "KBFI MVFR OVC 2100ft 210°@8 5SM"."""
    parts: List[str] = [observation.airport_code]
    if observation.report_type == SPECIAL_REPORT:
        parts.append(SPECIAL_REPORT)
    parts.append(observation.flight_category.value)
    if shows_ceiling(observation.weather_conditions):
        parts.append(observation.weather_conditions)
    parts.append(abbreviate_wind(observation.wind))
    if not should_omit_visibility(observation.visibility):
        parts.append(observation.visibility)
    return " ".join(parts)
