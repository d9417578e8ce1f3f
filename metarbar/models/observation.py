from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Tuple


class FlightCategory(str, Enum):
    VFR = "VFR"
    MVFR = "MVFR"
    IFR = "IFR"
    LIFR = "LIFR"

    @property
    def color(self) -> str:
        """Display color used for this category in the menu bar."""
        return CATEGORY_COLORS[self]


CATEGORY_COLORS = {
    FlightCategory.VFR: "#00FF00",   # green
    FlightCategory.MVFR: "#00CCFF",  # light blue
    FlightCategory.IFR: "#FF0000",   # red
    FlightCategory.LIFR: "#9900CC",  # purple
}


class NormalizedObservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    airport_code: str
    airport_name: str = ""
    report_type: str = "METAR"
    flight_category: FlightCategory
    weather_conditions: str
    visibility: str
    wind: str
    temperature: str
    altimeter: str
    observation_time: str
    observation_time_zulu: str
    additional_conditions: Tuple[str, ...] = ()
    all_cloud_layers: Tuple[str, ...] = ()
