import logging
from collections.abc import Mapping
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Any, Callable, List, Literal, Optional, Union

logger = logging.getLogger(__name__)


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass, JSON true/false is never a number here
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _best_effort(value: Any, coerce: Callable[[Any], Any], field: str) -> Any:
    """Coerce a raw field value, degrading to None instead of failing the record."""
    if value is None:
        return None
    result = coerce(value)
    if result is None:
        logger.debug(f"Dropping field '{field}': unexpected {type(value).__name__} value {value!r}")
    return result


class VisibilityText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    value: str

    def canonical(self) -> str:
        return self.value


class VisibilityInt(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["int"] = "int"
    value: int

    def canonical(self) -> str:
        return str(self.value)


class VisibilityFloat(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["float"] = "float"
    value: float

    def canonical(self) -> str:
        return str(self.value)


# Visibility arrives as "10+", 10 or 1.5 depending on the station; keep the
# original representation so the text form round-trips exactly.
Visibility = Annotated[Union[VisibilityText, VisibilityInt, VisibilityFloat], Field(discriminator="kind")]

_VISIBILITY_TYPES = (VisibilityText, VisibilityInt, VisibilityFloat)


def visibility_from_value(value: Any) -> Optional[Union[VisibilityText, VisibilityInt, VisibilityFloat]]:
    """Wrap a raw API visibility value: string first, then integer, then float."""
    if isinstance(value, _VISIBILITY_TYPES):
        return value
    if isinstance(value, str):
        return VisibilityText(value=value)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return VisibilityInt(value=value)
    if isinstance(value, float):
        return VisibilityFloat(value=value)
    return None


class CloudLayer(BaseModel):
    model_config = ConfigDict(frozen=True)

    cover: Optional[str] = None
    base: Optional[int] = None  # feet AGL

    @field_validator("cover", mode="before")
    @classmethod
    def _coerce_cover(cls, value, info):
        return _best_effort(value, _as_str, info.field_name)

    @field_validator("base", mode="before")
    @classmethod
    def _coerce_base(cls, value, info):
        return _best_effort(value, _as_int, info.field_name)


class RawWeatherRecord(BaseModel):
    """One METAR as delivered by the aviationweather.gov data API.

    Every field is optional and decoded on its own: a value of the wrong type
    becomes None without affecting the rest of the record.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    identifier: Optional[str] = Field(None, alias="icaoId")
    name: Optional[str] = None
    report_type: Optional[str] = Field(None, alias="metarType")
    raw_text: Optional[str] = Field(None, alias="rawOb")

    temperature_c: Optional[float] = Field(None, alias="temp")
    dewpoint_c: Optional[float] = Field(None, alias="dewp")
    altimeter: Optional[float] = Field(None, alias="altim")
    sea_level_pressure: Optional[float] = Field(None, alias="slp")
    latitude: Optional[float] = Field(None, alias="lat")
    longitude: Optional[float] = Field(None, alias="lon")

    wind_direction: Optional[str] = Field(None, alias="wdir")  # digits, or "VRB"
    wind_speed_kts: Optional[int] = Field(None, alias="wspd")
    wind_gust_kts: Optional[int] = Field(None, alias="wgst")
    elevation_ft: Optional[int] = Field(None, alias="elev")
    observation_epoch_seconds: Optional[int] = Field(None, alias="obsTime")

    visibility: Optional[Visibility] = Field(None, alias="visib")
    cloud_layers: Optional[List[CloudLayer]] = Field(None, alias="clouds")

    metar_id: Optional[int] = None
    receipt_time: Optional[str] = Field(None, alias="receiptTime")
    report_time: Optional[str] = Field(None, alias="reportTime")
    wx_string: Optional[str] = Field(None, alias="wxString")
    qc_field: Optional[int] = Field(None, alias="qcField")
    most_recent: Optional[int] = Field(None, alias="mostRecent")
    prior: Optional[int] = None

    @field_validator("identifier", "name", "report_type", "raw_text", "receipt_time", "report_time", "wx_string", mode="before")
    @classmethod
    def _coerce_str(cls, value, info):
        return _best_effort(value, _as_str, info.field_name)

    @field_validator("temperature_c", "dewpoint_c", "altimeter", "sea_level_pressure", "latitude", "longitude", mode="before")
    @classmethod
    def _coerce_float(cls, value, info):
        return _best_effort(value, _as_float, info.field_name)

    @field_validator(
        "wind_speed_kts", "wind_gust_kts", "elevation_ft", "observation_epoch_seconds",
        "metar_id", "qc_field", "most_recent", "prior",
        mode="before",
    )
    @classmethod
    def _coerce_int(cls, value, info):
        return _best_effort(value, _as_int, info.field_name)

    @field_validator("wind_direction", mode="before")
    @classmethod
    def _coerce_wind_direction(cls, value, info):
        def coerce(raw):
            if isinstance(raw, str):
                return raw
            degrees = _as_int(raw)
            return str(degrees) if degrees is not None else None

        return _best_effort(value, coerce, info.field_name)

    @field_validator("visibility", mode="before")
    @classmethod
    def _coerce_visibility(cls, value, info):
        return _best_effort(value, visibility_from_value, info.field_name)

    @field_validator("cloud_layers", mode="before")
    @classmethod
    def _coerce_cloud_layers(cls, value, info):
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            logger.debug(f"Dropping field '{info.field_name}': expected a list, got {type(value).__name__}")
            return None
        layers = []
        for item in value:
            if isinstance(item, CloudLayer):
                layers.append(item)
            elif isinstance(item, Mapping):
                layers.append(CloudLayer.model_validate(dict(item)))
            else:
                logger.debug(f"Skipping cloud layer entry: unexpected {type(item).__name__}")
        return layers
