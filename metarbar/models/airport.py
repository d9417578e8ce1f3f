from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Optional


class Airport(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    icao_id: str = Field(alias="icaoId")
    name: str = ""
    state: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    elev: Optional[float] = None
    iata_id: Optional[str] = Field(None, alias="iataId")
    faa_id: Optional[str] = Field(None, alias="faaId")
    priority: Optional[str] = None
    distance_mi: Optional[float] = None  # from the user's location, filled in by sort_by_distance

    @field_validator("icao_id")
    @classmethod
    def _normalize_icao(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("icaoId must not be empty")
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_blank(cls, value):
        return value if isinstance(value, str) else ""

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_text(cls, value):
        return None if value is None else str(value)

    @computed_field
    @property
    def display_name(self) -> str:
        return f"{self.icao_id} - {self.name.strip()}"

    @computed_field
    @property
    def formatted_distance(self) -> str:
        if self.distance_mi is None:
            return "Unknown"
        return f"{self.distance_mi:.1f} mi"

    def __eq__(self, other):
        return isinstance(other, Airport) and self.icao_id == other.icao_id

    def __hash__(self):
        return hash(self.icao_id)
