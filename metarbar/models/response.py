from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from .observation import NormalizedObservation
from .airport import Airport


class ObservationView(NormalizedObservation):
    condensed_title: str
    category_color: str


class MetarResponse(BaseModel):
    observations: List[ObservationView]
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class TitleResponse(BaseModel):
    title: Optional[str] = None
    error: Optional[str] = None


class TrackedResponse(BaseModel):
    airports: List[Airport]
