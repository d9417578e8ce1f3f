import math
from typing import Optional, Sequence

from metarbar.models.observation import FlightCategory
from metarbar.models.weather import CloudLayer, Visibility

# Broken, overcast and obscured layers form a ceiling; FEW/SCT never do
CEILING_COVERS = frozenset({"BKN", "OVC", "OVX"})


def visibility_miles(visibility: Optional[Visibility]) -> float:
    """Visibility in statute miles for classification.

    "10+" counts as 10. Absent or unparsable visibility counts as 0.0, the
    most restrictive reading.
    """
    if visibility is None:
        return 0.0
    text = visibility.canonical().strip().rstrip("+")
    try:
        miles = float(text)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(miles) else miles


def lowest_ceiling_layer(cloud_layers: Optional[Sequence[CloudLayer]]) -> Optional[CloudLayer]:
    lowest = None
    for layer in cloud_layers or ():
        if layer.cover in CEILING_COVERS and layer.base is not None:
            if lowest is None or layer.base < lowest.base:
                lowest = layer
    return lowest


def ceiling_feet(cloud_layers: Optional[Sequence[CloudLayer]]) -> Optional[int]:
    """Lowest ceiling in feet AGL, or None when the ceiling is unlimited."""
    layer = lowest_ceiling_layer(cloud_layers)
    return layer.base if layer is not None else None


def classify(visibility_sm: float, ceiling_ft: Optional[int]) -> FlightCategory:
    """FAA flight category from visibility and ceiling (None = no ceiling)."""

    def below(limit: int) -> bool:
        return ceiling_ft is not None and ceiling_ft < limit

    if visibility_sm < 1.0 or below(500):
        return FlightCategory.LIFR
    if visibility_sm < 3.0 or below(1000):
        return FlightCategory.IFR
    # exactly 5 miles is still marginal
    if visibility_sm <= 5.0 or below(3000):
        return FlightCategory.MVFR
    return FlightCategory.VFR


def determine_flight_category(
    visibility: Optional[Visibility],
    cloud_layers: Optional[Sequence[CloudLayer]],
) -> FlightCategory:
    return classify(visibility_miles(visibility), ceiling_feet(cloud_layers))
