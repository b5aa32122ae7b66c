"""Human-readable explanations for jacket decisions."""
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from climate_zone import COLD_ZONE_BIAS, WARM_ZONE_BIAS
from weather_data import CurrentConditions, Forecast

if TYPE_CHECKING:
    from decision import DecisionFactors

SEASONAL_COMMENT_THRESHOLD = 5


class Branch(Enum):
    """Temperature severity category driving the recommendation."""
    VERY_COLD = "very-cold"
    COLD = "cold"
    COOL = "cool"
    WARM = "warm"


def compose(
    current: CurrentConditions,
    forecast: Forecast,
    factors: "DecisionFactors",
    branch: Branch,
    climate_bias: int,
    seasonal_bias: int
) -> str:
    """
    Build the reasoning text for a decision branch.

    Fragments are joined with ", " in a fixed order: the temperature clause,
    wind and outlook clauses, regional commentary, seasonal commentary.

    Args:
        current: Current conditions
        forecast: Short-range forecast
        factors: Derived decision factors
        branch: Selected branch
        climate_bias: Regional bias that was applied (°F)
        seasonal_bias: Seasonal bias that was applied (°F)

    Returns:
        Reasoning string, e.g. "It's 40°F, and windy (20 mph)"
    """
    parts: List[str] = []
    temp = current.temp
    wind = current.wind_speed

    if branch is Branch.VERY_COLD:
        parts.append(f"It's {temp}°F")
        if factors.is_windy:
            parts.append(f"and windy ({wind} mph)")
        if factors.will_get_colder:
            parts.append(f"dropping to {forecast.six_hour.temp}°F later")
    elif branch is Branch.COLD:
        parts.append(f"It's {temp}°F")
        if factors.is_windy:
            parts.append(f"and breezy ({wind} mph)")
        if factors.will_get_colder:
            parts.append(f"dropping to {forecast.six_hour.temp}°F later")
    elif branch is Branch.COOL:
        parts.append(f"It's a cool {temp}°F")
        if factors.is_windy:
            parts.append(f"with some wind ({wind} mph)")
        if factors.will_get_colder:
            parts.append("getting cooler later")
    else:
        parts.append(f"It's {temp}°F and comfortable")
        if not factors.will_get_colder:
            parts.append("staying warm through the day")

    if climate_bias == WARM_ZONE_BIAS and branch is not Branch.WARM:
        parts.append("but locals in warm climates tend to bundle up at this temperature")
    elif climate_bias == COLD_ZONE_BIAS and branch is Branch.WARM:
        parts.append("and people here are used to much colder weather")

    if abs(seasonal_bias) > SEASONAL_COMMENT_THRESHOLD:
        if seasonal_bias > 0:
            parts.append("It's been very cold lately, so this feels warmer than usual")
        else:
            parts.append("It's been very warm lately, so this feels cooler than usual")

    return ", ".join(parts)


def rain_advice(factors: "DecisionFactors") -> Optional[str]:
    """Rain note shown alongside the answer; it never changes the answer itself."""
    if not factors.is_rainy:
        return None
    if factors.is_very_cold or factors.is_cold:
        return "Rain expected - consider waterproof jacket"
    if factors.is_cool:
        return "Rain expected - light rain gear recommended"
    return "Rain expected - no jacket needed for warmth, but consider rain gear"
