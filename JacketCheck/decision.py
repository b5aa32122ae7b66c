"""Jacket decision engine - decides whether to bring a jacket and which one."""
import logging
import time
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional

from climate_zone import resolve_climate_zone
from reasoning import Branch, compose, rain_advice
from seasonal import SeasonalAdjustmentEstimator
from weather_data import WeatherSnapshot

WIND_CHILL_MAX_TEMP = 70
EVENING_START_HOUR = 18
MORNING_START_HOUR = 6
NOON_HOUR = 12
COLDER_LATER_DELTA = 5
RAINY_CHANCE = 50

JACKET_TYPES = {
    Branch.VERY_COLD: "Heavy jacket or coat",
    Branch.COLD: "Medium jacket",
    Branch.COOL: "Light jacket or sweater",
    Branch.WARM: None,
}


class Answer(str, Enum):
    YES = "YES"
    NO = "NO"


@dataclass(frozen=True)
class ThresholdSet:
    """Jacket boundaries (°F) plus the wind/drop constants the decision uses."""
    no_jacket: float = 75           # at or above = no jacket
    light_jacket: float = 60        # below = light jacket/sweater
    medium_jacket: float = 45       # below = medium jacket
    heavy_jacket: float = 45        # below = heavy jacket/coat
    significant_drop: float = 10    # °F drop over six hours worth flagging
    wind_chill_activation: float = 5  # mph where wind starts to bite
    high_wind: float = 15           # mph that counts as windy

    def shifted(self, delta: float) -> "ThresholdSet":
        """Shift the four jacket boundaries by delta; wind/drop constants stay put."""
        return replace(
            self,
            no_jacket=self.no_jacket + delta,
            light_jacket=self.light_jacket + delta,
            medium_jacket=self.medium_jacket + delta,
            heavy_jacket=self.heavy_jacket + delta,
        )


BASE_THRESHOLDS = ThresholdSet()


@dataclass(frozen=True)
class DecisionFactors:
    is_very_cold: bool
    is_cold: bool
    is_cool: bool
    is_warm: bool
    significant_drop: bool
    is_rainy: bool
    is_windy: bool
    is_evening: bool
    is_morning: bool
    will_get_colder: bool


@dataclass(frozen=True)
class Adjustments:
    climate: int
    seasonal: int
    total: int


@dataclass(frozen=True)
class DecisionResult:
    answer: Answer
    jacket_type: Optional[str]
    reasoning: str
    rain_advice: Optional[str]
    factors: DecisionFactors
    adjustments: Adjustments

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["answer"] = self.answer.value
        return data


def effective_temperature(temp: float, wind_speed: float, thresholds: ThresholdSet = BASE_THRESHOLDS) -> float:
    """
    Apply a coarse wind-chill adjustment.

    Below 70°F, every full 3 mph of wind above the activation speed takes one
    degree off. This is a rough comfort proxy, not the NWS wind chill formula.
    """
    if wind_speed >= thresholds.wind_chill_activation and temp < WIND_CHILL_MAX_TEMP:
        return temp - (wind_speed - thresholds.wind_chill_activation) // 3
    return temp


def compute_factors(snapshot: WeatherSnapshot, thresholds: ThresholdSet, local_hour: int) -> DecisionFactors:
    current = snapshot.current
    six_hour = snapshot.forecast.six_hour
    precipitation = snapshot.precipitation

    eff_temp = effective_temperature(current.temp, current.wind_speed, thresholds)
    temp_drop = current.temp - six_hour.temp

    return DecisionFactors(
        is_very_cold=eff_temp < thresholds.heavy_jacket,
        is_cold=eff_temp < thresholds.medium_jacket,
        is_cool=eff_temp < thresholds.light_jacket,
        is_warm=eff_temp >= thresholds.no_jacket,
        significant_drop=temp_drop >= thresholds.significant_drop,
        is_rainy=precipitation.is_raining or precipitation.chance > RAINY_CHANCE,
        is_windy=current.wind_speed >= thresholds.high_wind,
        is_evening=local_hour >= EVENING_START_HOUR or local_hour < MORNING_START_HOUR,
        is_morning=MORNING_START_HOUR <= local_hour < NOON_HOUR,
        will_get_colder=six_hour.temp < current.temp - COLDER_LATER_DELTA,
    )


def select_branch(factors: DecisionFactors) -> Branch:
    """First match wins: very cold, cold, cool, otherwise warm."""
    if factors.is_very_cold:
        return Branch.VERY_COLD
    if factors.is_cold:
        return Branch.COLD
    if factors.is_cool:
        return Branch.COOL
    return Branch.WARM


class JacketAdvisor:
    """
    Answers "should I bring a jacket?" for a weather snapshot.

    The advisor holds no state of its own; the only cache lives in the
    seasonal estimator it is given. Time of day comes from an explicit
    ``at`` argument or the injected clock, never from the wall clock directly.
    """

    def __init__(
        self,
        estimator: SeasonalAdjustmentEstimator,
        base_thresholds: ThresholdSet = BASE_THRESHOLDS,
        clock: Callable[[], float] = time.time
    ):
        self.estimator = estimator
        self.base_thresholds = base_thresholds
        self.clock = clock

    async def decide(self, snapshot: WeatherSnapshot, at: Optional[float] = None) -> DecisionResult:
        """
        Decide whether a jacket is needed.

        Args:
            snapshot: Current conditions, forecast, precipitation and location
            at: UNIX time the decision is for; defaults to the advisor's clock

        Returns:
            DecisionResult with answer, jacket type, reasoning and rain advice
        """
        location = snapshot.location
        climate = resolve_climate_zone(location)
        seasonal = await self.estimator.seasonal_bias(location.lat, location.lon)
        total = climate + seasonal
        thresholds = self.base_thresholds.shifted(total)

        local_hour = snapshot.local_hour(self.clock() if at is None else at)
        factors = compute_factors(snapshot, thresholds, local_hour)
        branch = select_branch(factors)
        jacket_type = JACKET_TYPES[branch]

        result = DecisionResult(
            answer=Answer.NO if jacket_type is None else Answer.YES,
            jacket_type=jacket_type,
            reasoning=compose(snapshot.current, snapshot.forecast, factors, branch, climate, seasonal),
            rain_advice=rain_advice(factors),
            factors=factors,
            adjustments=Adjustments(climate=climate, seasonal=seasonal, total=total),
        )
        logging.info(
            "Decision for %s: %s (%s), climate %+d°F, seasonal %+d°F",
            location.name,
            result.answer.value,
            branch.value,
            climate,
            seasonal,
        )
        return result
