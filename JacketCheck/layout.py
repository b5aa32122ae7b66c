"""Text layout for jacket decisions - pure functions for testability."""
from typing import List

from decision import Answer, DecisionResult
from units import to_celsius
from weather_data import WeatherSnapshot


def format_temperature(temp_f: float, units: str = "imperial") -> str:
    """
    Format a Fahrenheit temperature in the requested units.

    Args:
        temp_f: Temperature in Fahrenheit
        units: "imperial" for °F, "metric" for °C

    Returns:
        String such as "72°F" or "22°C"
    """
    if units == "metric":
        return f"{to_celsius(temp_f)}°C"
    return f"{int(temp_f)}°F"


def get_condition_text(conditions: str) -> str:
    """
    Get short text representation of weather condition.

    Args:
        conditions: Condition label, e.g. "Clouds"

    Returns:
        Short condition string (e.g., "Cloudy", "Rain", "Clear")
    """
    main = (conditions or "").lower()

    # Map common conditions to short display strings
    condition_map = {
        "clear": "Clear",
        "clouds": "Cloudy",
        "rain": "Rain",
        "drizzle": "Drizzle",
        "thunderstorm": "Storm",
        "snow": "Snow",
        "fog": "Fog",
    }

    return condition_map.get(main, (conditions or "Unknown").capitalize())


def format_decision_lines(snapshot: WeatherSnapshot, result: DecisionResult, units: str = "imperial") -> List[str]:
    """
    Lay out a decision as lines of text.

    Temperatures quoted inside the reasoning stay in °F; the summary lines
    follow ``units``.
    """
    current = snapshot.current
    six_hour = snapshot.forecast.six_hour

    headline = "YES - bring a jacket" if result.answer is Answer.YES else "NO - no jacket needed"
    lines = [
        snapshot.location.name,
        headline,
    ]
    if result.jacket_type:
        lines.append(f"Recommended: {result.jacket_type}")
    lines.append(result.reasoning)
    if result.rain_advice:
        lines.append(result.rain_advice)

    lines.append(
        f"Now {format_temperature(current.temp, units)} "
        f"(feels {format_temperature(current.feels_like, units)}), "
        f"{get_condition_text(current.conditions)}, wind {current.wind_speed} mph"
    )
    lines.append(
        f"In 6h {format_temperature(six_hour.temp, units)}, {get_condition_text(six_hour.conditions)}, "
        f"{int(snapshot.precipitation.chance)}% chance of rain"
    )
    return lines
