"""Temperature unit helpers. Fahrenheit is the stored unit, Celsius is display only."""
import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_celsius(fahrenheit: float) -> int:
    """Convert Fahrenheit to whole degrees Celsius."""
    return round_half_up((fahrenheit - 32) * 5 / 9)


def to_fahrenheit(celsius: float) -> int:
    """Convert Celsius to whole degrees Fahrenheit."""
    return round_half_up(celsius * 9 / 5 + 32)
