"""
Unit resolution for human-readable magnitudes.

Lengths resolve to metres and weights to kilograms:

    parse("10cm")  -> 0.1
    parse("2.5kg") -> 2.5
    parse(3)       -> 3.0   (bare numbers are already canonical)
"""

import re

from .errors import UnitsError

# Multipliers into the canonical unit of each kind
UNIT_MULTIPLIERS: dict[str, float] = {
    # Lengths (metres)
    "mm": 0.001,
    "cm": 0.01,
    "m": 1.0,
    "km": 1000.0,
    # Weights (kilograms)
    "g": 0.001,
    "kg": 1.0,
}

_MAGNITUDE_RE = re.compile(r"^\s*(?P<value>[-+]?\d*\.?\d+)\s*(?P<unit>[a-zA-Z]+)\s*$")


def parse(value: str | int | float) -> float:
    """
    Parse a magnitude into its canonical numeric value.

    Raises:
        UnitsError: if the string has no recognised unit or no numeric part
    """
    if isinstance(value, bool):
        raise UnitsError(f"Could not parse magnitude from {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    match = _MAGNITUDE_RE.match(str(value))
    if not match:
        raise UnitsError(f"Could not parse magnitude from '{value}'")

    unit = match.group("unit").lower()
    multiplier = UNIT_MULTIPLIERS.get(unit)
    if multiplier is None:
        raise UnitsError(f"Could not find units from string '{value}'")
    return float(match.group("value")) * multiplier
