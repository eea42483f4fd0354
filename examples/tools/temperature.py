"""Local-only tool example for converting temperatures between units."""

from __future__ import annotations

from agents.tools.base import Tool

_UNITS = ("celsius", "fahrenheit", "kelvin")


class TemperatureConverterTool(Tool):
    """Simple in-process tool that performs temperature conversions."""

    name = "temperature_converter"
    description = "Convert temperature values between Celsius, Fahrenheit and Kelvin."
    parameters = {
        "value": {"type": "number", "description": "Temperature value to convert."},
        "from_unit": {"type": "string", "description": "Unit of the value: celsius, fahrenheit or kelvin."},
        "to_unit": {"type": "string", "description": "Unit to convert into.", "default": "celsius"},
    }
    required = ["value", "from_unit"]

    def call(self, value: float, from_unit: str, to_unit: str) -> str:
        from_unit, to_unit = str(from_unit).lower(), str(to_unit).lower()
        for unit in (from_unit, to_unit):
            if unit not in _UNITS:
                raise ValueError(f"Unknown unit '{unit}'. Use one of: {', '.join(_UNITS)}")

        celsius = _to_celsius(float(value), from_unit)
        converted = _from_celsius(celsius, to_unit)
        return f"{round(converted, 2)} {to_unit}"


def _to_celsius(value: float, unit: str) -> float:
    if unit == "fahrenheit":
        return (value - 32.0) * 5.0 / 9.0
    if unit == "kelvin":
        return value - 273.15
    return value


def _from_celsius(value: float, unit: str) -> float:
    if unit == "fahrenheit":
        return value * 9.0 / 5.0 + 32.0
    if unit == "kelvin":
        return value + 273.15
    return value
