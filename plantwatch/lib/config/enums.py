"""Enumerations for the Plantwatch application."""

from enum import StrEnum


class Axis(StrEnum):
    """Ambient measurement axes checked against species ideals."""

    BRIGHTNESS = "brightness"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"


class MoistureState(StrEnum):
    """Categorical summary of a plant's recent soil moisture."""

    TOO_DRY = "too_dry"
    OKAY = "okay"
    TOO_WET = "too_wet"
