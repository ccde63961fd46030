"""Centralized configuration for the Plantwatch application.

This package provides:
- Enums for measurement axes and moisture states
- Pydantic settings models for configuration
"""

from .enums import Axis, MoistureState
from .settings import (
    EventBusSettings,
    MoistureSettings,
    SchedulerSettings,
    Settings,
    ToleranceSettings,
    get_settings,
)

__all__ = [
    # Enums
    "Axis",
    "MoistureState",
    # Settings models
    "EventBusSettings",
    "MoistureSettings",
    "SchedulerSettings",
    "Settings",
    "ToleranceSettings",
    # Functions
    "get_settings",
]
