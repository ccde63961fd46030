"""Windowed aggregation of soil moisture history."""

from collections.abc import Sequence

from plantwatch.lib.config import MoistureSettings, MoistureState
from plantwatch.lib.models import MoistureSample

_MESSAGES = {
    MoistureState.TOO_DRY: "{name}'s soil is too dry!",
    MoistureState.TOO_WET: "{name}'s soil is too wet!",
}


def average_moisture(samples: Sequence[MoistureSample]) -> float:
    """Arithmetic mean of the sample values.

    Raises:
        ValueError: If there are no samples.
    """
    if not samples:
        raise ValueError("Cannot average an empty moisture window")
    return sum(s.moisture for s in samples) / len(samples)


def aggregate(
    samples: Sequence[MoistureSample], bands: MoistureSettings
) -> MoistureState:
    """Summarize recent moisture samples into a categorical state.

    Args:
        samples: Most recent samples, newest first. Only the first
            ``bands.window`` samples are considered.
        bands: Band boundaries for too dry / too wet.

    Raises:
        ValueError: If there are no samples. Callers skip the moisture
            check for plants without history instead of calling this.
    """
    return bands.classify(average_moisture(samples[: bands.window]))


def moisture_message(state: MoistureState, nickname: str) -> str | None:
    """Render the alert message for a moisture state, None when OKAY."""
    template = _MESSAGES.get(state)
    return template.format(name=nickname) if template else None
