"""Signed comparison of a measured value against a target with tolerance."""

import math

from plantwatch.lib.config import Axis

# Message templates keyed by (axis, sign of the deviation)
_MESSAGES: dict[tuple[Axis, int], str] = {
    (Axis.BRIGHTNESS, 1): "It's too bright for {name}!",
    (Axis.BRIGHTNESS, -1): "It's not bright enough for {name}!",
    (Axis.TEMPERATURE, 1): "It's too hot for {name}!",
    (Axis.TEMPERATURE, -1): "It's too cold for {name}!",
    (Axis.HUMIDITY, 1): "The humidity is too high for {name}!",
    (Axis.HUMIDITY, -1): "The humidity isn't high enough for {name}!",
}


def compare(value: float, target: float, slack: float) -> int:
    """Compare a value to a target with a tolerance band.

    Returns:
        0 when ``|value - target| <= slack``, +1 when the value is above
        ``target + slack`` and -1 when it is below ``target - slack``.

    Raises:
        ValueError: If any argument is NaN or infinite.
    """
    if not all(math.isfinite(x) for x in (value, target, slack)):
        raise ValueError(f"Cannot compare non-finite values: {value}, {target}, {slack}")
    if value > target + slack:
        return 1
    if value < target - slack:
        return -1
    return 0


def threshold_message(axis: Axis, sign: int, nickname: str) -> str:
    """Render the alert message for a non-zero comparison on an axis.

    Raises:
        ValueError: If sign is 0 (a value within tolerance has no message).
    """
    if sign == 0:
        raise ValueError(f"No message for {axis} within tolerance")
    return _MESSAGES[(axis, 1 if sign > 0 else -1)].format(name=nickname)
