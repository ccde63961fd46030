"""Mock ambient data for development.

Provides a reading source that generates realistic room conditions without
a sensor bridge. Used by the monitor and the web server when MOCK_SENSORS=1
is set.
"""

import random
from datetime import UTC, datetime

from plantwatch.lib.models import AmbientReading


def random_walk(
    current: float, drift: float, min_val: float, max_val: float
) -> float:
    """Generate next value using random walk with bounds."""
    change = random.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


class MockAmbientSource:
    """Mock ambient source that generates realistic readings per plant.

    - Brightness: drift=20, bounds 0-2000
    - Temperature: drift=0.15, bounds 15-30
    - Humidity: drift=0.3, bounds 30-70
    """

    def __init__(self) -> None:
        self._state: dict[int, tuple[float, float, float]] = {}

    def _initial(self) -> tuple[float, float, float]:
        return (
            random.uniform(300.0, 700.0),
            random.uniform(20.0, 23.0),
            random.uniform(45.0, 55.0),
        )

    async def get_ambient_reading(self, plant_id: int) -> AmbientReading:
        brightness, temperature, humidity = self._state.get(
            plant_id, self._initial()
        )
        brightness = random_walk(brightness, drift=20.0, min_val=0.0, max_val=2000.0)
        temperature = random_walk(temperature, drift=0.15, min_val=15.0, max_val=30.0)
        humidity = random_walk(humidity, drift=0.3, min_val=30.0, max_val=70.0)
        self._state[plant_id] = (brightness, temperature, humidity)

        return AmbientReading(
            brightness=round(brightness, 1),
            temperature=round(temperature, 1),
            humidity=round(humidity, 1),
            recording_time=datetime.now(UTC),
        )
