"""Per-plant condition evaluation.

Combines the ambient threshold checks and the aggregated moisture state of
one plant into zero or more alerts. The checker is pure: the same plant,
reading and moisture state always produce the same alerts, so the
scheduled scan and the on-demand API share one instance.
"""

from dataclasses import dataclass

from plantwatch.lib.config import Axis, MoistureState, ToleranceSettings
from plantwatch.lib.models import Alert, AmbientReading, Plant
from plantwatch.lib.moisture import moisture_message
from plantwatch.lib.thresholds import compare, threshold_message


@dataclass(frozen=True, slots=True)
class _AxisCheck:
    """Parameters for a single axis comparison."""

    axis: Axis
    value: float
    target: float
    slack: float

    def result(self) -> int:
        return compare(self.value, self.target, self.slack)


class PlantConditionChecker:
    """Turns one plant's conditions into alerts.

    Alerts are returned in a fixed order: brightness, temperature,
    humidity, moisture. At most one alert is produced per axis.
    """

    def __init__(self, tolerances: ToleranceSettings) -> None:
        self._tolerances = tolerances

    @property
    def tolerances(self) -> ToleranceSettings:
        return self._tolerances

    def _axis_checks(
        self, plant: Plant, reading: AmbientReading
    ) -> tuple[_AxisCheck, ...]:
        species = plant.species
        return (
            _AxisCheck(
                Axis.BRIGHTNESS,
                reading.brightness,
                species.perfect_light,
                self._tolerances.for_axis(Axis.BRIGHTNESS),
            ),
            _AxisCheck(
                Axis.TEMPERATURE,
                reading.temperature,
                species.perfect_temperature,
                self._tolerances.for_axis(Axis.TEMPERATURE),
            ),
            _AxisCheck(
                Axis.HUMIDITY,
                reading.humidity,
                species.perfect_humidity,
                self._tolerances.for_axis(Axis.HUMIDITY),
            ),
        )

    def _alert(self, plant: Plant, message: str) -> Alert:
        return Alert(
            plant_id=plant.plant_id,
            plant_name=plant.nickname,
            message=message,
        )

    def evaluate(
        self,
        plant: Plant,
        reading: AmbientReading | None,
        moisture_state: MoistureState | None,
    ) -> list[Alert]:
        """Evaluate a plant's conditions.

        Args:
            plant: The plant, with its species resolved.
            reading: Current ambient reading, or None when unavailable, in
                which case the brightness/temperature/humidity checks are
                skipped.
            moisture_state: Aggregated moisture state, or None when the
                plant has no moisture history, in which case the moisture
                check is skipped.

        Returns:
            Alerts for this plant, possibly empty.
        """
        alerts: list[Alert] = []

        if reading is not None:
            for check in self._axis_checks(plant, reading):
                sign = check.result()
                if sign != 0:
                    alerts.append(
                        self._alert(
                            plant,
                            threshold_message(check.axis, sign, plant.nickname),
                        )
                    )

        if moisture_state is not None:
            message = moisture_message(moisture_state, plant.nickname)
            if message is not None:
                alerts.append(self._alert(plant, message))

        return alerts
