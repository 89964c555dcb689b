"""Application controller: owns the snapshot, history and user settings."""

import logging
import time
from collections.abc import Callable

from thermal_monitor.actuator import ActuationError, Actuator
from thermal_monitor.history import HISTORY_CAPACITY, TemperatureHistory
from thermal_monitor.modes import Mode
from thermal_monitor.policy import ControlDecision, apply_thermal_control
from thermal_monitor.sensors import Sensors
from thermal_monitor.state import ThermalState, read_state
from thermal_monitor.status import STATUS_TIMEOUT, StatusMessage

log = logging.getLogger(__name__)

TARGET_TEMP_RANGE = (40.0, 80.0)
DEFAULT_TARGET_TEMP = 55.0


def validate_target_temp(temp: float) -> None:
    low, high = TARGET_TEMP_RANGE
    if not (low <= temp <= high):
        raise ValueError(f"Target temperature must be {low:.0f}-{high:.0f}°C, got {temp}")


class ThermalMonitor:
    """Runs the sample → history → control pipeline once per tick.

    Also handles the manual user actions (mode change, fan boost, auto control
    toggle). Everything runs on the caller's thread; there is one pending
    action at a time.
    """

    def __init__(
        self,
        sensors: Sensors,
        actuator: Actuator,
        target_temp: float = DEFAULT_TARGET_TEMP,
        auto_control: bool = False,
        history_capacity: int = HISTORY_CAPACITY,
        status_timeout: float = STATUS_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        validate_target_temp(target_temp)
        self._sensors = sensors
        self._actuator = actuator
        self._clock = clock
        self._status_timeout = status_timeout
        self._target_temp = target_temp
        self.auto_control = auto_control
        self.fan_boost_manual = False
        # Set once the daemon has requested boost, so shutdown can undo it
        self.fan_boost_requested = False
        self.status: StatusMessage | None = None

        self.history = TemperatureHistory(history_capacity)
        self.state: ThermalState = read_state(sensors)
        self.history.push(self.state.cpu_temp, self.state.keyboard_temp)

    @property
    def target_temp(self) -> float:
        return self._target_temp

    def set_target_temp(self, temp: float) -> None:
        validate_target_temp(temp)
        self._target_temp = temp

    @property
    def target_delta(self) -> float | None:
        """Degrees above target, or None when at or below it."""
        if self.state.cpu_temp > self._target_temp:
            return self.state.cpu_temp - self._target_temp
        return None

    def set_status(self, message: str) -> None:
        self.status = StatusMessage(message, self._clock())
        log.info("%s", message)

    def status_text(self) -> str | None:
        """The current status message, or None once it has expired."""
        if self.status is None:
            return None
        if self.status.is_expired(self._clock(), self._status_timeout):
            self.status = None
            return None
        return self.status.message

    def refresh(self) -> ThermalState:
        """Take a new snapshot and append it to the history."""
        self.state = read_state(self._sensors)
        self.history.push(self.state.cpu_temp, self.state.keyboard_temp)
        log.debug(
            "CPU %.1f°C, keyboard ~%.1f°C, ambient %.1f°C, %d%%, %s",
            self.state.cpu_temp,
            self.state.keyboard_temp,
            self.state.ambient_temp,
            self.state.perf_pct,
            self.state.thermal_zone.label,
        )
        return self.state

    def tick(self) -> ControlDecision | None:
        """One sampling tick. Returns the control decision, if control ran."""
        self.refresh()
        if not self.auto_control:
            return None

        try:
            decision = apply_thermal_control(
                self.state.cpu_temp, self._target_temp, self._sensors, self._actuator,
            )
        except ActuationError as e:
            log.warning("Thermal control failed: %s", e)
            self.set_status(f"Control error: {e}")
            return None

        if decision.fan_boost:
            self.fan_boost_requested = True
        if decision.actuates:
            self.set_status(decision.message)
        return decision

    def change_mode(self, mode: Mode) -> bool:
        """Switch the CPU mode and re-read the state on success."""
        try:
            self._actuator.set_mode(mode)
        except ActuationError as e:
            self.set_status(f"Error: {e}")
            return False

        self.set_status(f"Mode changed to {mode.label}")
        self.refresh()
        return True

    def toggle_auto_control(self) -> None:
        self.auto_control = not self.auto_control
        state = "ENABLED" if self.auto_control else "DISABLED"
        self.set_status(f"Auto thermal control {state}")

    def set_fan_boost(self, enable: bool) -> bool:
        """Request manual fan boost on or off. The flag only changes on success."""
        try:
            self._actuator.set_fan_boost(enable)
        except ActuationError as e:
            self.set_status(f"Fan error: {e}")
            return False

        self.fan_boost_manual = enable
        if enable:
            self.fan_boost_requested = True
        self.set_status("Fan BOOST activated" if enable else "Fan returned to AUTO")
        return True

    def toggle_fan_boost(self) -> bool:
        return self.set_fan_boost(not self.fan_boost_manual)
