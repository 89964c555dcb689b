"""In-memory sensor and actuator fakes shared by the tests."""

from dataclasses import dataclass, field

import pytest

from thermal_monitor.actuator import ActuationError
from thermal_monitor.modes import Mode


@dataclass
class FakeSensors:
    """Sensor set backed by plain attributes. None means the read fails."""

    cpu_temp: float | None = 50.0
    ambient_temp: float = 28.0
    perf_pct: int | None = 75
    cur_freq_khz: int | None = 2_500_000
    max_freq_khz: int | None = 4_400_000
    mode_status: str | None = "balanced"
    platform_profile: str | None = "balanced"
    fan_mode: int | None = 0

    @staticmethod
    def _value(value):
        if value is None:
            raise OSError("sensor unavailable")
        return value

    def read_cpu_temp(self) -> float:
        return self._value(self.cpu_temp)

    def read_ambient_temp(self) -> float:
        return self.ambient_temp

    def read_perf_pct(self) -> int:
        return self._value(self.perf_pct)

    def read_current_freq_khz(self) -> int:
        return self._value(self.cur_freq_khz)

    def read_max_freq_khz(self) -> int:
        return self._value(self.max_freq_khz)

    def read_mode_status(self) -> str:
        return self._value(self.mode_status)

    def read_platform_profile(self) -> str:
        return self._value(self.platform_profile)

    def read_fan_mode(self) -> int:
        return self._value(self.fan_mode)


@dataclass
class RecordingActuator:
    """Records every request; the fail_* flags make the matching call raise."""

    calls: list[tuple[str, object]] = field(default_factory=list)
    fail_fan: bool = False
    fail_perf: bool = False
    fail_mode: bool = False

    def set_fan_boost(self, enable: bool) -> None:
        if self.fail_fan:
            raise ActuationError("Failed to set fan mode: permission denied")
        self.calls.append(("fan", enable))

    def set_perf_pct(self, pct: int) -> None:
        if self.fail_perf:
            raise ActuationError("Failed to set performance: permission denied")
        self.calls.append(("perf", pct))

    def set_mode(self, mode: Mode) -> None:
        if self.fail_mode:
            raise ActuationError("Failed to change mode: helper not found")
        self.calls.append(("mode", mode))


@pytest.fixture
def sensors() -> FakeSensors:
    return FakeSensors()


@pytest.fixture
def actuator() -> RecordingActuator:
    return RecordingActuator()
