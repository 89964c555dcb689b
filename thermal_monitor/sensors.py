"""Sensor readings from sysfs, with psutil as a last resort for CPU temperature.

Every read method raises OSError (missing or unreadable file) or ValueError
(unparsable content) on failure; substituting fallbacks is the caller's job.
The one exception is read_ambient_temp(), which carries its own default.
"""

import logging
from pathlib import Path
from typing import Protocol

import psutil

from thermal_monitor.platforms import Platform

log = logging.getLogger(__name__)

DEFAULT_AMBIENT = 28.0

# Plausibility windows (°C, exclusive)
CPU_TEMP_RANGE = (0.0, 150.0)
AMBIENT_TEMP_RANGE = (15.0, 50.0)

# hwmon package labels, used when no thermal zone matches
_PACKAGE_LABELS = ("Package id 0", "Tctl", "Tdie")


class Sensors(Protocol):
    """Read-only view of the platform sensors."""

    def read_cpu_temp(self) -> float: ...

    def read_ambient_temp(self) -> float: ...

    def read_perf_pct(self) -> int: ...

    def read_current_freq_khz(self) -> int: ...

    def read_max_freq_khz(self) -> int: ...

    def read_mode_status(self) -> str: ...

    def read_platform_profile(self) -> str: ...

    def read_fan_mode(self) -> int: ...


def _read_value(path: str | Path) -> str:
    """Read a single sysfs value, stripped of surrounding whitespace."""
    return Path(path).read_text().strip()


def _read_millicelsius(path: str | Path) -> float:
    return int(_read_value(path)) / 1000.0


def _zone_index(zone_dir: Path) -> int:
    suffix = zone_dir.name[len("thermal_zone"):]
    return int(suffix) if suffix.isdigit() else -1


class SysfsSensors:
    """Reads thermal and CPU state for one platform."""

    def __init__(self, platform: Platform) -> None:
        self._platform = platform

    @property
    def platform(self) -> Platform:
        return self._platform

    def read_cpu_temp(self) -> float:
        """Read the CPU package temperature in degrees Celsius.

        Probes the platform's preferred zones first (value must be plausible),
        then any thermal zone whose type is a CPU package label, then the
        hwmon package sensors exposed by psutil.
        Raises OSError if no source is found.
        """
        low, high = CPU_TEMP_RANGE
        for path in self._platform.cpu_temp_paths:
            try:
                temp = _read_millicelsius(path)
            except (OSError, ValueError):
                continue
            if low < temp < high:
                return temp

        temp = self._scan_thermal_zones()
        if temp is not None:
            return temp

        temp = self._read_hwmon_package()
        if temp is not None:
            return temp

        raise OSError("No CPU temperature sensor found")

    def _scan_thermal_zones(self) -> float | None:
        zones = sorted(Path(self._platform.thermal_root).glob("thermal_zone*"), key=_zone_index)
        for zone in zones:
            try:
                zone_type = _read_value(zone / "type")
            except OSError:
                continue
            if zone_type not in self._platform.cpu_zone_types:
                continue
            try:
                temp = _read_millicelsius(zone / "temp")
            except (OSError, ValueError):
                continue
            log.debug("CPU temperature from %s (%s)", zone.name, zone_type)
            return temp
        return None

    def _read_hwmon_package(self) -> float | None:
        try:
            temps = psutil.sensors_temperatures()
        except (AttributeError, OSError) as e:
            log.debug("psutil.sensors_temperatures() failed: %s", e)
            return None

        for label in _PACKAGE_LABELS:
            for entries in temps.values():
                for entry in entries:
                    if entry.label == label and entry.current > 0:
                        return entry.current
        return None

    def read_ambient_temp(self) -> float:
        """Read the chassis/ambient temperature, DEFAULT_AMBIENT if implausible."""
        try:
            temp = _read_millicelsius(self._platform.ambient_temp_path)
        except (OSError, ValueError):
            return DEFAULT_AMBIENT

        low, high = AMBIENT_TEMP_RANGE
        if low < temp < high:
            return temp
        return DEFAULT_AMBIENT

    def read_perf_pct(self) -> int:
        """Read the current performance cap (intel_pstate, then amd_pstate)."""
        try:
            return int(_read_value(self._platform.intel_perf_path))
        except OSError:
            return int(_read_value(self._platform.amd_perf_path))

    def read_current_freq_khz(self) -> int:
        return int(_read_value(self._platform.cur_freq_path))

    def read_max_freq_khz(self) -> int:
        return int(_read_value(self._platform.max_freq_path))

    def read_mode_status(self) -> str:
        return _read_value(self._platform.mode_status_path)

    def read_platform_profile(self) -> str:
        return _read_value(self._platform.platform_profile_path)

    def read_fan_mode(self) -> int:
        """Read the fan mode: 0 = auto, 1 = boost."""
        if self._platform.fan_mode_path is None:
            raise OSError(f"{self._platform.name} has no fan mode endpoint")
        return int(_read_value(self._platform.fan_mode_path))
