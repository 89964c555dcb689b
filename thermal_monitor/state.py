"""Point-in-time snapshot of the thermal and performance state."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from thermal_monitor.modes import Mode, parse_mode_status
from thermal_monitor.sensors import Sensors
from thermal_monitor.thermal import ThermalZone, estimate_keyboard_temp

log = logging.getLogger(__name__)

# Fallbacks for failed reads
FALLBACK_CPU_TEMP = 50.0
FALLBACK_PERF_PCT = 50
FALLBACK_CUR_FREQ_MHZ = 1000
FALLBACK_MAX_FREQ_MHZ = 4400
FALLBACK_PROFILE = "unknown"

T = TypeVar("T")


@dataclass(frozen=True)
class ThermalState:
    """Complete thermal state at one sampling tick."""

    cpu_temp: float
    keyboard_temp: float
    ambient_temp: float
    perf_pct: int
    current_freq_mhz: int
    max_freq_mhz: int
    mode: Mode
    platform_profile: str
    fan_boost: bool

    @property
    def thermal_zone(self) -> ThermalZone:
        return ThermalZone.from_cpu_temp(self.cpu_temp)

    @property
    def current_freq_ghz(self) -> float:
        return self.current_freq_mhz / 1000.0

    @property
    def max_freq_ghz(self) -> float:
        return self.max_freq_mhz / 1000.0


def _read_or(name: str, read: Callable[[], T], fallback: T) -> T:
    """Run a sensor read, substituting the fallback on failure."""
    try:
        return read()
    except (OSError, ValueError) as e:
        log.debug("Reading %s failed (%s), using %r", name, e, fallback)
        return fallback


def read_state(sensors: Sensors) -> ThermalState:
    """Read a complete snapshot. Never raises: each field degrades on its own."""
    cpu_temp = _read_or("CPU temperature", sensors.read_cpu_temp, FALLBACK_CPU_TEMP)
    ambient_temp = sensors.read_ambient_temp()

    cur_freq_khz = _read_or("current frequency", sensors.read_current_freq_khz, None)
    max_freq_khz = _read_or("max frequency", sensors.read_max_freq_khz, None)
    mode_status = _read_or("mode status", sensors.read_mode_status, None)

    return ThermalState(
        cpu_temp=cpu_temp,
        keyboard_temp=estimate_keyboard_temp(cpu_temp, ambient_temp),
        ambient_temp=ambient_temp,
        perf_pct=_read_or("performance percentage", sensors.read_perf_pct, FALLBACK_PERF_PCT),
        current_freq_mhz=(
            cur_freq_khz // 1000 if cur_freq_khz is not None else FALLBACK_CUR_FREQ_MHZ
        ),
        max_freq_mhz=(
            max_freq_khz // 1000 if max_freq_khz is not None else FALLBACK_MAX_FREQ_MHZ
        ),
        mode=parse_mode_status(mode_status) if mode_status is not None else Mode.UNKNOWN,
        platform_profile=_read_or("platform profile", sensors.read_platform_profile,
                                  FALLBACK_PROFILE),
        fan_boost=_read_or("fan mode", sensors.read_fan_mode, 0) == 1,
    )
