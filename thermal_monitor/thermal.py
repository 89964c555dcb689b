"""Thermal zone classification and keyboard temperature estimation."""

from enum import Enum

# Keyboard estimate: T_kbd = T_amb + (T_cpu - T_amb) * THERMAL_ATTENUATION
THERMAL_ATTENUATION = 0.45


class ThermalZone(Enum):
    """Discrete severity band of the CPU temperature."""

    COOL = "COOL"
    COMFORT = "COMFORT"
    OPTIMAL = "OPTIMAL"
    WARM = "WARM"
    HOT = "HOT"
    CRITICAL = "CRITICAL"

    @classmethod
    def from_cpu_temp(cls, temp: float) -> "ThermalZone":
        """Classify a CPU temperature. Upper bounds belong to the next zone."""
        for upper, zone in _ZONE_UPPER_BOUNDS:
            if temp < upper:
                return zone
        return cls.CRITICAL

    @property
    def label(self) -> str:
        return self.value

    @property
    def color_rgb(self) -> tuple[int, int, int]:
        """Display colour for gauges and plots."""
        return _ZONE_COLORS[self]


_ZONE_UPPER_BOUNDS: tuple[tuple[float, ThermalZone], ...] = (
    (40.0, ThermalZone.COOL),
    (45.0, ThermalZone.COMFORT),
    (50.0, ThermalZone.OPTIMAL),
    (55.0, ThermalZone.WARM),
    (65.0, ThermalZone.HOT),
)

_ZONE_COLORS: dict[ThermalZone, tuple[int, int, int]] = {
    ThermalZone.COOL: (100, 200, 255),      # light blue
    ThermalZone.COMFORT: (100, 220, 100),   # green
    ThermalZone.OPTIMAL: (150, 220, 100),   # light green
    ThermalZone.WARM: (255, 200, 100),      # yellow
    ThermalZone.HOT: (255, 150, 100),       # orange
    ThermalZone.CRITICAL: (255, 100, 100),  # red
}


def classify(cpu_temp: float) -> ThermalZone:
    """Return the thermal zone for a CPU temperature in °C."""
    return ThermalZone.from_cpu_temp(cpu_temp)


def estimate_keyboard_temp(cpu_temp: float, ambient_temp: float) -> float:
    """Estimate the keyboard surface temperature.

    Single-parameter lumped model: the CPU-to-ambient delta is damped by
    THERMAL_ATTENUATION. At cpu_temp == ambient_temp the estimate is ambient.
    No bounds checking is done on the inputs.
    """
    return ambient_temp + (cpu_temp - ambient_temp) * THERMAL_ATTENUATION
