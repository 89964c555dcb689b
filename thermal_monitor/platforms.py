"""Laptop platform definitions.

Each Platform instance encapsulates the sysfs endpoints and helper commands
for one laptop family. Platform data is loaded from platforms.yaml; the active
platform is selected by name via the PLATFORM config parameter.
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

_PLATFORMS_FILE = Path(__file__).parent / "platforms.yaml"

DEFAULT_PLATFORM_KEY = "lenovo-ideapad"


@dataclass(frozen=True)
class Platform:
    """Sensor and actuator endpoints for a laptop model."""

    name: str

    # CPU temperature probing: preferred paths first, then a scan by zone type
    cpu_temp_paths: tuple[str, ...]
    thermal_root: str
    cpu_zone_types: tuple[str, ...]

    ambient_temp_path: str
    cpu_root: str
    mode_status_path: str
    platform_profile_path: str
    fan_mode_path: str | None
    mode_helper: str

    @property
    def intel_perf_path(self) -> Path:
        return Path(self.cpu_root) / "intel_pstate" / "max_perf_pct"

    @property
    def amd_perf_path(self) -> Path:
        return Path(self.cpu_root) / "amd_pstate" / "max_perf_pct"

    @property
    def cur_freq_path(self) -> Path:
        return Path(self.cpu_root) / "cpu0" / "cpufreq" / "scaling_cur_freq"

    @property
    def max_freq_path(self) -> Path:
        return Path(self.cpu_root) / "cpu0" / "cpufreq" / "scaling_max_freq"

    @property
    def cpuinfo_max_freq_path(self) -> Path:
        return Path(self.cpu_root) / "cpu0" / "cpufreq" / "cpuinfo_max_freq"

    @property
    def has_fan_control(self) -> bool:
        return self.fan_mode_path is not None


def _load_all() -> dict[str, dict]:
    """Load raw platform definitions from YAML."""
    with open(_PLATFORMS_FILE) as f:
        return yaml.safe_load(f)


def available_platforms() -> list[str]:
    """Return the list of available platform keys."""
    return list(_load_all().keys())


def load_platform(key: str) -> Platform:
    """Load a Platform instance by key from platforms.yaml.

    Raises KeyError if the key is not found.
    """
    platforms = _load_all()
    if key not in platforms:
        available = ", ".join(sorted(platforms.keys()))
        raise KeyError(f"Unknown platform '{key}'. Available: {available}")

    raw = dict(platforms[key])
    raw["cpu_temp_paths"] = tuple(raw["cpu_temp_paths"])
    raw["cpu_zone_types"] = tuple(raw["cpu_zone_types"])
    return Platform(**raw)
