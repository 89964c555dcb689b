"""Thermal control policy: a tiered proportional heuristic.

Each tick compares the CPU temperature with the target and picks the first
matching tier:

    diff > 10    CRITICAL   fan boost + 30% cap
    diff > 5     HIGH       fan boost + 50% cap
    diff > 0     ADJUST     cap scaled by target/current
    diff < -5    INCREASE   cap raised by 10 points
    otherwise    ON_TARGET  nothing to do

There is no integral or derivative term; the decision is re-evaluated from
scratch on every tick.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from thermal_monitor.actuator import PERF_MAX, ActuationError, Actuator, clamp_perf
from thermal_monitor.sensors import Sensors

log = logging.getLogger(__name__)

CRITICAL_MARGIN = 10.0
HIGH_MARGIN = 5.0
HEADROOM_MARGIN = 5.0

CRITICAL_PERF = 30
HIGH_PERF = 50
INCREASE_STEP = 10

# Assumed current cap when it cannot be read
DEFAULT_CURRENT_PERF = 75


class Tier(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    ADJUST = "adjust"
    INCREASE = "increase"
    ON_TARGET = "on_target"


@dataclass(frozen=True)
class ControlDecision:
    """Outcome of one policy evaluation."""

    tier: Tier
    perf_pct: int | None = None
    fan_boost: bool = False

    @property
    def message(self) -> str:
        if self.tier is Tier.CRITICAL:
            return f"CRITICAL: Fan boost + {self.perf_pct}%"
        if self.tier is Tier.HIGH:
            return f"HIGH: Fan boost + {self.perf_pct}%"
        if self.tier is Tier.ADJUST:
            return f"Adjusting to {self.perf_pct}%"
        if self.tier is Tier.INCREASE:
            return f"Increasing to {self.perf_pct}%"
        return "On target"

    @property
    def actuates(self) -> bool:
        return self.perf_pct is not None or self.fan_boost


def calc_perf_for_target(current_temp: float, target_temp: float, current_perf: int) -> int:
    """Estimate the performance cap that would bring the CPU to target.

    At or below target there is headroom: allow 10% more than now.
    Above target, scale the cap by target/current.
    The result is truncated and clamped to the operating range.
    """
    if current_temp <= target_temp:
        pct = int(min(current_perf * 1.1, float(PERF_MAX)))
    else:
        pct = int(current_perf * (target_temp / current_temp))
    return clamp_perf(pct)


def decide(current_temp: float, target_temp: float, current_perf: int) -> ControlDecision:
    """Pick the control tier for the current temperature."""
    diff = current_temp - target_temp

    if diff > CRITICAL_MARGIN:
        return ControlDecision(Tier.CRITICAL, perf_pct=CRITICAL_PERF, fan_boost=True)
    if diff > HIGH_MARGIN:
        return ControlDecision(Tier.HIGH, perf_pct=HIGH_PERF, fan_boost=True)
    if diff > 0:
        new_perf = calc_perf_for_target(current_temp, target_temp, current_perf)
        return ControlDecision(Tier.ADJUST, perf_pct=new_perf)
    if diff < -HEADROOM_MARGIN:
        return ControlDecision(Tier.INCREASE, perf_pct=clamp_perf(current_perf + INCREASE_STEP))
    return ControlDecision(Tier.ON_TARGET)


def apply_thermal_control(
    current_temp: float,
    target_temp: float,
    sensors: Sensors,
    actuator: Actuator,
) -> ControlDecision:
    """Decide and actuate one control step.

    A failed fan boost is logged and ignored so the cap still gets applied.
    A failed performance request raises ActuationError.
    """
    try:
        current_perf = sensors.read_perf_pct()
    except (OSError, ValueError) as e:
        log.debug("Could not read performance cap (%s), assuming %d%%", e, DEFAULT_CURRENT_PERF)
        current_perf = DEFAULT_CURRENT_PERF

    decision = decide(current_temp, target_temp, current_perf)
    log.debug(
        "Control: %.1f°C vs target %.1f°C at %d%% → %s",
        current_temp, target_temp, current_perf, decision.tier.value,
    )

    if decision.fan_boost:
        try:
            actuator.set_fan_boost(True)
        except ActuationError as e:
            log.warning("Fan boost request failed: %s", e)

    if decision.perf_pct is not None:
        actuator.set_perf_pct(decision.perf_pct)

    return decision
