"""Privileged actuation: fan mode, performance cap and CPU mode.

PkexecActuator shells out through pkexec; every request blocks until the
helper exits or the command timeout expires. Failures raise ActuationError
and are never retried here.
"""

import logging
import shlex
import subprocess
from typing import Protocol

from thermal_monitor.modes import Mode
from thermal_monitor.platforms import Platform

log = logging.getLogger(__name__)

PERF_MIN = 20
PERF_MAX = 100

DEFAULT_COMMAND_TIMEOUT = 10.0


class ActuationError(OSError):
    """A privileged request failed or could not be issued."""


class Actuator(Protocol):
    """Capability interface for changing the platform's operating parameters."""

    def set_fan_boost(self, enable: bool) -> None: ...

    def set_perf_pct(self, pct: int) -> None: ...

    def set_mode(self, mode: Mode) -> None: ...


def clamp_perf(pct: int) -> int:
    """Clamp a performance percentage to the operating range."""
    return max(PERF_MIN, min(PERF_MAX, pct))


class PkexecActuator:
    """Issues actuation requests as privileged external commands."""

    def __init__(
        self,
        platform: Platform,
        use_pkexec: bool = True,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
    ) -> None:
        self._platform = platform
        self._prefix = ["pkexec"] if use_pkexec else []
        self._timeout = timeout

    def _run(self, args: list[str], what: str) -> None:
        """Run a command, raising ActuationError with the helper's stderr on failure."""
        cmd = self._prefix + args
        log.debug("Running: %s", shlex.join(cmd))
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self._timeout, check=False,
            )
        except subprocess.TimeoutExpired:
            raise ActuationError(f"Failed to {what}: timed out after {self._timeout:.0f}s")
        except OSError as e:
            raise ActuationError(f"Failed to {what}: {e}") from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"exit status {result.returncode}"
            raise ActuationError(f"Failed to {what}: {reason}")

    def _shell(self, script: str, what: str) -> None:
        self._run(["sh", "-c", script], what)

    def set_fan_boost(self, enable: bool) -> None:
        """Switch the fan between boost (1) and automatic (0) mode."""
        if not self._platform.has_fan_control:
            raise ActuationError(f"Fan control not supported on {self._platform.name}")
        value = 1 if enable else 0
        path = shlex.quote(str(self._platform.fan_mode_path))
        self._shell(f"echo {value} > {path}", "set fan mode")
        log.info("Fan mode set to %s", "boost" if enable else "auto")

    def set_perf_pct(self, pct: int) -> None:
        """Set the CPU performance cap, clamped to [PERF_MIN, PERF_MAX].

        Tries intel_pstate, then amd_pstate, then scales every CPU's
        scaling_max_freq from cpuinfo_max_freq.
        """
        pct = clamp_perf(pct)
        p = self._platform
        cpu_root = shlex.quote(p.cpu_root)
        script = (
            f"{{ echo {pct} > {shlex.quote(str(p.intel_perf_path))}; }} 2>/dev/null || "
            f"{{ echo {pct} > {shlex.quote(str(p.amd_perf_path))}; }} 2>/dev/null || "
            f"for cpu in {cpu_root}/cpu*/cpufreq/scaling_max_freq; do "
            f"max=$(cat {shlex.quote(str(p.cpuinfo_max_freq_path))}); "
            f"echo $((max * {pct} / 100)) > \"$cpu\"; "
            f"done"
        )
        self._shell(script, "set performance")
        log.info("Performance cap set to %d%%", pct)

    def set_mode(self, mode: Mode) -> None:
        """Invoke the mode helper with the mode's command token."""
        self._run([self._platform.mode_helper, mode.command], "change mode")
        log.info("CPU mode set to %s", mode.label)
