"""Main daemon entry point: periodic sampling and thermal control loop."""

import logging
import signal
import sys
import time

from thermal_monitor.actuator import PkexecActuator
from thermal_monitor.config import Config
from thermal_monitor.modes import Mode
from thermal_monitor.monitor import ThermalMonitor
from thermal_monitor.platforms import load_platform
from thermal_monitor.sensors import SysfsSensors
from thermal_monitor.state import ThermalState

log = logging.getLogger(__name__)


def format_state(state: ThermalState, target_temp: float) -> str:
    """Render a snapshot as a short multi-line report."""
    zone = state.thermal_zone
    lines = [
        f"CPU:         {state.cpu_temp:.1f}°C ({zone.label})",
        f"Keyboard:    ~{state.keyboard_temp:.1f}°C",
        f"Ambient:     {state.ambient_temp:.1f}°C",
        f"Performance: {state.perf_pct}%",
        f"Frequency:   {state.current_freq_ghz:.2f} / {state.max_freq_ghz:.2f} GHz",
        f"Mode:        {state.mode.label} ({state.mode.description})",
        f"Profile:     {state.platform_profile}",
        f"Fan:         {'BOOST' if state.fan_boost else 'AUTO'}",
    ]
    if state.cpu_temp > target_temp:
        lines.append(f"Target:      {target_temp:.0f}°C (+{state.cpu_temp - target_temp:.1f}°C)")
    else:
        lines.append(f"Target:      {target_temp:.0f}°C (OK)")
    return "\n".join(lines)


class Daemon:
    """Main daemon that ties together sampling, history and thermal control."""

    def __init__(
        self,
        config: Config,
        monitor: ThermalMonitor | None = None,
        argv: list[str] | None = None,
    ) -> None:
        self._config = config
        # Command-line overrides survive a reload
        self._argv = list(argv) if argv is not None else []
        if monitor is None:
            platform = load_platform(config.platform)
            monitor = ThermalMonitor(
                SysfsSensors(platform),
                PkexecActuator(platform, config.use_pkexec, config.command_timeout),
                target_temp=config.target_temp,
                auto_control=config.auto_control,
                history_capacity=config.history_capacity,
                status_timeout=config.status_timeout,
            )
        self._monitor = monitor
        self._running = True

    @property
    def monitor(self) -> ThermalMonitor:
        return self._monitor

    def _on_shutdown(self, signum: int, _frame: object) -> None:
        sig_name = signal.Signals(signum).name
        log.info("Received %s, shutting down", sig_name)
        self._running = False

    def _on_reload(self, _signum: int, _frame: object) -> None:
        log.info("Received SIGHUP, reloading configuration")
        try:
            config = Config.load(self._argv)
        except ValueError as e:
            log.error("Failed to reload configuration: %s", e)
            return

        self._config = config
        self._monitor.set_target_temp(config.target_temp)
        if self._monitor.auto_control != config.auto_control:
            self._monitor.toggle_auto_control()
        log.info(
            "Configuration reloaded: target=%.1f°C, auto_control=%s",
            config.target_temp, config.auto_control,
        )

    def _safe_shutdown(self) -> None:
        """Return the fan to automatic mode if we boosted it."""
        if not (self._config.restore_fan_on_exit and self._monitor.fan_boost_requested):
            return

        if not self._monitor.set_fan_boost(False):
            log.warning("Failed to restore fan mode on shutdown")

    def _wait(self, seconds: float) -> None:
        """Sleep in small increments so we can respond to signals promptly."""
        end = time.monotonic() + seconds
        while self._running and time.monotonic() < end:
            time.sleep(min(0.5, end - time.monotonic()))

    def run(self) -> None:
        """Main loop: sample, record, and apply thermal control if enabled."""
        log.info(
            "Starting daemon with platform=%s, target=%.1f°C, auto_control=%s, "
            "poll_interval=%.1fs, history=%d samples",
            self._config.platform,
            self._monitor.target_temp,
            self._monitor.auto_control,
            self._config.poll_interval,
            self._monitor.history.capacity,
        )

        signal.signal(signal.SIGTERM, self._on_shutdown)
        signal.signal(signal.SIGINT, self._on_shutdown)
        signal.signal(signal.SIGHUP, self._on_reload)

        while self._running:
            self._wait(self._config.poll_interval)
            if not self._running:
                break
            self._monitor.tick()

        self._safe_shutdown()
        log.info("Daemon stopped")


def _run_action(config: Config, monitor: ThermalMonitor) -> int:
    """Run a one-shot CLI action. Returns the process exit code."""
    if config.set_mode is not None:
        ok = monitor.change_mode(Mode.from_command(config.set_mode))
    elif config.fan_boost is not None:
        ok = monitor.set_fan_boost(config.fan_boost)
    else:
        print(format_state(monitor.state, monitor.target_temp))
        return 0

    message = monitor.status_text()
    if message:
        print(message, file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


def main() -> None:
    """Entry point."""
    argv = sys.argv[1:]
    try:
        config = Config.load(argv)
    except SystemExit as e:
        if not e.code:
            raise
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    config.setup_logging()
    daemon = Daemon(config, argv=argv)

    if config.show_status or config.set_mode is not None or config.fan_boost is not None:
        sys.exit(_run_action(config, daemon.monitor))

    daemon.run()


if __name__ == "__main__":
    main()
