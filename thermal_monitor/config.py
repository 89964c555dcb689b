"""Configuration parsing from /etc/default/thermal-monitor and CLI arguments."""

import argparse
import logging
import os
from dataclasses import dataclass

from dotenv import dotenv_values

from thermal_monitor.actuator import DEFAULT_COMMAND_TIMEOUT
from thermal_monitor.modes import Mode
from thermal_monitor.monitor import DEFAULT_TARGET_TEMP, validate_target_temp
from thermal_monitor.platforms import DEFAULT_PLATFORM_KEY, available_platforms
from thermal_monitor.status import STATUS_TIMEOUT

DEFAULT_CONFIG_PATH = "/etc/default/thermal-monitor"

_TRUE_VALUES = ("true", "1", "yes", "on")


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def _parse_on_off(raw: str) -> bool:
    """Parse an on/off switch value."""
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"Invalid switch value: {raw}. Must be on or off")


def _parse_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="thermal-monitor",
        description="Laptop thermal governor: keeps the CPU near a target temperature",
    )
    parser.add_argument(
        "--target-temp",
        type=float,
        help="Target CPU temperature in °C (40-80)",
    )
    parser.add_argument(
        "--auto-control",
        action="store_true",
        default=None,
        help="Enable automatic thermal control",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        help="Sampling interval in seconds",
    )
    parser.add_argument(
        "--history-window",
        type=float,
        help="Length of the temperature history in seconds",
    )
    parser.add_argument(
        "--status-timeout",
        type=float,
        help="Seconds a status message stays current",
    )
    parser.add_argument(
        "--command-timeout",
        type=float,
        help="Timeout for privileged commands in seconds",
    )
    parser.add_argument(
        "--platform",
        help="Platform key (see platforms.yaml)",
    )
    parser.add_argument(
        "--no-pkexec",
        action="store_true",
        default=None,
        help="Run actuation commands directly instead of through pkexec",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level (overrides config file)",
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--status",
        action="store_true",
        help="Print one thermal snapshot and exit",
    )
    actions.add_argument(
        "--set-mode",
        choices=[m.command for m in Mode.selectable()],
        help="Switch the CPU mode and exit",
    )
    actions.add_argument(
        "--fan-boost",
        choices=("on", "off"),
        help="Switch fan boost on or off and exit",
    )
    return parser.parse_args(argv)


@dataclass
class Config:
    """Daemon configuration."""

    target_temp: float = DEFAULT_TARGET_TEMP
    auto_control: bool = False
    poll_interval: float = 2.0
    history_window: float = 120.0
    status_timeout: float = STATUS_TIMEOUT
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    platform: str = DEFAULT_PLATFORM_KEY
    use_pkexec: bool = True
    restore_fan_on_exit: bool = True
    log_level: str = "INFO"
    debug: bool = False

    # One-shot CLI actions
    show_status: bool = False
    set_mode: str | None = None
    fan_boost: bool | None = None

    def __post_init__(self) -> None:
        validate_target_temp(self.target_temp)

        if self.poll_interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {self.poll_interval}")

        if self.history_window < self.poll_interval:
            raise ValueError(
                f"History window ({self.history_window}s) must cover at least "
                f"one poll interval ({self.poll_interval}s)"
            )

        if self.status_timeout <= 0:
            raise ValueError(f"Status timeout must be positive, got {self.status_timeout}")

        if self.command_timeout <= 0:
            raise ValueError(f"Command timeout must be positive, got {self.command_timeout}")

        valid_platforms = available_platforms()
        if self.platform not in valid_platforms:
            raise ValueError(
                f"Unknown platform '{self.platform}'. "
                f"Available: {', '.join(sorted(valid_platforms))}"
            )

        if self.set_mode is not None:
            Mode.from_command(self.set_mode)

        if self.debug:
            self.log_level = "DEBUG"

    @property
    def history_capacity(self) -> int:
        """Number of samples covering the history window."""
        return max(1, int(self.history_window / self.poll_interval))

    @classmethod
    def load(cls, argv: list[str] | None = None) -> "Config":
        """Load configuration from environment file, env vars, and CLI args.

        Priority (highest to lowest):
        1. CLI arguments
        2. Environment variables (set by systemd EnvironmentFile)
        3. /etc/default/thermal-monitor file
        4. Dataclass defaults
        """
        file_env = {k: v for k, v in dotenv_values(DEFAULT_CONFIG_PATH).items() if v is not None}

        def env(key: str) -> str | None:
            if key in os.environ:
                return os.environ[key]
            return file_env.get(key)

        kwargs: dict[str, object] = {}

        for key, attr in (
            ("TARGET_TEMP", "target_temp"),
            ("POLL_INTERVAL", "poll_interval"),
            ("HISTORY_WINDOW", "history_window"),
            ("STATUS_TIMEOUT", "status_timeout"),
            ("COMMAND_TIMEOUT", "command_timeout"),
        ):
            if (v := env(key)) is not None:
                try:
                    kwargs[attr] = float(v)
                except ValueError:
                    pass

        for key, attr in (
            ("AUTO_CONTROL", "auto_control"),
            ("USE_PKEXEC", "use_pkexec"),
            ("RESTORE_FAN_ON_EXIT", "restore_fan_on_exit"),
            ("DEBUG", "debug"),
        ):
            if (v := env(key)) is not None:
                kwargs[attr] = _parse_bool(v)

        if (v := env("PLATFORM")) is not None:
            kwargs["platform"] = v.lower()

        if (v := env("LOG_LEVEL")) is not None:
            kwargs["log_level"] = v.upper()

        # CLI arguments override everything
        args = _parse_cli_args(argv)

        if args.target_temp is not None:
            kwargs["target_temp"] = args.target_temp

        if args.auto_control is True:
            kwargs["auto_control"] = True

        if args.poll_interval is not None:
            kwargs["poll_interval"] = args.poll_interval

        if args.history_window is not None:
            kwargs["history_window"] = args.history_window

        if args.status_timeout is not None:
            kwargs["status_timeout"] = args.status_timeout

        if args.command_timeout is not None:
            kwargs["command_timeout"] = args.command_timeout

        if args.platform is not None:
            kwargs["platform"] = args.platform.lower()

        if args.no_pkexec is True:
            kwargs["use_pkexec"] = False

        if args.log_level is not None:
            kwargs["log_level"] = args.log_level

        if args.debug is True:
            kwargs["debug"] = True

        kwargs["show_status"] = args.status
        kwargs["set_mode"] = args.set_mode
        if args.fan_boost is not None:
            kwargs["fan_boost"] = _parse_on_off(args.fan_boost)

        return cls(**kwargs)

    def setup_logging(self) -> None:
        """Configure logging based on this config."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
