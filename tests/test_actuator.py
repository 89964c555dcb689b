"""Tests for privileged actuation with a mocked subprocess."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from thermal_monitor.actuator import ActuationError, PkexecActuator, clamp_perf
from thermal_monitor.modes import Mode
from thermal_monitor.platforms import load_platform

IDEAPAD = load_platform("lenovo-ideapad")
GENERIC = load_platform("generic")


def _completed(returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


def _command(mock_run: MagicMock) -> list[str]:
    return mock_run.call_args.args[0]


class TestClampPerf:
    @pytest.mark.parametrize("pct, expected", [(0, 20), (20, 20), (55, 55), (100, 100), (150, 100)])
    def test_clamp(self, pct: int, expected: int) -> None:
        assert clamp_perf(pct) == expected


@patch("thermal_monitor.actuator.subprocess.run")
class TestPkexecActuator:
    def test_fan_boost_on(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD).set_fan_boost(True)

        cmd = _command(mock_run)
        assert cmd[:3] == ["pkexec", "sh", "-c"]
        assert cmd[3].startswith("echo 1 > ")
        assert cmd[3].endswith("fan_mode")

    def test_fan_boost_off(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD).set_fan_boost(False)
        assert _command(mock_run)[3].startswith("echo 0 > ")

    def test_fan_unsupported_platform(self, mock_run: MagicMock) -> None:
        with pytest.raises(ActuationError, match="Fan control not supported"):
            PkexecActuator(GENERIC).set_fan_boost(True)
        mock_run.assert_not_called()

    def test_perf_pct_clamped_before_writing(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD).set_perf_pct(5)

        script = _command(mock_run)[3]
        assert script.startswith(
            "{ echo 20 > /sys/devices/system/cpu/intel_pstate/max_perf_pct; } 2>/dev/null || "
        )
        assert "{ echo 20 > /sys/devices/system/cpu/amd_pstate/max_perf_pct; } 2>/dev/null" in script
        assert "scaling_max_freq" in script
        assert "$((max * 20 / 100))" in script

    def test_mode_runs_helper(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD).set_mode(Mode.QUIET)
        assert _command(mock_run) == ["pkexec", "/usr/local/bin/cpu-mode", "quiet"]

    def test_unknown_mode_sends_auto(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD).set_mode(Mode.UNKNOWN)
        assert _command(mock_run)[-1] == "auto"

    def test_without_pkexec(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD, use_pkexec=False).set_mode(Mode.AUTO)
        assert _command(mock_run) == ["/usr/local/bin/cpu-mode", "auto"]

    def test_timeout_is_applied(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed()
        PkexecActuator(IDEAPAD, timeout=4.0).set_mode(Mode.AUTO)
        assert mock_run.call_args.kwargs["timeout"] == 4.0

    def test_failure_reports_stderr(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(126, "Error executing command as another user\n")
        with pytest.raises(ActuationError, match="Failed to change mode: Error executing"):
            PkexecActuator(IDEAPAD).set_mode(Mode.COMFORT)

    def test_failure_without_stderr_reports_status(self, mock_run: MagicMock) -> None:
        mock_run.return_value = _completed(1)
        with pytest.raises(ActuationError, match="exit status 1"):
            PkexecActuator(IDEAPAD).set_perf_pct(50)

    def test_timeout_raises(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="pkexec", timeout=10)
        with pytest.raises(ActuationError, match="timed out"):
            PkexecActuator(IDEAPAD).set_fan_boost(True)

    def test_missing_executable_raises(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError("pkexec")
        with pytest.raises(ActuationError, match="Failed to set fan mode"):
            PkexecActuator(IDEAPAD).set_fan_boost(True)

    def test_actuation_error_is_os_error(self, mock_run: MagicMock) -> None:
        assert issubclass(ActuationError, OSError)
