"""Tests for CPU modes and mode status parsing."""

import pytest

from thermal_monitor.modes import Mode, parse_mode_status


class TestModeProperties:
    def test_commands(self) -> None:
        assert Mode.PERFORMANCE.command == "performance"
        assert Mode.COMFORT.command == "comfort"
        assert Mode.BALANCED.command == "balanced"
        assert Mode.QUIET.command == "quiet"
        assert Mode.AUTO.command == "auto"

    def test_unknown_shares_auto_command(self) -> None:
        assert Mode.UNKNOWN.command == Mode.AUTO.command
        assert Mode.UNKNOWN is not Mode.AUTO

    def test_labels(self) -> None:
        assert Mode.PERFORMANCE.label == "PERFORMANCE"
        assert Mode.AUTO.label == "AUTO"
        assert Mode.UNKNOWN.label == "UNKNOWN"

    def test_descriptions(self) -> None:
        assert "100%" in Mode.PERFORMANCE.description
        assert "60%" in Mode.COMFORT.description
        assert "75%" in Mode.BALANCED.description
        assert "40%" in Mode.QUIET.description
        assert "Automatic" in Mode.AUTO.description

    def test_selectable_excludes_unknown(self) -> None:
        modes = Mode.selectable()
        assert len(modes) == 5
        assert Mode.UNKNOWN not in modes
        assert modes[0] is Mode.PERFORMANCE

    def test_from_command(self) -> None:
        assert Mode.from_command("Quiet") is Mode.QUIET

    def test_from_command_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="Invalid mode"):
            Mode.from_command("turbo")


class TestParseModeStatus:
    @pytest.mark.parametrize("text, mode", [
        ("performance", Mode.PERFORMANCE),
        ("PERFORMANCE\n", Mode.PERFORMANCE),
        ("comfort", Mode.COMFORT),
        ("balanced", Mode.BALANCED),
        ("quiet", Mode.QUIET),
        ("auto", Mode.AUTO),
    ])
    def test_plain_mode_names(self, text: str, mode: Mode) -> None:
        assert parse_mode_status(text) is mode

    @pytest.mark.parametrize("text", ["comfort-OPTIMAL", "comfort-CRITICAL", "comfort auto"])
    def test_managed_comfort_is_auto(self, text: str) -> None:
        assert parse_mode_status(text) is Mode.AUTO

    def test_performance_wins_over_later_keywords(self) -> None:
        assert parse_mode_status("performance-auto") is Mode.PERFORMANCE

    @pytest.mark.parametrize("text", ["", "turbo", "low-power"])
    def test_unrecognised_is_unknown(self, text: str) -> None:
        assert parse_mode_status(text) is Mode.UNKNOWN
