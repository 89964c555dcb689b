"""CPU governor modes and the parser for the mode status file.

The mode status file is written by the external cpu-mode helper and by the
thermal-manager script. Its content is free text such as "quiet",
"performance" or "comfort-OPTIMAL"; parse_mode_status() maps it to a Mode.
"""

from enum import Enum


class Mode(Enum):
    """Operating mode of the CPU governor."""

    PERFORMANCE = "performance"
    COMFORT = "comfort"
    BALANCED = "balanced"
    QUIET = "quiet"
    AUTO = "auto"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return self.name

    @property
    def command(self) -> str:
        """Token passed to the mode helper. UNKNOWN falls back to auto."""
        if self is Mode.UNKNOWN:
            return Mode.AUTO.value
        return self.value

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def selectable(cls) -> tuple["Mode", ...]:
        """Modes a user may pick, in display order."""
        return (cls.PERFORMANCE, cls.COMFORT, cls.BALANCED, cls.QUIET, cls.AUTO)

    @classmethod
    def from_command(cls, token: str) -> "Mode":
        """Look up a selectable mode by its command token.

        Raises ValueError for unknown tokens.
        """
        for mode in cls.selectable():
            if mode.command == token.lower():
                return mode
        valid = ", ".join(m.command for m in cls.selectable())
        raise ValueError(f"Invalid mode '{token}'. Must be one of: {valid}")


_DESCRIPTIONS: dict[Mode, str] = {
    Mode.PERFORMANCE: "100% - Video calls",
    Mode.COMFORT: "60% - Cool keyboard",
    Mode.BALANCED: "75% - General use",
    Mode.QUIET: "40% - Silent",
    Mode.AUTO: "Automatic",
    Mode.UNKNOWN: "Unknown",
}


def _is_managed_comfort(text: str) -> bool:
    # The thermal manager writes "comfort-<ZONE>" while it is driving the CPU
    return "auto" in text or "-" in text


# Ordered (keyword, guard, mode) rules; the first rule whose keyword appears
# in the status text and whose guard accepts it wins.
_STATUS_RULES = (
    ("performance", None, Mode.PERFORMANCE),
    ("comfort", _is_managed_comfort, Mode.AUTO),
    ("comfort", None, Mode.COMFORT),
    ("balanced", None, Mode.BALANCED),
    ("quiet", None, Mode.QUIET),
    ("auto", None, Mode.AUTO),
)


def parse_mode_status(text: str) -> Mode:
    """Map the mode status text to a Mode (case-insensitive).

    Returns Mode.UNKNOWN when no rule matches.
    """
    lower = text.strip().lower()
    for keyword, guard, mode in _STATUS_RULES:
        if keyword in lower and (guard is None or guard(lower)):
            return mode
    return Mode.UNKNOWN
