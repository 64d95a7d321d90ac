"""Log Style Constants."""


class LogStyle:
    """Unified logging style constants for consistent visual hierarchy."""

    # Session headers
    HEAVY = "━" * 80

    # Major sections
    DOUBLE = "═" * 80

    # Subsections / separators
    LIGHT = "─" * 80

    # Symbols
    ARROW = "»"
    BULLET = "•"
    WARNING = "⚠"
    SUCCESS = "✓"
    FAILURE = "✗"

    INDENT = "  "
    DOUBLE_INDENT = "    "
