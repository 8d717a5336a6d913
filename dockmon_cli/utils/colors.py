"""
Color utilities for terminal output.

Colors are a closed enumeration mapped to fixed ANSI escape sequences. Whether
to emit them is always decided by the caller and passed in explicitly.
"""

import sys
from enum import Enum


RESET = '\033[0m'


class Color(Enum):
    """Semantic terminal colors."""

    RED = 'red'
    GREEN = 'green'
    BLUE = 'blue'
    YELLOW = 'yellow'
    MAGENTA = 'magenta'
    CYAN = 'cyan'
    WHITE = 'white'


_CODES = {
    Color.RED: '\033[1;31m',
    Color.GREEN: '\033[1;32m',
    Color.BLUE: '\033[1;34m',
    Color.YELLOW: '\033[1;33m',
    Color.MAGENTA: '\033[1;35m',
    Color.CYAN: '\033[1;36m',
    Color.WHITE: '\033[1;37m',
}


def color_code(color: Color) -> str:
    """Return the ANSI escape sequence for a color."""
    return _CODES[color]


def colorize(text: str, color: Color, enabled: bool = True) -> str:
    """
    Wrap text in a color code followed by the reset sequence.

    Args:
        text: Text to wrap
        color: Color to apply
        enabled: When False the text is returned unchanged

    Returns:
        Colored (or plain) text
    """
    if not enabled:
        return text
    return f"{color_code(color)}{text}{RESET}"


def is_terminal() -> bool:
    """Return True when standard output is attached to a terminal."""
    return sys.stdout.isatty()


class Colors:
    """Semantic formatting helpers for user-facing messages."""

    @staticmethod
    def error(text: str, enabled: bool = True) -> str:
        """Format text as error message."""
        return colorize(text, Color.RED, enabled)

    @staticmethod
    def success(text: str, enabled: bool = True) -> str:
        """Format text as success message."""
        return colorize(text, Color.GREEN, enabled)

    @staticmethod
    def name(text: str, enabled: bool = True) -> str:
        """Format text as a container name tag."""
        return colorize(text, Color.GREEN, enabled)

    @staticmethod
    def info(text: str, enabled: bool = True) -> str:
        """Format text as info message."""
        return colorize(text, Color.CYAN, enabled)

    @staticmethod
    def warning(text: str, enabled: bool = True) -> str:
        """Format text as a warning for destructive actions."""
        return colorize(text, Color.YELLOW, enabled)

    @staticmethod
    def notice(text: str, enabled: bool = True) -> str:
        """Format text as a listing notice."""
        return colorize(text, Color.MAGENTA, enabled)

    @staticmethod
    def bold(text: str, enabled: bool = True) -> str:
        """Format text as bold."""
        return colorize(text, Color.WHITE, enabled)
