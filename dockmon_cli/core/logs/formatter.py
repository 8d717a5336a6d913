"""
Formatting of container log lines for display.
"""

from datetime import datetime

from dockmon_cli.utils.colors import Colors


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def get_timestamp() -> str:
    """Current local time at second resolution."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def format_log_line(timestamp: str, container_name: str, line: str, use_color: bool) -> str:
    """
    Build a display line ``[<timestamp> | <container>] <line>``.

    With color enabled only the timestamp and container name are wrapped;
    the raw line is never touched.
    """
    ts = Colors.info(timestamp, use_color)
    name = Colors.name(container_name, use_color)
    return f"[{ts} | {name}] {line}"


def format_error_line(container_name: str, use_color: bool) -> str:
    """Line emitted when log streaming for a container could not start."""
    return Colors.error(f"[ERROR] - Failed to log {container_name}", use_color)
