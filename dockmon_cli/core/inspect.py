"""
Parsing of ``docker inspect`` and ``docker stats`` records.

The runtime is asked for single-line records (see INSPECT_FORMAT and
STATS_FORMAT) which are split here into small dataclasses.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


INSPECT_FORMAT = (
    "{{.Name}},{{.State.Status}},{{.HostConfig.RestartPolicy.Name}},"
    "{{if .State.Health}}{{.State.Health.Status}}{{else}}none{{end}},"
    "{{.State.StartedAt}},"
    "{{range $port, $conf := .NetworkSettings.Ports}}{{$port}} {{end}}"
)

STATS_FORMAT = "{{.Name}} {{.CPUPerc}} {{.MemPerc}}"

# docker reports nanoseconds; datetime only keeps microseconds
_FRACTION = re.compile(r"\.(\d+)")


class ParseError(ValueError):
    """Exception raised when inspect or stats output is malformed."""
    pass


@dataclass
class StatsData:
    """Resource usage of one container."""
    container_name: str
    cpu: str
    memory: str


@dataclass
class InspectData:
    """Summary of one container's state."""
    container_name: str
    status: str
    restart_policy: str
    health: str
    uptime: str
    ports: str


def parse_stats_data(stats: str) -> StatsData:
    """
    Parse a ``name cpu memory`` record.

    Raises:
        ParseError: If fewer than three fields are present
    """
    parsed = stats.lstrip("/").split()
    if len(parsed) < 3:
        raise ParseError(f"Expected 'name cpu memory', got: {stats!r}")

    return StatsData(
        container_name=parsed[0],
        cpu=parsed[1],
        memory=parsed[2],
    )


def parse_inspect_data(record: str, now: Optional[datetime] = None) -> InspectData:
    """
    Parse a ``name,status,restart_policy,health,start_time,ports`` record.

    Args:
        record: One line produced with INSPECT_FORMAT
        now: Reference time for the uptime, defaults to the current time

    Raises:
        ParseError: If fields are missing or the start time is invalid
    """
    parsed = record.strip().lstrip("/").split(",")
    if len(parsed) < 6:
        raise ParseError(f"Expected 6 comma separated fields, got {len(parsed)}: {record!r}")

    return InspectData(
        container_name=parsed[0],
        status=parsed[1],
        restart_policy=parsed[2],
        health=parsed[3],
        uptime=calc_uptime(parsed[4], now=now),
        ports=parsed[5].strip(),
    )


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp, accepting ``Z`` and nanosecond fractions."""
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ParseError(f"Failed to parse start_time: {value!r}") from e
    if parsed.tzinfo is None:
        raise ParseError(f"start_time has no timezone: {value!r}")
    return parsed


def calc_uptime(start_time: str, now: Optional[datetime] = None) -> str:
    """
    Format the time elapsed since ``start_time``.

    ``1D 1H 3m`` when at least a day has passed, ``3H 10m`` when at least an
    hour has, otherwise ``45m``.
    """
    started = parse_rfc3339(start_time)
    if now is None:
        now = datetime.now(timezone.utc)

    total_minutes = max(0, int((now - started).total_seconds() // 60))
    days = total_minutes // (24 * 60)
    hours = (total_minutes // 60) % 24
    minutes = total_minutes % 60

    if days > 0:
        return f"{days}D {hours}H {minutes}m"
    if hours > 0:
        return f"{hours}H {minutes}m"
    return f"{minutes}m"
