"""
Status command for the CLI tool.
"""

import argparse
from typing import Dict, List

from dockmon_cli.cli.commands.base import BaseCommand
from dockmon_cli.core.inspect import ParseError, StatsData
from dockmon_cli.utils.colors import Colors
from dockmon_cli.utils.system.shell import ShellError

HEADERS = ["NAME", "STATUS", "RESTART", "HEALTH", "UPTIME", "CPU", "MEM", "PORTS"]


class StatusCommand(BaseCommand):
    """Command to show a status table of running containers."""

    def run(self) -> int:
        """Run the status command."""
        try:
            containers = self.select_containers([])
            if not containers:
                print(Colors.warning("No running containers", self.use_color))
                return 0

            stats: Dict[str, StatsData] = {
                entry.container_name: entry for entry in self.manager.container_stats()
            }

            rows = []
            for container in containers:
                try:
                    data = self.manager.inspect_container(container)
                except ShellError as e:
                    # exited since it was listed
                    self.logger.debug(f"Skipping container {container}: {e}")
                    continue
                usage = stats.get(data.container_name)
                rows.append([
                    data.container_name,
                    data.status,
                    data.restart_policy or "-",
                    data.health,
                    data.uptime,
                    usage.cpu if usage else "-",
                    usage.memory if usage else "-",
                    data.ports or "-",
                ])

        except (ShellError, ParseError) as e:
            self.logger.error(f"Failed to collect container status: {e}")
            return 1

        self._print_table(rows)
        return 0

    def _print_table(self, rows: List[List[str]]) -> None:
        widths = [len(header) for header in HEADERS]
        for row in rows:
            widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

        header = "  ".join(h.ljust(w) for h, w in zip(HEADERS, widths)).rstrip()
        print(Colors.bold(header, self.use_color))
        for row in rows:
            print("  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add status command arguments."""
        parser.add_argument(
            "--stack", "-s",
            help="Only show the containers of a docker compose project"
        )
        parser.set_defaults(all=True)
