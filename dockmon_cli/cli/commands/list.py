"""
List command for the CLI tool.
"""

import argparse

from dockmon_cli.cli.commands.base import BaseCommand
from dockmon_cli.utils.system.shell import ShellError


class ListCommand(BaseCommand):
    """Command to list running containers."""

    def run(self) -> int:
        """Run the list command."""
        try:
            if self.args.stack:
                containers = self.manager.get_containers_from_stack(self.args.stack)
            else:
                containers = self.manager.list_containers()
        except ShellError as e:
            self.logger.error(f"Failed to list containers: {e}")
            return 1

        if not containers:
            self.logger.info("No running containers")

        for container in containers:
            print(container)
        return 0

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add list command arguments."""
        parser.add_argument(
            "--stack", "-s",
            help="List container names of a docker compose project instead of ids"
        )
