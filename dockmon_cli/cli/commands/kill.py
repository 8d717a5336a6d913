"""
Kill command for the CLI tool.
"""

import argparse

from dockmon_cli.cli.commands.base import BaseCommand
from dockmon_cli.utils.colors import Colors
from dockmon_cli.utils.system.shell import ShellError


class KillCommand(BaseCommand):
    """Command to force remove containers."""

    def run(self) -> int:
        """Run the kill command."""
        try:
            containers = self.select_containers(self.args.containers)
            if not containers:
                print(Colors.warning("No containers to kill", self.use_color))
                return 0

            self.manager.kill_containers(containers)
            print(Colors.success(f"Removed {len(containers)} containers", self.use_color))
            return 0

        except ShellError as e:
            self.logger.error(f"Failed to remove containers: {e}")
            return 1

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add kill command arguments."""
        parser.add_argument(
            "containers",
            nargs="*",
            help="Container ids or names to remove"
        )
        BaseCommand.add_selection_arguments(parser, "Remove")
