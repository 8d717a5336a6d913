"""
Update command for the CLI tool.
"""

import argparse

from dockmon_cli.cli.commands.base import BaseCommand
from dockmon_cli.core.containers import ContainerRef
from dockmon_cli.utils.colors import Colors
from dockmon_cli.utils.system.shell import ShellError


class UpdateCommand(BaseCommand):
    """Command to pull fresh images for containers."""

    def run(self) -> int:
        """Run the update command."""
        try:
            containers = self.select_containers(self.args.containers)
        except ShellError as e:
            self.logger.error(f"Failed to list containers: {e}")
            return 1

        if not containers:
            print(Colors.warning("No containers to update", self.use_color))
            return 0

        updated = []
        failed = []
        for container in containers:
            if self.args.all:
                container = self.manager.resolve_display_name(ContainerRef.from_id(container))
            try:
                if self.manager.update_container(container):
                    updated.append(container)
            except ShellError as e:
                self.logger.error(f"Failed to update {container}: {e}")
                failed.append(container)

        if updated:
            print(Colors.success(f"Updated: {', '.join(updated)}", self.use_color))
        else:
            print(Colors.info("All images are up to date", self.use_color))

        if failed:
            print(Colors.error(f"Failed: {', '.join(failed)}", self.use_color))
            return 1
        return 0

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add update command arguments."""
        parser.add_argument(
            "containers",
            nargs="*",
            help="Container names to update"
        )
        BaseCommand.add_selection_arguments(parser, "Update")
