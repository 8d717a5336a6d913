"""
Logs command for the CLI tool.
"""

import argparse
from typing import List

from dockmon_cli.cli.commands.base import BaseCommand
from dockmon_cli.core.containers import ContainerRef
from dockmon_cli.core.logs.aggregator import LogAggregator
from dockmon_cli.utils.colors import Colors
from dockmon_cli.utils.system.shell import ShellError


def non_negative_int(value: str) -> int:
    """argparse type for counts that must be zero or positive."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or positive, got {number}")
    return number


class LogsCommand(BaseCommand):
    """Command to stream merged logs of several containers."""

    def _containers(self) -> List[ContainerRef]:
        if self.args.stack:
            names = self.manager.get_containers_from_stack(self.args.stack)
            return [ContainerRef.from_name(name) for name in names]
        if self.args.all:
            return [ContainerRef.from_id(cid) for cid in self.manager.list_containers()]
        return [ContainerRef.from_name(name) for name in self.args.containers]

    def run(self) -> int:
        """Run the logs command."""
        try:
            containers = self._containers()
        except ShellError as e:
            self.logger.error(f"Failed to list containers: {e}")
            return 1

        if not containers:
            print(Colors.warning("No containers to follow", self.use_color))
            return 1

        tail = self.args.tail if self.args.tail is not None else self.config.tail
        aggregator = LogAggregator(self.manager, tail=tail, use_color=self.use_color)
        for container in containers:
            aggregator.add(container)

        self.logger.debug(f"Following logs of {len(containers)} containers")
        aggregator.run()
        return 0

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add logs command arguments."""
        parser.add_argument(
            "containers",
            nargs="*",
            help="Container names to follow"
        )
        BaseCommand.add_selection_arguments(parser, "Follow")
        parser.add_argument(
            "--tail", "-n",
            type=non_negative_int,
            help="Number of lines to show from the end of each log (default from config)"
        )
