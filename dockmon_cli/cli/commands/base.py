"""
Base command class for all CLI commands.
"""

import argparse
import logging
from abc import ABC, abstractmethod
from typing import List

from dockmon_cli.config.global_config import GlobalConfig
from dockmon_cli.core.containers import ContainerManager
from dockmon_cli.utils.colors import is_terminal

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, args: argparse.Namespace, config: GlobalConfig = None):
        """
        Initialize the command.

        Args:
            args: Parsed command line arguments
            config: Loaded global configuration
        """
        self.args = args
        self.config = config or GlobalConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.use_color = self._resolve_color()
        self.manager = ContainerManager(
            runtime=self.config.runtime,
            use_color=self.use_color,
            wait_timeout=self.config.wait_timeout
        )

    def _resolve_color(self) -> bool:
        if self.config.color == "always":
            return True
        if self.config.color == "never":
            return False
        return is_terminal()

    def select_containers(self, names: List[str]) -> List[str]:
        """
        Containers named by the common ``--all``/``--stack`` options.

        Falls back to the positional names when neither option is given.
        """
        if getattr(self.args, "stack", None):
            return self.manager.get_containers_from_stack(self.args.stack)
        if getattr(self.args, "all", False):
            return self.manager.list_containers()
        return list(names)

    @abstractmethod
    def run(self) -> int:
        """
        Run the command.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        pass

    @staticmethod
    @abstractmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """
        Add command-specific arguments to the parser.

        Args:
            parser: Argument parser to add arguments to
        """
        pass

    @staticmethod
    def add_selection_arguments(parser: argparse.ArgumentParser, noun: str) -> None:
        """Add the ``--all`` and ``--stack`` options shared by several commands."""
        group = parser.add_mutually_exclusive_group()
        group.add_argument(
            "--all", "-a",
            action="store_true",
            help=f"{noun} every running container"
        )
        group.add_argument(
            "--stack", "-s",
            help=f"{noun} the containers of a docker compose project"
        )
