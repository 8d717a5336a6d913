#!/usr/bin/env python3
"""
dockmon CLI Tool

Manage and observe Docker containers: list, remove and update them, show
their status and stream their logs side by side.
"""

import argparse
import logging
import sys

from dockmon_cli import __version__
from dockmon_cli.cli.commands.kill import KillCommand
from dockmon_cli.cli.commands.list import ListCommand
from dockmon_cli.cli.commands.logs import LogsCommand
from dockmon_cli.cli.commands.status import StatusCommand
from dockmon_cli.cli.commands.update import UpdateCommand
from dockmon_cli.config.global_config import COLOR_MODES, ConfigError, load_global_config
from dockmon_cli.utils.colors import Colors, is_terminal
from dockmon_cli.utils.logging import setup_logging
from dockmon_cli.utils.system.shell import check_command_exists

COMMANDS = {
    "list": ListCommand,
    "kill": KillCommand,
    "update": UpdateCommand,
    "status": StatusCommand,
    "logs": LogsCommand,
}


def create_parser():
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="dockmon",
        description="dockmon - manage and observe Docker containers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dockmon list                       # List running container ids
  dockmon kill --stack shop          # Remove every container of a compose project
  dockmon update web api             # Pull fresh images for two containers
  dockmon status                     # Status table of running containers
  dockmon logs --all --tail 50       # Follow the logs of every container
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dockmon v{__version__}"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress output except errors"
    )

    parser.add_argument(
        "--config",
        help="Path to a dockmon-config.yml file"
    )

    parser.add_argument(
        "--runtime",
        help="Container runtime executable (default: docker)"
    )

    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        help="Colorize output (default: auto, only on a terminal)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List running containers"
    )
    ListCommand.add_arguments(list_parser)

    kill_parser = subparsers.add_parser(
        "kill",
        help="Force remove containers"
    )
    KillCommand.add_arguments(kill_parser)

    update_parser = subparsers.add_parser(
        "update",
        help="Pull fresh images for containers"
    )
    UpdateCommand.add_arguments(update_parser)

    status_parser = subparsers.add_parser(
        "status",
        help="Show status of running containers"
    )
    StatusCommand.add_arguments(status_parser)

    logs_parser = subparsers.add_parser(
        "logs",
        help="Stream merged logs of containers"
    )
    LogsCommand.add_arguments(logs_parser)

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.INFO
    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        config = load_global_config(args.config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if args.runtime:
        config.runtime = args.runtime
    if args.color:
        config.color = args.color

    if not check_command_exists(config.runtime):
        print(Colors.error(f"Container runtime not found: {config.runtime}", is_terminal()))
        return 1

    command_class = COMMANDS.get(args.command)
    if command_class is None:
        parser.print_help()
        return 1

    try:
        command = command_class(args, config)
        return command.run()

    except KeyboardInterrupt:
        print(f"\n{Colors.warning('Operation cancelled by user', is_terminal())}")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
