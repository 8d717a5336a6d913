"""
Container runtime operations.

This module wraps the container runtime executable (``docker`` by default):
- listing and force-removing containers
- resolving container names and compose stacks
- pulling images and detecting updates
- collecting inspect and stats records
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from dockmon_cli.core.inspect import (
    INSPECT_FORMAT,
    STATS_FORMAT,
    InspectData,
    StatsData,
    parse_inspect_data,
    parse_stats_data,
)
from dockmon_cli.utils.colors import Colors
from dockmon_cli.utils.system.shell import ProcessHandle, ShellError, run_command

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME = "docker"
COMPOSE_PROJECT_LABEL = "com.docker.compose.project"
UPDATED_MARKER = "Status: Downloaded newer image"


class NameResolutionError(ShellError):
    """Exception raised when a container id cannot be mapped to a name."""
    pass


@dataclass(frozen=True)
class ContainerRef:
    """A container addressed either by raw id or by name."""
    identifier: str
    is_id: bool = False

    @classmethod
    def from_id(cls, container_id: str) -> "ContainerRef":
        return cls(container_id, is_id=True)

    @classmethod
    def from_name(cls, name: str) -> "ContainerRef":
        return cls(name, is_id=False)

    def __str__(self) -> str:
        return self.identifier


def decode_line(raw: bytes) -> str:
    """
    Decode one line read from a subprocess pipe and drop its terminator.

    Raises:
        UnicodeDecodeError: If the line is not valid UTF-8
    """
    line = raw.decode("utf-8")
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def scan_pull_output(lines: Iterable[bytes], echo: Optional[Callable[[str], None]] = print) -> bool:
    """
    Echo ``pull`` output and report whether a newer image was downloaded.

    Every line is consumed so the pull runs to completion. Lines that are
    not valid UTF-8 are skipped.
    """
    updated = False
    for raw in lines:
        try:
            line = decode_line(raw)
        except UnicodeDecodeError:
            logger.debug("Skipping undecodable pull output line")
            continue
        if echo is not None:
            echo(line)
        if UPDATED_MARKER in line:
            updated = True
    return updated


class ContainerManager:
    """Runs container runtime commands on behalf of the CLI commands."""

    def __init__(
        self,
        runtime: str = DEFAULT_RUNTIME,
        use_color: bool = False,
        wait_timeout: Optional[float] = None
    ):
        """
        Args:
            runtime: Container runtime executable
            use_color: Emit ANSI colors in messages
            wait_timeout: Seconds allowed for a terminated process to exit
        """
        self.runtime = runtime
        self.use_color = use_color
        self.wait_timeout = wait_timeout

    def command(self, *args: str) -> List[str]:
        """Build an argument vector for the runtime."""
        return [self.runtime, *args]

    def list_containers(self) -> List[str]:
        """Return the ids of all running containers."""
        if self.use_color:
            print(Colors.notice("Listing docker containers..."))

        result = run_command(self.command("ps", "-q"))
        return result.stdout.split()

    def kill_containers(self, container_ids: List[str]) -> None:
        """Force remove the given containers."""
        print(Colors.warning("Killing docker containers...", self.use_color))
        if not container_ids:
            logger.info("No containers to remove")
            return

        run_command(self.command("rm", "-f", *container_ids), capture_output=False)

    def get_containers_from_stack(self, stack: str) -> List[str]:
        """
        Return the names of running containers in a compose stack.

        Containers whose name cannot be resolved are left out.
        """
        result = run_command(
            self.command("ps", "-q", "--filter", f"label={COMPOSE_PROJECT_LABEL}={stack}")
        )

        names = []
        for container_id in result.stdout.split():
            try:
                names.append(self.get_container_name(container_id))
            except NameResolutionError as e:
                logger.debug(f"Dropping container {container_id} from stack {stack}: {e}")
        return names

    def get_container_name(self, container_id: str) -> str:
        """
        Look up the name of a container by id.

        Raises:
            NameResolutionError: If the runtime fails or reports no name
        """
        try:
            result = run_command(
                self.command("inspect", "--format", "{{.Name}}", container_id),
                check=False
            )
        except ShellError as e:
            raise NameResolutionError(f"Failed to inspect container {container_id}: {e}") from e

        # docker names start with '/'
        name = result.stdout.strip().lstrip("/")
        if result.returncode != 0 or not name:
            raise NameResolutionError(f"Failed to resolve name of container {container_id}")
        return name

    def resolve_display_name(self, container: ContainerRef) -> str:
        """Name to show for a container, falling back to the raw identifier."""
        if not container.is_id:
            return container.identifier
        try:
            return self.get_container_name(container.identifier)
        except NameResolutionError as e:
            logger.debug(f"Using raw id as display name: {e}")
            return container.identifier

    def get_container_image(self, container_name: str) -> str:
        """Return the image a container was created from."""
        result = run_command(
            self.command("inspect", "--format", "{{.Config.Image}}", container_name)
        )
        image = result.stdout.strip()
        if not image:
            raise ShellError(f"No image found for container {container_name}")
        return image

    def update_container(self, container_name: str) -> bool:
        """
        Pull the image of a container.

        Returns:
            True if a newer image was downloaded, False if it was up to date
        """
        image_name = self.get_container_image(container_name)
        print(Colors.info(f"Pulling image for {container_name}: {image_name}", self.use_color))

        with ProcessHandle(
            self.command("pull", image_name),
            capture_stderr=False,
            wait_timeout=self.wait_timeout
        ) as process:
            updated = scan_pull_output(iter(process.stdout.readline, b""))
            exit_code = process.wait()

        if exit_code:
            logger.warning(f"Pull of {image_name} exited with code {exit_code}")
        return updated

    def inspect_container(self, container: str) -> InspectData:
        """Return the state summary of one container."""
        result = run_command(self.command("inspect", "--format", INSPECT_FORMAT, container))
        return parse_inspect_data(result.stdout.strip())

    def container_stats(self) -> List[StatsData]:
        """Return a single stats sample for all running containers."""
        result = run_command(self.command("stats", "--no-stream", "--format", STATS_FORMAT))
        return [parse_stats_data(line) for line in result.stdout.splitlines() if line.strip()]
