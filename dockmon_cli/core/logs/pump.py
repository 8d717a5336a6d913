"""
Per-container log pump.

A pump follows the logs of one container: it resolves the container's
display name, starts ``<runtime> logs <name> --tail <N> --follow`` and runs
one reader thread per output stream. Readers format every line and send it
on the shared channel until the stream ends or the receiver is closed.
"""

import logging
import threading
from typing import IO, List, Optional

from dockmon_cli.core.containers import ContainerManager, ContainerRef, decode_line
from dockmon_cli.core.logs.channel import SendFailed, Sender
from dockmon_cli.core.logs.formatter import format_error_line, format_log_line, get_timestamp
from dockmon_cli.utils.system.shell import LaunchFailed, ProcessHandle

logger = logging.getLogger(__name__)


class LogPump:
    """
    Streams the logs of one container into a channel.

    The pump owns its subprocess and its reader threads. The subprocess is
    terminated and reaped before the pump thread finishes, whatever the
    reason it stopped.

    Attributes:
        container: Container being followed
        display_name: Name used in formatted lines, set once resolved
        process: Log subprocess, None until launched
        readers: Reader threads, one per captured stream
    """

    def __init__(
        self,
        container: ContainerRef,
        sender: Sender,
        manager: ContainerManager,
        tail: int = 20,
        use_color: bool = False
    ):
        """
        Args:
            container: Container to follow
            sender: Sender handle owned by this pump; closed when it finishes
            manager: Runtime wrapper used for name lookup and commands
            tail: Historical lines to emit before following
            use_color: Colorize timestamp and container name
        """
        self.container = container
        self.manager = manager
        self.tail = tail
        self.use_color = use_color
        self.display_name: Optional[str] = None
        self.process: Optional[ProcessHandle] = None
        self.readers: List[threading.Thread] = []
        self._sender = sender
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "LogPump":
        """Run the pump in its own thread."""
        self._thread = threading.Thread(
            target=self.run,
            name=f"log-pump-{self.container.identifier}",
            daemon=True
        )
        self._thread.start()
        return self

    def run(self) -> None:
        """Pump body. Returns once both streams ended and the process is reaped."""
        try:
            self.display_name = self.manager.resolve_display_name(self.container)
            self._follow(self.display_name)
        finally:
            self._sender.close()

    def _follow(self, name: str) -> None:
        process = ProcessHandle(
            self.manager.command("logs", name, "--tail", str(self.tail), "--follow"),
            wait_timeout=self.manager.wait_timeout
        )
        try:
            process.start()
        except LaunchFailed as e:
            logger.warning(f"Failed to log {name}: {e}")
            try:
                self._sender.send(format_error_line(name, self.use_color))
            except SendFailed:
                pass
            return

        self.process = process
        with process:
            if self._stopping.is_set():
                process.terminate()

            for label, stream in (("stdout", process.stdout), ("stderr", process.stderr)):
                if stream is None:
                    continue
                reader = threading.Thread(
                    target=self._read_stream,
                    args=(stream, self._sender.clone(), name),
                    name=f"log-reader-{name}-{label}",
                    daemon=True
                )
                reader.start()
                self.readers.append(reader)

            for reader in self.readers:
                reader.join()

        logger.debug(f"Log pump for {name} finished with exit code {process.returncode}")

    def _read_stream(self, stream: IO[bytes], sender: Sender, name: str) -> None:
        with sender:
            for raw in iter(stream.readline, b""):
                try:
                    line = decode_line(raw)
                except UnicodeDecodeError:
                    logger.debug(f"Skipping undecodable log line from {name}")
                    continue

                try:
                    sender.send(format_log_line(get_timestamp(), name, line, self.use_color))
                except SendFailed:
                    # receiver closed; end the sibling reader too
                    self.stop()
                    break

    def stop(self) -> None:
        """
        Ask the pump to finish.

        Terminating the subprocess closes its streams, which ends both
        readers. A process launched after this call is terminated at once.
        """
        self._stopping.set()
        if self.process is not None:
            self.process.terminate()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
