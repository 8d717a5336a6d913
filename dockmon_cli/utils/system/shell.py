"""
Shell command execution utilities.
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import IO, List, Optional, Union

logger = logging.getLogger(__name__)


class ShellError(Exception):
    """Exception raised when shell command fails."""
    pass


class LaunchFailed(ShellError):
    """Exception raised when a subprocess could not be started."""
    pass


def run_command(
    command: Union[str, List[str]],
    cwd: Optional[Union[str, Path]] = None,
    capture_output: bool = True,
    check: bool = True,
    timeout: Optional[int] = None,
    env: Optional[dict] = None
) -> subprocess.CompletedProcess:
    """
    Run a shell command.

    Args:
        command: Command to run (string or list)
        cwd: Working directory
        capture_output: Whether to capture stdout/stderr
        check: Whether to raise exception on non-zero exit
        timeout: Command timeout in seconds
        env: Environment variables

    Returns:
        CompletedProcess object

    Raises:
        ShellError: If command fails and check=True, times out or cannot start
    """
    if isinstance(command, str):
        command = shlex.split(command)

    logger.debug(f"Running command: {' '.join(command)}")
    if cwd:
        logger.debug(f"Working directory: {cwd}")

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=capture_output,
            check=check,
            timeout=timeout,
            env=env,
            text=True
        )

        if capture_output and result.stdout:
            logger.debug(f"Command output: {result.stdout}")
        if capture_output and result.stderr:
            logger.debug(f"Command stderr: {result.stderr}")

        return result

    except subprocess.CalledProcessError as e:
        error_msg = f"Command failed with exit code {e.returncode}: {' '.join(command)}"
        if e.stdout:
            error_msg += f"\nStdout: {e.stdout}"
        if e.stderr:
            error_msg += f"\nStderr: {e.stderr}"

        logger.debug(error_msg)
        raise ShellError(error_msg) from e

    except subprocess.TimeoutExpired as e:
        error_msg = f"Command timed out after {timeout} seconds: {' '.join(command)}"
        logger.error(error_msg)
        raise ShellError(error_msg) from e

    except OSError as e:
        error_msg = f"Failed to run {' '.join(command)}: {e}"
        logger.debug(error_msg)
        raise LaunchFailed(error_msg) from e


def check_command_exists(command: str) -> bool:
    """
    Check if a command exists in PATH.

    Args:
        command: Command name or path to check

    Returns:
        True if command exists, False otherwise
    """
    return shutil.which(command) is not None


def get_command_output(
    command: Union[str, List[str]],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[int] = None
) -> str:
    """
    Get the output of a command.

    Args:
        command: Command to run
        cwd: Working directory
        timeout: Command timeout

    Returns:
        Command output as string
    """
    result = run_command(command, cwd=cwd, timeout=timeout)
    return result.stdout.strip()


class ProcessHandle:
    """
    A long-running subprocess with piped output streams.

    Acquiring the handle (``start()`` or ``with``) is always paired with
    termination and reaping through ``close()``, which the context manager
    calls on every exit path.

    Example:
        >>> with ProcessHandle(["docker", "pull", "nginx"], capture_stderr=False) as proc:
        ...     for raw in iter(proc.stdout.readline, b""):
        ...         print(raw)
    """

    def __init__(
        self,
        command: List[str],
        capture_stdout: bool = True,
        capture_stderr: bool = True,
        wait_timeout: Optional[float] = None
    ):
        """
        Args:
            command: Executable followed by its arguments
            capture_stdout: Pipe stdout so it can be read
            capture_stderr: Pipe stderr so it can be read
            wait_timeout: Seconds ``wait()`` allows before escalating to SIGKILL,
                None to wait forever
        """
        self.command = list(command)
        self.capture_stdout = capture_stdout
        self.capture_stderr = capture_stderr
        self.wait_timeout = wait_timeout
        self._process: Optional[subprocess.Popen] = None

    def start(self) -> "ProcessHandle":
        """
        Start the subprocess.

        Raises:
            LaunchFailed: If the executable could not be started
        """
        if self._process is not None:
            return self

        logger.debug(f"Starting process: {' '.join(self.command)}")
        try:
            self._process = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if self.capture_stdout else None,
                stderr=subprocess.PIPE if self.capture_stderr else None,
            )
        except OSError as e:
            raise LaunchFailed(f"Failed to start {' '.join(self.command)}: {e}") from e
        return self

    @property
    def started(self) -> bool:
        return self._process is not None

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode if self._process else None

    @property
    def stdout(self) -> Optional[IO[bytes]]:
        return self._process.stdout if self._process else None

    @property
    def stderr(self) -> Optional[IO[bytes]]:
        return self._process.stderr if self._process else None

    def terminate(self) -> None:
        """Send SIGTERM. Safe to call repeatedly and after the process exited."""
        if self._process is None or self._process.returncode is not None:
            return
        try:
            self._process.terminate()
        except OSError:
            pass

    def kill(self) -> None:
        """Send SIGKILL. Safe to call repeatedly and after the process exited."""
        if self._process is None or self._process.returncode is not None:
            return
        try:
            self._process.kill()
        except OSError:
            pass

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Block until the process exits and reap it.

        Args:
            timeout: Override of the handle's wait_timeout. When it expires the
                process is killed and waited on without limit.

        Returns:
            Exit code, or None if the process was never started
        """
        if self._process is None:
            return None
        if timeout is None:
            timeout = self.wait_timeout
        try:
            return self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Process did not exit within {timeout}s, killing: {' '.join(self.command)}"
            )
            self.kill()
            return self._process.wait()

    def close(self) -> None:
        """Terminate, reap and release the output pipes."""
        if self._process is None:
            return
        self.terminate()
        self.wait()
        for stream in (self._process.stdout, self._process.stderr):
            if stream is not None:
                stream.close()

    def __enter__(self) -> "ProcessHandle":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
