"""Common utility functions for filemeta."""

import subprocess
from pathlib import Path
from typing import Union

from filemeta.core.errors import ConfigurationError, ExtractionError
from filemeta.core.logging import get_logger

logger = get_logger(__name__)


class CommandUtils:
    """Helpers for building and running external tool invocations."""

    @staticmethod
    def escape_shell_arg(arg: str) -> str:
        """Quote a single argument the way POSIX ``escapeshellarg`` does.

        The argument is wrapped in single quotes and every embedded single
        quote is replaced by ``'\\''``.
        """
        return "'" + str(arg).replace("'", "'\\''") + "'"

    @staticmethod
    def build_command(executable: Union[str, Path], *args: Union[str, Path]) -> list[str]:
        """Build an argument list for an executable.

        Args:
            executable: Path to the tool.
            *args: Arguments passed verbatim, no shell involved.

        Returns:
            List of strings suitable for ``subprocess.run``.
        """
        return [str(executable), *(str(a) for a in args)]

    @staticmethod
    def format_command(command: list[str]) -> str:
        """Render an argument list as a shell command line.

        The executable is left as is, every argument is escaped.
        """
        if not command:
            return ""
        return " ".join([command[0], *(CommandUtils.escape_shell_arg(a) for a in command[1:])])

    @staticmethod
    def run_command(command: list[str], timeout: float) -> tuple[int, list[str]]:
        """Run a command and capture its standard output line by line.

        Args:
            command: Argument list from ``build_command``.
            timeout: Upper bound in seconds.

        Returns:
            Tuple of (exit code, stdout lines without line endings).

        Raises:
            ExtractionError: If the tool cannot be started or exceeds the timeout.
        """
        logger.debug(f"Running {CommandUtils.format_command(command)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise ExtractionError(f"{Path(command[0]).name} timed out after {timeout:g}s")
        except OSError as e:
            raise ExtractionError(f"Cannot run {command[0]}: {e}")

        stdout = completed.stdout.decode("utf-8", errors="replace")
        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            logger.warning(f"{Path(command[0]).name} exited with code {completed.returncode}: {stderr}")
        return completed.returncode, stdout.splitlines()


class PathUtils:
    """Utility functions for path operations."""

    @staticmethod
    def require_executable(path: Union[str, Path, None], setting: str, tool: str) -> Path:
        """Ensure a configured tool path points to an existing file.

        Args:
            path: Configured path, may be empty.
            setting: Name of the configuration setting, used in the message.
            tool: Human readable tool name.

        Returns:
            Absolute Path to the tool.

        Raises:
            ConfigurationError: If the path is empty or not a file.
        """
        if not path or not Path(path).expanduser().is_file():
            raise ConfigurationError(f"Invalid path or filename for {tool}: {path or ''} (setting '{setting}')")
        return Path(path).expanduser().resolve()

    @staticmethod
    def extension_of(name: str) -> str:
        """Lowercase extension without the dot, empty if there is none."""
        return Path(name).suffix.lower().lstrip(".")
