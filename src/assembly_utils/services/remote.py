"""
Remote shell - SSH session to a file host via the system ssh client.

The session is a control master connection: it is opened lazily on the
first command, reused by every later command and torn down by close().
"""

import logging
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path

from .errors import RemoteCommandError, ServiceError

logger = logging.getLogger(__name__)


class RemoteShell:
    """Authenticated shell session on a remote host."""

    def __init__(self, host: str, user: str, ssh_command: str = "ssh"):
        self.host = host
        self.user = user
        self.ssh_command = ssh_command
        self._control_dir: Path | None = None

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"

    @property
    def is_open(self) -> bool:
        return self._control_dir is not None

    @property
    def control_path(self) -> Path | None:
        return self._control_dir / "control.sock" if self._control_dir else None

    def _ssh(self, *args: str) -> list[str]:
        return [self.ssh_command, "-o", "BatchMode=yes", "-o", f"ControlPath={self.control_path}", *args]

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ServiceError(f"Could not run {self.ssh_command}: {e}") from e

    def open(self) -> None:
        """Start the control master connection if not already running."""
        if self.is_open:
            return

        self._control_dir = Path(tempfile.mkdtemp(prefix="asu-ssh-"))
        logger.debug(f"Opening SSH session to {self.target}")
        try:
            result = self._run(self._ssh("-M", "-N", "-f", self.target))
            if result.returncode != 0:
                raise ServiceError(f"SSH connection to {self.target} failed: {result.stderr.strip()}")
        except ServiceError:
            shutil.rmtree(self._control_dir, ignore_errors=True)
            self._control_dir = None
            raise

    def exec(self, command: str) -> str:
        """
        Run a command on the remote host.

        Returns:
            Command stdout

        Raises:
            RemoteCommandError: If the command exits non-zero
        """
        self.open()
        result = self._run(self._ssh(self.target, command))
        if result.returncode != 0:
            raise RemoteCommandError(command, result.returncode, result.stderr)
        return result.stdout

    def remove_tree(self, path: str | Path) -> None:
        """Recursively delete a remote path."""
        self.exec(f"rm -fr {shlex.quote(str(path))}")

    def close(self) -> None:
        """Stop the control master, if one was started."""
        if not self.is_open:
            return

        logger.debug(f"Closing SSH session to {self.target}")
        try:
            self._run(self._ssh("-O", "exit", self.target))
        finally:
            shutil.rmtree(self._control_dir, ignore_errors=True)
            self._control_dir = None

    def __enter__(self) -> "RemoteShell":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
