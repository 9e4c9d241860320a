"""Service errors - raised by every external client."""


class ServiceError(Exception):
    """Raised when a call to an external service fails."""

    pass


class NotFoundError(ServiceError):
    """Raised when the requested object, datastream or step does not exist."""

    pass


class RemoteCommandError(ServiceError):
    """Raised when a command on a remote host exits non-zero."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"'{command}' exited with {returncode}{detail}")
