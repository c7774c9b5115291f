from __future__ import annotations

import shlex
from collections.abc import Sequence


class GitObjectsError(Exception):
    """Base class for every error raised while reading a repository."""


class CommandFailedError(GitObjectsError):
    """The git process exited non-zero, timed out, or could not start."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: int | None,
        stderr: str = "",
        timed_out: bool = False,
    ) -> None:
        self.command = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out
        if timed_out:
            status = "timed out"
        elif returncode is None:
            status = "could not start"
        else:
            status = f"exited with {returncode}"
        message = f"Command '{shlex.join(self.command)}' {status}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)


class ParseError(GitObjectsError):
    """Command output did not match the expected format."""


class NotFoundError(GitObjectsError):
    """A lookup found no matching object or reference."""


class ReferenceNotFoundError(NotFoundError):
    def __init__(self, fullname: str) -> None:
        self.fullname = fullname
        super().__init__(f"Reference not found: {fullname}")


class InvalidHashError(GitObjectsError, ValueError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Not a valid object hash: {value!r}")
