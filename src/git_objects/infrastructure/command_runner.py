import logging
import shlex
import subprocess
from collections.abc import Sequence

from git_objects.domain.errors import CommandFailedError
from git_objects.domain.models import CommandResult

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """CommandRunner backed by ``subprocess.run``.

    Arguments are passed as an argv list, never through a shell, so hashes
    and paths reach git verbatim.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, args: Sequence[str], cwd: str) -> CommandResult:
        argv = tuple(args)
        logger.debug("Running %s in %s", shlex.join(argv), cwd)
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Command timed out after %ss: %s", self._timeout, shlex.join(argv))
            raise CommandFailedError(argv, None, f"timed out after {self._timeout}s", timed_out=True)
        except OSError as exc:
            logger.warning("Command could not start: %s (%s)", shlex.join(argv), exc)
            raise CommandFailedError(argv, None, str(exc)) from exc
        return CommandResult(
            args=argv,
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
        )
