from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from git_objects.domain.models import CommandResult


class CommandRunner(Protocol):
    def run(self, args: Sequence[str], cwd: str) -> CommandResult: ...
