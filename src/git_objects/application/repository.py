from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from git_objects.application.blob import Blob
from git_objects.application.commit import Commit
from git_objects.application.references import ReferenceBag
from git_objects.application.tree import Tree
from git_objects.config import Settings
from git_objects.domain.errors import CommandFailedError, InvalidHashError, NotFoundError
from git_objects.domain.models import CommandResult, is_valid_hash
from git_objects.domain.ports import CommandRunner
from git_objects.infrastructure.command_runner import SubprocessRunner
from git_objects.infrastructure.parsers import parse_short_log

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_git_dir(path: Path) -> bool:
    return (path / "HEAD").is_file() and (path / "objects").is_dir()


class Repository:
    """Entry point to the objects of one repository on disk.

    Commits, trees and blobs are handed out by hash and are memoized: asking
    twice for the same hash returns the same instance.
    """

    def __init__(
        self,
        repo_path: str | Path,
        runner: CommandRunner | None = None,
        settings: Settings | None = None,
    ) -> None:
        path = Path(repo_path).resolve()
        if not ((path / ".git").exists() or _is_git_dir(path)):
            raise ValueError(f"Not a git repository: {path}")
        self._path = str(path)
        self._settings = settings or Settings()
        self._runner = runner or SubprocessRunner(timeout=self._settings.timeout)
        self._lock = threading.Lock()
        self._commits: dict[str, Commit] = {}
        self._trees: dict[str, Tree] = {}
        self._blobs: dict[str, Blob] = {}
        self._references: ReferenceBag | None = None

    def __repr__(self) -> str:
        return f"<Repository {self._path}>"

    @property
    def path(self) -> str:
        return self._path

    @property
    def settings(self) -> Settings:
        return self._settings

    def run(self, *args: str, check: bool = True) -> CommandResult:
        """Run a git subcommand in the repository directory."""
        argv = (self._settings.git_binary, *args)
        result = self._runner.run(argv, self._path)
        if check and not result.ok:
            logger.warning(
                "git %s failed (%d): %s", args[0] if args else "", result.returncode, result.stderr_text,
            )
            raise CommandFailedError(argv, result.returncode, result.stderr_text)
        return result

    def _memoized(self, cache: dict[str, T], hash: str, factory: Callable[[Repository, str], T]) -> T:
        if not is_valid_hash(hash):
            raise InvalidHashError(hash)
        with self._lock:
            obj = cache.get(hash)
            if obj is None:
                obj = cache[hash] = factory(self, hash)
            return obj

    def get_commit(self, hash: str) -> Commit:
        return self._memoized(self._commits, hash, Commit)

    def get_tree(self, hash: str) -> Tree:
        return self._memoized(self._trees, hash, Tree)

    def get_blob(self, hash: str) -> Blob:
        return self._memoized(self._blobs, hash, Blob)

    @property
    def references(self) -> ReferenceBag:
        with self._lock:
            if self._references is None:
                self._references = ReferenceBag(self)
            return self._references

    def resolve(self, rev: str) -> Commit:
        """Commit for any revision expression (hash prefix, branch, tag, HEAD~2...)."""
        if rev.startswith("-"):
            raise NotFoundError(f"Cannot resolve revision: {rev}")
        result = self.run("rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}", check=False)
        if not result.ok and result.stderr_text:
            raise CommandFailedError(result.args, result.returncode, result.stderr_text)
        found = parse_short_log(result.stdout.decode("utf-8", errors="replace")) if result.ok else None
        if found is None:
            raise NotFoundError(f"Cannot resolve revision: {rev}")
        return self.get_commit(found)

    def head(self) -> Commit:
        return self.resolve("HEAD")
