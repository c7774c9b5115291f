from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from git_objects.application.lazy import LazyObject
from git_objects.domain.models import CommitData
from git_objects.infrastructure.parsers import decode_commit, parse_commit, parse_short_log

if TYPE_CHECKING:
    from git_objects.application.repository import Repository
    from git_objects.application.tree import Tree

logger = logging.getLogger(__name__)

SHORT_MESSAGE_LENGTH = 80
TRUNCATION_MARKER = "..."


def shorten_message(message: str) -> str:
    """Return the first line of ``message``, cut to 80 characters.

    A cut line (or a message without line break that is 80 characters or
    longer) gets a trailing "...".
    """
    pos = message.find("\n")
    if pos == -1:
        if len(message) < SHORT_MESSAGE_LENGTH:
            return message
        return message[:SHORT_MESSAGE_LENGTH] + TRUNCATION_MARKER
    if pos < SHORT_MESSAGE_LENGTH:
        return message[:pos]
    return message[:SHORT_MESSAGE_LENGTH] + TRUNCATION_MARKER


class Commit(LazyObject):
    """A commit, read with ``git cat-file commit`` on first field access."""

    def __init__(self, repository: Repository, hash: str) -> None:
        super().__init__()
        self._repository = repository
        self._hash = hash
        self._data: CommitData | None = None
        self._short_message: str | None = None
        self._tree: Tree | None = None

    def __repr__(self) -> str:
        return f"<Commit {self._hash}>"

    def _load(self) -> None:
        result = self._repository.run("cat-file", "commit", self._hash)
        self._data = parse_commit(decode_commit(result.stdout))
        logger.debug("Loaded commit %s", self._hash)

    @property
    def data(self) -> CommitData:
        self._ensure_loaded()
        return self._data

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def repository(self) -> Repository:
        return self._repository

    @property
    def tree_hash(self) -> str:
        return self.data.tree

    @property
    def parent_hashes(self) -> tuple[str, ...]:
        return self.data.parents

    @property
    def parents(self) -> list[Commit]:
        return [self._repository.get_commit(h) for h in self.data.parents]

    @property
    def is_merge(self) -> bool:
        return len(self.data.parents) > 1

    @property
    def tree(self) -> Tree:
        tree_hash = self.data.tree
        if self._tree is None:
            self._tree = self._repository.get_tree(tree_hash)
        return self._tree

    @property
    def author_name(self) -> str:
        return self.data.author.name

    @property
    def author_email(self) -> str:
        return self.data.author.email

    @property
    def author_date(self) -> datetime:
        return self.data.author.date

    @property
    def committer_name(self) -> str:
        return self.data.committer.name

    @property
    def committer_email(self) -> str:
        return self.data.committer.email

    @property
    def committer_date(self) -> datetime:
        return self.data.committer.date

    @property
    def message(self) -> str:
        return self.data.message

    @property
    def short_message(self) -> str:
        message = self.data.message
        if self._short_message is None:
            self._short_message = shorten_message(message)
        return self._short_message

    def last_modification(self, path: str) -> Commit | None:
        """Most recent commit in this commit's history touching ``path``.

        Returns ``None`` when no commit touched it.
        """
        if path.startswith("/"):
            path = path[1:]
        result = self._repository.run(
            "log", "--format=format:%H", "-n", "1", self._hash, "--", path,
        )
        found = parse_short_log(result.stdout.decode("utf-8", errors="replace"))
        if found is None:
            return None
        return self._repository.get_commit(found)
