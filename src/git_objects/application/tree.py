from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from git_objects.application.lazy import LazyObject
from git_objects.domain.errors import NotFoundError
from git_objects.domain.models import TreeEntry
from git_objects.infrastructure.parsers import parse_tree

if TYPE_CHECKING:
    from git_objects.application.blob import Blob
    from git_objects.application.repository import Repository

logger = logging.getLogger(__name__)


class Tree(LazyObject):
    """A directory listing, read with ``git ls-tree -z`` on first access."""

    def __init__(self, repository: Repository, hash: str) -> None:
        super().__init__()
        self._repository = repository
        self._hash = hash
        self._entries: tuple[TreeEntry, ...] = ()
        self._by_name: dict[str, TreeEntry] = {}

    def __repr__(self) -> str:
        return f"<Tree {self._hash}>"

    def _load(self) -> None:
        result = self._repository.run("ls-tree", "-z", self._hash)
        entries = parse_tree(result.stdout)
        self._entries = tuple(entries)
        self._by_name = {e.name: e for e in entries}
        logger.debug("Loaded tree %s (%d entries)", self._hash, len(entries))

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def entries(self) -> tuple[TreeEntry, ...]:
        self._ensure_loaded()
        return self._entries

    def names(self) -> list[str]:
        return [e.name for e in self.entries]

    def entry(self, name: str) -> TreeEntry:
        self._ensure_loaded()
        if name not in self._by_name:
            raise NotFoundError(f"No entry {name!r} in tree {self._hash}")
        return self._by_name[name]

    def get(self, name: str) -> Tree | Blob | TreeEntry:
        """Object for ``name``; submodule entries come back as the raw entry."""
        entry = self.entry(name)
        if entry.is_tree:
            return self._repository.get_tree(entry.hash)
        if entry.is_blob:
            return self._repository.get_blob(entry.hash)
        return entry

    def resolve(self, path: str) -> Tree | Blob | TreeEntry:
        """Walk a slash-separated path down from this tree."""
        parts = [p for p in path.split("/") if p]
        if not parts:
            return self
        current: Tree | Blob | TreeEntry = self
        for i, part in enumerate(parts):
            if not isinstance(current, Tree):
                walked = "/".join(parts[:i])
                raise NotFoundError(f"{walked!r} is not a directory in tree {self._hash}")
            current = current.get(part)
        return current
