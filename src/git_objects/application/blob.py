from __future__ import annotations

from typing import TYPE_CHECKING

from git_objects.application.lazy import LazyObject

if TYPE_CHECKING:
    from git_objects.application.repository import Repository


class Blob(LazyObject):
    """File content, read with ``git cat-file blob`` on first access."""

    def __init__(self, repository: Repository, hash: str) -> None:
        super().__init__()
        self._repository = repository
        self._hash = hash
        self._content = b""

    def __repr__(self) -> str:
        return f"<Blob {self._hash}>"

    def _load(self) -> None:
        self._content = self._repository.run("cat-file", "blob", self._hash).stdout

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def content(self) -> bytes:
        self._ensure_loaded()
        return self._content

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def size(self) -> int:
        return len(self.content)
