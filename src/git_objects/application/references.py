from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from git_objects.application.lazy import LazyObject, LoadState
from git_objects.domain.errors import CommandFailedError, NotFoundError, ParseError, ReferenceNotFoundError
from git_objects.domain.models import BRANCH_PREFIX, TAG_PREFIX, Reference
from git_objects.infrastructure.parsers import classify_reference, parse_references

if TYPE_CHECKING:
    from git_objects.application.repository import Repository

logger = logging.getLogger(__name__)


class ReferenceBag(LazyObject):
    """Branches and tags of a repository, listed once by ``git show-ref``.

    The bag is a snapshot: later changes in the repository are only seen
    after ``reload()``.
    """

    def __init__(self, repository: Repository) -> None:
        super().__init__()
        self._repository = repository
        self._references: dict[str, Reference] = {}
        self._branches: tuple[Reference, ...] = ()
        self._tags: tuple[Reference, ...] = ()

    def __repr__(self) -> str:
        return f"<ReferenceBag {self._repository.path}>"

    def _load(self) -> None:
        result = self._repository.run("show-ref", "--tags", "--heads", check=False)
        output = result.stdout.decode("utf-8", errors="replace")
        # show-ref exits 1 without any output when there is nothing to list.
        if not result.ok and (output or result.stderr_text):
            raise CommandFailedError(result.args, result.returncode, result.stderr_text)

        references: dict[str, Reference] = {}
        branches: list[Reference] = []
        tags: list[Reference] = []
        for commit_hash, fullname in parse_references(output):
            if fullname in references:
                raise ParseError(f"Duplicate reference {fullname!r}")
            reference = classify_reference(commit_hash, fullname)
            references[fullname] = reference
            (branches if reference.is_branch else tags).append(reference)

        self._references = references
        self._branches = tuple(branches)
        self._tags = tuple(tags)
        logger.debug(
            "Loaded %d branches and %d tags from %s",
            len(branches), len(tags), self._repository.path,
        )

    def reload(self) -> None:
        """Discard the snapshot and list the references again."""
        with self._lock:
            self._state = LoadState.UNINITIALIZED
            self._error = None
        self._ensure_loaded()

    def get(self, fullname: str) -> Reference:
        self._ensure_loaded()
        try:
            return self._references[fullname]
        except KeyError:
            raise ReferenceNotFoundError(fullname) from None

    def has(self, fullname: str) -> bool:
        self._ensure_loaded()
        return fullname in self._references

    def get_branch(self, name: str) -> Reference:
        return self.get(BRANCH_PREFIX + name)

    def get_tag(self, name: str) -> Reference:
        return self.get(TAG_PREFIX + name)

    def all(self) -> dict[str, Reference]:
        self._ensure_loaded()
        return dict(self._references)

    @property
    def branches(self) -> list[Reference]:
        self._ensure_loaded()
        return list(self._branches)

    @property
    def tags(self) -> list[Reference]:
        self._ensure_loaded()
        return list(self._tags)

    def has_branches(self) -> bool:
        self._ensure_loaded()
        return len(self._branches) > 0

    def first_branch(self) -> Reference:
        self._ensure_loaded()
        if not self._branches:
            raise NotFoundError(f"No branches in {self._repository.path}")
        return self._branches[0]

    def resolve_tags(self, commit_hash: str) -> list[str]:
        self._ensure_loaded()
        return [r.name for r in self._tags if r.commit_hash == commit_hash]

    def resolve_branches(self, commit_hash: str) -> list[str]:
        self._ensure_loaded()
        return [r.name for r in self._branches if r.commit_hash == commit_hash]

    def count(self) -> int:
        self._ensure_loaded()
        return len(self._references)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Reference]:
        self._ensure_loaded()
        return iter(list(self._references.values()))

    def __contains__(self, fullname: object) -> bool:
        return isinstance(fullname, str) and self.has(fullname)
