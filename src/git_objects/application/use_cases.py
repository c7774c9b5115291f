from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from git_objects.application.commit import Commit
from git_objects.application.references import ReferenceBag
from git_objects.domain.models import Reference


@dataclass(frozen=True)
class CommitSummary:
    hash: str
    short_message: str
    author_name: str
    author_email: str
    author_date: datetime
    parent_hashes: tuple[str, ...]
    branches: list[str]
    tags: list[str]


@dataclass(frozen=True)
class ReferenceListing:
    branches: list[Reference]
    tags: list[Reference]

    @property
    def total(self) -> int:
        return len(self.branches) + len(self.tags)


def walk_first_parent(commit: Commit, limit: int | None = None) -> list[Commit]:
    """Follow first parents from ``commit``, newest first, ``commit`` included."""
    history: list[Commit] = []
    seen: set[str] = set()
    current: Commit | None = commit
    while current is not None and current.hash not in seen:
        if limit is not None and len(history) >= limit:
            break
        history.append(current)
        seen.add(current.hash)
        parents = current.parent_hashes
        current = current.repository.get_commit(parents[0]) if parents else None
    return history


def commit_summary(commit: Commit, references: ReferenceBag) -> CommitSummary:
    return CommitSummary(
        hash=commit.hash,
        short_message=commit.short_message,
        author_name=commit.author_name,
        author_email=commit.author_email,
        author_date=commit.author_date,
        parent_hashes=commit.parent_hashes,
        branches=references.resolve_branches(commit.hash),
        tags=references.resolve_tags(commit.hash),
    )


def reference_listing(references: ReferenceBag) -> ReferenceListing:
    return ReferenceListing(branches=references.branches, tags=references.tags)
