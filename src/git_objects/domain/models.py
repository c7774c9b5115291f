from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"

# SHA-1 object names are 40 hex chars, SHA-256 ones 64.
HASH_PATTERN = r"[0-9a-f]{40}(?:[0-9a-f]{24})?"
_HASH_RE = re.compile(HASH_PATTERN)


def is_valid_hash(value: str) -> bool:
    return isinstance(value, str) and _HASH_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one external command."""

    args: tuple[str, ...]
    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()


@dataclass(frozen=True)
class Signature:
    """Author or committer line of a commit."""

    name: str
    email: str
    date: datetime  # timezone-aware, in the signer's own offset


@dataclass(frozen=True)
class CommitData:
    """Fields of one commit object, as read by ``git cat-file commit``."""

    tree: str
    parents: tuple[str, ...]
    author: Signature
    committer: Signature
    message: str


@dataclass(frozen=True)
class TreeEntry:
    mode: str
    type: str  # blob, tree or commit (submodule)
    hash: str
    name: str

    @property
    def is_tree(self) -> bool:
        return self.type == "tree"

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"


class RefKind(Enum):
    BRANCH = "branch"
    TAG = "tag"

    @property
    def prefix(self) -> str:
        return BRANCH_PREFIX if self is RefKind.BRANCH else TAG_PREFIX


@dataclass(frozen=True)
class Reference:
    """A named pointer to a commit, classified when the listing is parsed."""

    fullname: str
    commit_hash: str
    kind: RefKind

    @property
    def name(self) -> str:
        return self.fullname[len(self.kind.prefix):]

    @property
    def is_branch(self) -> bool:
        return self.kind is RefKind.BRANCH

    @property
    def is_tag(self) -> bool:
        return self.kind is RefKind.TAG
