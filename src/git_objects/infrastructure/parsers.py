"""Parsers for the plumbing output consumed by the object model.

Every function here is pure: raw text in, typed records out, and a
``ParseError`` whenever the input does not have the expected shape.
"""

from __future__ import annotations

import codecs
import re
from datetime import datetime, timedelta, timezone

from git_objects.domain.errors import ParseError
from git_objects.domain.models import (
    BRANCH_PREFIX,
    HASH_PATTERN,
    TAG_PREFIX,
    CommitData,
    Reference,
    RefKind,
    Signature,
    TreeEntry,
)

# name <email> timestamp timezone; the email is taken between the first
# '<' and the last '>' so it may hold any character.
_SIGNATURE_RE = re.compile(
    r"^(?P<name>[^<]*?) ?<(?P<email>.*)> (?P<ts>-?\d+) (?P<tz>[+-]\d{4})$"
)
_REFERENCE_RE = re.compile(rf"^(?P<hash>{HASH_PATTERN})\s+(?P<name>\S+)$")
_TREE_ENTRY_RE = re.compile(
    rf"^(?P<mode>[0-7]{{6}}) (?P<type>blob|tree|commit) (?P<hash>{HASH_PATTERN})\t(?P<name>.+)$",
    re.DOTALL,
)
_HASH_RE = re.compile(HASH_PATTERN)


def _parse_offset(value: str) -> timezone:
    sign = -1 if value[0] == "-" else 1
    hours, minutes = int(value[1:3]), int(value[3:5])
    if minutes > 59:
        raise ParseError(f"Malformed timezone offset: {value!r}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_signature(value: str) -> Signature:
    """Parse the value of an ``author``/``committer`` header."""
    match = _SIGNATURE_RE.match(value)
    if not match:
        raise ParseError(f"Malformed signature: {value!r}")
    try:
        tz = _parse_offset(match.group("tz"))
        date = datetime.fromtimestamp(int(match.group("ts")), tz=tz)
    except (ValueError, OverflowError, OSError) as exc:
        raise ParseError(f"Malformed signature date: {value!r}") from exc
    return Signature(
        name=match.group("name"),
        email=match.group("email"),
        date=date,
    )


def decode_commit(data: bytes) -> str:
    """Decode a raw commit object using its ``encoding`` header.

    Without the header, or with a codec Python does not know, UTF-8 is used.
    Undecodable bytes are replaced.
    """
    head = data.split(b"\n\n", 1)[0]
    encoding = "utf-8"
    for line in head.split(b"\n"):
        if line.startswith(b"encoding "):
            name = line[len(b"encoding "):].decode("ascii", errors="replace").strip()
            try:
                encoding = codecs.lookup(name).name
            except LookupError:
                pass
            break
    return data.decode(encoding, errors="replace")


def parse_commit(text: str) -> CommitData:
    """Parse ``git cat-file commit`` output into its fields.

    Headers run up to the first blank line, the message is everything
    after it. Unknown headers and continuation lines are skipped.
    """
    head, sep, message = text.partition("\n\n")
    if not sep:
        # No message at all: the object ends right after the headers.
        head, message = text.rstrip("\n"), ""

    tree: str | None = None
    parents: list[str] = []
    author: Signature | None = None
    committer: Signature | None = None

    for line in head.split("\n"):
        if not line or line.startswith(" "):
            continue
        key, _, value = line.partition(" ")
        if key == "tree":
            if tree is not None:
                raise ParseError("Commit has more than one tree header")
            if not _HASH_RE.fullmatch(value):
                raise ParseError(f"Malformed tree hash: {value!r}")
            tree = value
        elif key == "parent":
            if not _HASH_RE.fullmatch(value):
                raise ParseError(f"Malformed parent hash: {value!r}")
            parents.append(value)
        elif key == "author":
            if author is not None:
                raise ParseError("Commit has more than one author header")
            author = parse_signature(value)
        elif key == "committer":
            if committer is not None:
                raise ParseError("Commit has more than one committer header")
            committer = parse_signature(value)

    if tree is None:
        raise ParseError("Commit has no tree header")
    if author is None:
        raise ParseError("Commit has no author header")
    if committer is None:
        raise ParseError("Commit has no committer header")

    return CommitData(
        tree=tree,
        parents=tuple(parents),
        author=author,
        committer=committer,
        message=message,
    )


def parse_references(text: str) -> list[tuple[str, str]]:
    """Parse ``git show-ref`` output into (hash, fullname) pairs.

    A single malformed line rejects the whole listing.
    """
    rows: list[tuple[str, str]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        match = _REFERENCE_RE.match(line)
        if not match:
            raise ParseError(f"Malformed reference line: {line!r}")
        rows.append((match.group("hash"), match.group("name")))
    return rows


def classify_reference(commit_hash: str, fullname: str) -> Reference:
    if fullname.startswith(BRANCH_PREFIX):
        kind = RefKind.BRANCH
    elif fullname.startswith(TAG_PREFIX):
        kind = RefKind.TAG
    else:
        raise ParseError(f"Unable to classify reference {fullname!r}")
    if len(fullname) == len(kind.prefix):
        raise ParseError(f"Reference has an empty name: {fullname!r}")
    return Reference(fullname=fullname, commit_hash=commit_hash, kind=kind)


def parse_short_log(text: str) -> str | None:
    """Parse ``git log --format=format:%H -n 1`` output.

    Empty output means nothing matched and yields ``None``.
    """
    value = text.strip()
    if not value:
        return None
    if not _HASH_RE.fullmatch(value):
        raise ParseError(f"Expected a single commit hash, got {value!r}")
    return value


def parse_tree(data: bytes) -> list[TreeEntry]:
    """Parse NUL-terminated ``git ls-tree -z`` records."""
    entries: list[TreeEntry] = []
    for record in data.decode("utf-8", errors="surrogateescape").split("\0"):
        if not record:
            continue
        match = _TREE_ENTRY_RE.match(record)
        if not match:
            raise ParseError(f"Malformed tree entry: {record!r}")
        entries.append(
            TreeEntry(
                mode=match.group("mode"),
                type=match.group("type"),
                hash=match.group("hash"),
                name=match.group("name"),
            )
        )
    return entries
