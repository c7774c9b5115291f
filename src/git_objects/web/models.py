from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ReferenceOut(BaseModel):
    fullname: str
    name: str
    kind: str
    commit_hash: str


class SignatureOut(BaseModel):
    name: str
    email: str
    date: datetime


class CommitOut(BaseModel):
    hash: str
    tree_hash: str
    parent_hashes: list[str]
    author: SignatureOut
    committer: SignatureOut
    message: str
    short_message: str
    branches: list[str]
    tags: list[str]


class TreeEntryOut(BaseModel):
    mode: str
    type: str
    hash: str
    name: str


class TreeOut(BaseModel):
    hash: str
    entries: list[TreeEntryOut]


class BlobOut(BaseModel):
    hash: str
    size: int
    text: str
