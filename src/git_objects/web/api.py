from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import asynccontextmanager, contextmanager

from fastapi import FastAPI, HTTPException, Query

from git_objects.application.commit import Commit
from git_objects.application.repository import Repository
from git_objects.application.tree import Tree
from git_objects.config import Settings
from git_objects.domain.errors import (
    CommandFailedError,
    InvalidHashError,
    NotFoundError,
    ParseError,
)
from git_objects.domain.models import Reference
from git_objects.web.models import (
    BlobOut,
    CommitOut,
    ReferenceOut,
    SignatureOut,
    TreeEntryOut,
    TreeOut,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo_path = getattr(app.state, "repo_path", None)
    if repo_path is None:
        raise RuntimeError("app.state.repo_path must be set before startup")
    settings = getattr(app.state, "settings", None) or Settings.from_env()
    app.state.repository = Repository(repo_path, settings=settings)
    yield


app = FastAPI(title="git-objects", lifespan=lifespan)


def _repo() -> Repository:
    return app.state.repository


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Map domain errors onto HTTP status codes."""
    try:
        yield
    except InvalidHashError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CommandFailedError as e:
        logger.warning("%s", e)
        if e.timed_out:
            raise HTTPException(status_code=504, detail=str(e))
        if e.returncode is None:
            raise HTTPException(status_code=502, detail=str(e))
        # git reports unknown objects through a failing exit status.
        raise HTTPException(status_code=404, detail=str(e))
    except ParseError as e:
        logger.error("Unexpected git output: %s", e)
        raise HTTPException(status_code=502, detail=str(e))


def _reference_out(reference: Reference) -> ReferenceOut:
    return ReferenceOut(
        fullname=reference.fullname,
        name=reference.name,
        kind=reference.kind.value,
        commit_hash=reference.commit_hash,
    )


def _commit_out(commit: Commit) -> CommitOut:
    references = _repo().references
    data = commit.data
    return CommitOut(
        hash=commit.hash,
        tree_hash=data.tree,
        parent_hashes=list(data.parents),
        author=SignatureOut(name=data.author.name, email=data.author.email, date=data.author.date),
        committer=SignatureOut(
            name=data.committer.name, email=data.committer.email, date=data.committer.date,
        ),
        message=data.message,
        short_message=commit.short_message,
        branches=references.resolve_branches(commit.hash),
        tags=references.resolve_tags(commit.hash),
    )


@app.get("/api/refs", response_model=list[ReferenceOut])
def list_refs():
    with _translate_errors():
        return [_reference_out(r) for r in _repo().references]


@app.get("/api/branches", response_model=list[ReferenceOut])
def list_branches():
    with _translate_errors():
        return [_reference_out(r) for r in _repo().references.branches]


@app.get("/api/tags", response_model=list[ReferenceOut])
def list_tags():
    with _translate_errors():
        return [_reference_out(r) for r in _repo().references.tags]


@app.get("/api/commits/{rev}", response_model=CommitOut)
def get_commit(rev: str):
    with _translate_errors():
        return _commit_out(_repo().resolve(rev))


@app.get("/api/commits/{rev}/parents", response_model=list[CommitOut])
def get_parents(rev: str):
    with _translate_errors():
        return [_commit_out(p) for p in _repo().resolve(rev).parents]


@app.get("/api/commits/{rev}/tree", response_model=TreeOut)
def get_commit_tree(rev: str, path: str = Query("", description="Directory inside the tree")):
    with _translate_errors():
        tree = _repo().resolve(rev).tree.resolve(path)
        if not isinstance(tree, Tree):
            raise NotFoundError(f"Not a directory: {path}")
        return TreeOut(
            hash=tree.hash,
            entries=[TreeEntryOut(mode=e.mode, type=e.type, hash=e.hash, name=e.name) for e in tree.entries],
        )


@app.get("/api/commits/{rev}/last-modification", response_model=CommitOut)
def get_last_modification(rev: str, path: str = Query(..., description="File or directory path")):
    with _translate_errors():
        found = _repo().resolve(rev).last_modification(path)
        if found is None:
            raise NotFoundError(f"No commit touches {path}")
        return _commit_out(found)


@app.get("/api/blobs/{hash}", response_model=BlobOut)
def get_blob(hash: str):
    with _translate_errors():
        blob = _repo().get_blob(hash)
        return BlobOut(hash=blob.hash, size=blob.size, text=blob.text)
