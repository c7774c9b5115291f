from __future__ import annotations

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class LoadState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"
    FAILED = "failed"


class LazyObject:
    """Base for objects that read their data from git on first access.

    Subclasses implement ``_load`` to fetch, parse and assign every field
    in one go. ``_ensure_loaded`` runs it at most once per instance, under
    a lock, so concurrent first accesses issue a single command. A load
    that raises leaves the object FAILED and the same exception is raised
    again by every later access.
    """

    def __init__(self) -> None:
        self._state = LoadState.UNINITIALIZED
        self._error: BaseException | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> LoadState:
        return self._state

    def _load(self) -> None:
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._state is LoadState.INITIALIZED:
            return
        with self._lock:
            if self._state is LoadState.UNINITIALIZED:
                self._state = LoadState.INITIALIZING
                try:
                    self._load()
                except Exception as exc:
                    self._error = exc
                    self._state = LoadState.FAILED
                    logger.debug("Loading %r failed: %s", self, exc)
                    raise
                self._state = LoadState.INITIALIZED
                return
        if self._state is LoadState.FAILED:
            raise self._error
