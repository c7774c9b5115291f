from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field

ENV_PREFIX = "GIT_OBJECTS_"


class Settings(BaseModel):
    git_binary: str = "git"
    timeout: float | None = Field(default=None, gt=0)  # seconds per git command
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from GIT_OBJECTS_GIT, _TIMEOUT and _LOG_LEVEL."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get(f"{ENV_PREFIX}GIT"):
            values["git_binary"] = env[f"{ENV_PREFIX}GIT"]
        if env.get(f"{ENV_PREFIX}TIMEOUT"):
            values["timeout"] = env[f"{ENV_PREFIX}TIMEOUT"]
        if env.get(f"{ENV_PREFIX}LOG_LEVEL"):
            values["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"].upper()
        return cls(**values)
