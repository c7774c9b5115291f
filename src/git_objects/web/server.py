"""Launch the read-only HTTP API with uvicorn."""
from __future__ import annotations

import sys

import uvicorn

from git_objects.web.api import app


def launch(repo_path: str, api_port: int = 8000, host: str = "127.0.0.1") -> None:
    app.state.repo_path = repo_path

    print(f"API server:  http://{host}:{api_port}/api/refs")
    print(f"Docs:        http://{host}:{api_port}/docs")
    print()

    try:
        uvicorn.run(app, host=host, port=api_port, log_level="warning")
    except KeyboardInterrupt:
        print("\nShutting down.")
        sys.exit(0)
