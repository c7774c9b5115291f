import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


def git(repo: Path, *args: str, env: dict[str, str] | None = None) -> str:
    """Run git in ``repo`` and return its stripped stdout."""
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True, check=True, text=True,
        env=env,
    )
    return result.stdout.strip()


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository."""
    subprocess.run(
        ["git", "init", "-b", "main", str(tmp_path)],
        capture_output=True, check=True,
    )
    git(tmp_path, "config", "user.name", "Test User")
    git(tmp_path, "config", "user.email", "test@example.com")
    git(tmp_path, "config", "commit.gpgsign", "false")
    git(tmp_path, "config", "tag.gpgsign", "false")
    return tmp_path


def commit_file(
    repo: Path,
    file_path: str,
    content: str,
    message: str,
    days_ago: int = 0,
    author_name: str = "Test User",
    author_email: str = "test@example.com",
) -> str:
    """Create a commit at a known relative date and return its hash."""
    full_path = repo / file_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content)

    date = datetime.now(timezone.utc) - timedelta(days=days_ago)
    date_str = date.strftime("%Y-%m-%dT%H:%M:%S %z")

    git(repo, "add", file_path)
    env = {
        **os.environ,
        "GIT_AUTHOR_DATE": date_str,
        "GIT_COMMITTER_DATE": date_str,
        "GIT_AUTHOR_NAME": author_name,
        "GIT_AUTHOR_EMAIL": author_email,
        "GIT_COMMITTER_NAME": author_name,
        "GIT_COMMITTER_EMAIL": author_email,
    }
    git(repo, "commit", "-m", message, env=env)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_repo_with_history(tmp_git_repo: Path) -> Path:
    """Create a repo with 5 commits across 3 files over 60 days."""
    commit_file(tmp_git_repo, "README.md", "# Project\n", "Initial commit", days_ago=60)
    commit_file(tmp_git_repo, "src/main.py", "print('hello')\n", "Add main", days_ago=45)
    commit_file(tmp_git_repo, "src/utils.py", "def helper(): pass\n", "Add utils", days_ago=30)
    commit_file(tmp_git_repo, "src/main.py", "print('hello world')\n", "Update main", days_ago=15)
    commit_file(tmp_git_repo, "README.md", "# Project\nUpdated.\n", "Update README\n\nMore details.", days_ago=5)
    git(tmp_git_repo, "tag", "v1.0", "HEAD~2")
    git(tmp_git_repo, "tag", "latest")
    return tmp_git_repo


@pytest.fixture
def merge_repo(tmp_git_repo: Path) -> Path:
    """Create a repo whose HEAD merges a feature branch into main.

    main:    base -- main-change -- merge
    feature:     \\-- feature-change --/
    """
    commit_file(tmp_git_repo, "base.txt", "base\n", "Base", days_ago=10)
    git(tmp_git_repo, "checkout", "-q", "-b", "feature")
    commit_file(tmp_git_repo, "feature.txt", "feature\n", "Feature change", days_ago=8)
    git(tmp_git_repo, "checkout", "-q", "main")
    commit_file(tmp_git_repo, "main.txt", "main\n", "Main change", days_ago=6)
    git(tmp_git_repo, "merge", "-q", "--no-ff", "-m", "Merge feature", "feature")
    return tmp_git_repo
