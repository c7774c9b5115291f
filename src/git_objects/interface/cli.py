import argparse
import logging
import sys

from git_objects.application.commit import Commit
from git_objects.application.repository import Repository
from git_objects.application.tree import Tree
from git_objects.application.use_cases import (
    commit_summary,
    reference_listing,
    walk_first_parent,
)
from git_objects.config import Settings
from git_objects.domain.errors import GitObjectsError, NotFoundError

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """Parse a strictly positive integer argument."""
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number <= 0:
        raise argparse.ArgumentTypeError(
            f"Invalid count '{value}'. Use a positive integer, e.g. 10"
        )
    return number


def _error_exit(msg: str) -> None:
    """Print error message to stderr and exit with code 1."""
    print(f"Error: {msg}", file=sys.stderr)
    sys.exit(1)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_table(rows, columns, limit=20, suffix="rows") -> None:
    """Generic table printer.

    Args:
        rows: list of objects to print.
        columns: list of (header, width, value_fn) tuples. A width of None
            makes the column as wide as its longest value.
        limit: max rows to print.
        suffix: word used in "... and N more {suffix}" message.
    """
    if not rows:
        return

    widths = []
    for header, width, value_fn in columns:
        if width is None:
            width = max(len(header), *(len(str(value_fn(r))) for r in rows))
        widths.append(width)

    header_line = "  ".join(
        f"{header:<{w}}" for (header, _width, _fn), w in zip(columns, widths)
    )
    print(header_line)
    print("-" * len(header_line))

    for r in rows[:limit]:
        print("  ".join(
            f"{str(value_fn(r)):<{w}}" for (_h, _width, value_fn), w in zip(columns, widths)
        ).rstrip())

    if len(rows) > limit:
        print(f"  ... and {len(rows) - limit} more {suffix}")


def _print_commit(repo: Repository, commit: Commit) -> None:
    summary = commit_summary(commit, repo.references)
    print(f"Commit:     {summary.hash}")
    print(f"Author:     {summary.author_name} <{summary.author_email}>")
    print(f"Date:       {summary.author_date.isoformat()}")
    if summary.parent_hashes:
        print(f"Parents:    {', '.join(summary.parent_hashes)}")
    else:
        print("Parents:    (root commit)")
    if summary.branches:
        print(f"Branches:   {', '.join(summary.branches)}")
    if summary.tags:
        print(f"Tags:       {', '.join(summary.tags)}")
    print()
    print(f"    {summary.short_message}")


def _print_references(repo: Repository) -> None:
    listing = reference_listing(repo.references)
    print(f"\nReferences ({listing.total})")
    if not listing.total:
        print("  (none)")
        return
    _print_table(
        [*listing.branches, *listing.tags],
        [
            ("Kind", 6, lambda r: r.kind.value),
            ("Name", None, lambda r: r.name),
            ("Commit", 40, lambda r: r.commit_hash),
        ],
        limit=50,
        suffix="references",
    )


def _print_log(commit: Commit, count: int) -> None:
    history = walk_first_parent(commit, limit=count)
    print(f"\nHistory (first parent, {len(history)} commits)")
    _print_table(
        history,
        [
            ("Commit", 12, lambda c: c.hash[:12]),
            ("Date", 10, lambda c: c.author_date.date().isoformat()),
            ("Author", None, lambda c: c.author_name),
            ("Message", None, lambda c: c.short_message),
        ],
        limit=count,
        suffix="commits",
    )


def _print_tree(tree: Tree) -> None:
    print(f"\nTree {tree.hash}")
    _print_table(
        list(tree.entries),
        [
            ("Mode", 6, lambda e: e.mode),
            ("Type", 6, lambda e: e.type),
            ("Object", 40, lambda e: e.hash),
            ("Name", None, lambda e: e.name),
        ],
        limit=200,
        suffix="entries",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="git-objects",
        description="Read-only view of commits, trees and references of a git repository",
    )
    parser.add_argument(
        "repo_path", nargs="?", default=None,
        help="Path to a local git repository",
    )
    parser.add_argument(
        "--commit",
        metavar="REV",
        default="HEAD",
        help="Commit to show: hash, branch, tag or any revision (default: HEAD)",
    )
    parser.add_argument(
        "--refs",
        action="store_true",
        help="List branches and tags",
    )
    parser.add_argument(
        "--log",
        type=_positive_int,
        metavar="N",
        help="Show N commits of first-parent history",
    )
    parser.add_argument(
        "--last-modified",
        dest="last_modified",
        metavar="PATH",
        help="Show the last commit that touched PATH",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="List the root tree of the commit",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the repository over a read-only HTTP API",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port for --serve (default: 8000)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every git command",
    )
    args = parser.parse_args()

    settings = Settings.from_env()
    _setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.repo_path is None:
        parser.print_usage(sys.stderr)
        _error_exit("repo_path is required")

    try:
        repo = Repository(args.repo_path, settings=settings)
    except ValueError as e:
        _error_exit(str(e))

    if args.serve:
        try:
            from git_objects.web.server import launch
        except ImportError:
            _error_exit(
                "web dependencies not installed. "
                "Run: pip install git-objects[web]"
            )
        launch(repo.path, api_port=args.port)
        return

    print(f"Repository: {repo.path}")

    try:
        try:
            commit = repo.resolve(args.commit)
        except NotFoundError:
            if args.commit != "HEAD":
                raise
            print("No commits yet.")
            if args.refs:
                _print_references(repo)
            return

        _print_commit(repo, commit)

        if args.refs:
            _print_references(repo)
        else:
            print(
                f"\nReferences: {len(repo.references.branches)} branches, "
                f"{len(repo.references.tags)} tags"
            )

        if args.last_modified:
            found = commit.last_modification(args.last_modified)
            if found is None:
                print(f"\nLast modification of {args.last_modified}: none")
            else:
                print(
                    f"\nLast modification of {args.last_modified}: "
                    f"{found.hash[:12]} {found.short_message}"
                )

        if args.tree:
            _print_tree(commit.tree)

        if args.log:
            _print_log(commit, args.log)
    except GitObjectsError as e:
        logger.debug("Command failed", exc_info=True)
        _error_exit(str(e))
