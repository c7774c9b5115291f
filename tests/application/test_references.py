from pathlib import Path

import pytest

from git_objects.domain.errors import (
    CommandFailedError,
    NotFoundError,
    ParseError,
    ReferenceNotFoundError,
)

from .fakes import HASH_A, HASH_B, HASH_C, FakeRunner, make_repo

SHOW_REF = ["show-ref", "--tags", "--heads"]
LISTING = (
    f"{HASH_A} refs/heads/feature/login\n"
    f"{HASH_B} refs/heads/main\n"
    f"{HASH_B} refs/tags/v1.0\n"
    f"{HASH_B} refs/tags/v1.0.1\n"
    f"{HASH_C} refs/tags/v0.9\n"
)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner().add(SHOW_REF, LISTING)


@pytest.fixture
def bag(tmp_path: Path, runner: FakeRunner):
    return make_repo(tmp_path, runner).references


class TestLookup:
    def test_get_by_fullname(self, bag):
        ref = bag.get("refs/heads/main")
        assert ref.name == "main"
        assert ref.commit_hash == HASH_B
        assert ref.is_branch

    def test_get_missing_raises(self, bag):
        with pytest.raises(ReferenceNotFoundError) as exc_info:
            bag.get("refs/heads/missing")
        assert exc_info.value.fullname == "refs/heads/missing"

    def test_get_branch_qualifies_name(self, bag):
        assert bag.get_branch("main") == bag.get("refs/heads/main")
        assert bag.get_branch("feature/login").commit_hash == HASH_A

    def test_get_tag_qualifies_name(self, bag):
        tag = bag.get_tag("v1.0")
        assert tag.is_tag
        assert tag == bag.get("refs/tags/v1.0")

    def test_branch_name_not_found_as_tag(self, bag):
        with pytest.raises(NotFoundError):
            bag.get_tag("main")

    def test_has_and_contains(self, bag):
        assert bag.has("refs/tags/v0.9")
        assert "refs/heads/main" in bag
        assert "refs/heads/nope" not in bag
        assert 42 not in bag


class TestViews:
    def test_branches_and_tags_in_listing_order(self, bag):
        assert [b.name for b in bag.branches] == ["feature/login", "main"]
        assert [t.name for t in bag.tags] == ["v1.0", "v1.0.1", "v0.9"]

    def test_views_are_copies(self, bag):
        bag.branches.clear()
        bag.all().clear()
        assert len(bag.branches) == 2
        assert len(bag.all()) == 5

    def test_count(self, bag):
        assert bag.count() == 5
        assert len(bag) == 5

    def test_iteration(self, bag):
        assert [r.fullname for r in bag][:2] == ["refs/heads/feature/login", "refs/heads/main"]

    def test_has_branches(self, bag):
        assert bag.has_branches()

    def test_first_branch(self, bag):
        assert bag.first_branch().name == "feature/login"


class TestReverseLookup:
    def test_resolve_tags(self, bag):
        assert bag.resolve_tags(HASH_B) == ["v1.0", "v1.0.1"]

    def test_resolve_branches(self, bag):
        assert bag.resolve_branches(HASH_B) == ["main"]

    def test_no_match_is_empty(self, bag):
        assert bag.resolve_tags(HASH_A) == []
        assert bag.resolve_branches(HASH_C) == []
        assert bag.resolve_branches("0" * 40) == []


class TestLoading:
    def test_single_listing_call(self, bag, runner: FakeRunner):
        bag.get("refs/heads/main")
        bag.branches
        bag.tags
        bag.resolve_tags(HASH_B)
        bag.count()
        assert runner.count(*SHOW_REF) == 1

    def test_repository_caches_bag(self, tmp_path: Path, runner: FakeRunner):
        repo = make_repo(tmp_path, runner)
        assert repo.references is repo.references

    def test_reload_runs_listing_again(self, bag, runner: FakeRunner):
        assert bag.count() == 5
        runner.add(SHOW_REF, f"{HASH_A} refs/heads/main\n")
        assert bag.count() == 5
        bag.reload()
        assert bag.count() == 1
        assert bag.get_branch("main").commit_hash == HASH_A
        assert runner.count(*SHOW_REF) == 2

    def test_empty_repository(self, tmp_path: Path):
        runner = FakeRunner().add(SHOW_REF, "", returncode=1)
        bag = make_repo(tmp_path, runner).references
        assert bag.count() == 0
        assert not bag.has_branches()
        assert bag.branches == []
        with pytest.raises(NotFoundError):
            bag.first_branch()

    def test_command_failure(self, tmp_path: Path):
        runner = FakeRunner().add(SHOW_REF, stderr="fatal: not a git repository", returncode=128)
        bag = make_repo(tmp_path, runner).references
        with pytest.raises(CommandFailedError, match="not a git repository"):
            bag.count()

    def test_malformed_line_fails_whole_listing(self, tmp_path: Path):
        runner = FakeRunner().add(SHOW_REF, f"{HASH_A} refs/heads/main\nbroken line here\n")
        bag = make_repo(tmp_path, runner).references
        with pytest.raises(ParseError):
            bag.get("refs/heads/main")
        with pytest.raises(ParseError):
            bag.count()

    def test_unclassifiable_reference_fails(self, tmp_path: Path):
        runner = FakeRunner().add(SHOW_REF, f"{HASH_A} refs/remotes/origin/main\n")
        with pytest.raises(ParseError, match="refs/remotes/origin/main"):
            make_repo(tmp_path, runner).references.branches

    def test_duplicate_reference_fails(self, tmp_path: Path):
        runner = FakeRunner().add(SHOW_REF, f"{HASH_A} refs/heads/main\n{HASH_B} refs/heads/main\n")
        with pytest.raises(ParseError, match="Duplicate"):
            make_repo(tmp_path, runner).references.count()
