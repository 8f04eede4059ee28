"""Tests for merging and ordering per-class results."""

from diffblame.git.models import Commit
from diffblame.results.aggregator import merge_commits, sort_commits


def _commit(sha: str, when: int) -> Commit:
    return Commit(sha=sha, tree="t", commit_time=when)


class TestMergeCommits:
    def test_dedup_by_sha(self):
        a, b, c = _commit("a", 1), _commit("b", 2), _commit("c", 3)
        merged = merge_commits({"a": a, "b": b}, {"b": b, "c": c}, {})
        assert set(merged) == {"a", "b", "c"}

    def test_no_maps(self):
        assert merge_commits() == {}


class TestSortCommits:
    def test_oldest_first(self):
        commits = [_commit("x", 30), _commit("y", 10), _commit("z", 20)]
        assert [c.sha for c in sort_commits(commits)] == ["y", "z", "x"]

    def test_ties_broken_by_sha(self):
        commits = [_commit("bbb", 5), _commit("aaa", 5), _commit("ccc", 1)]
        assert [c.sha for c in sort_commits(commits)] == ["ccc", "aaa", "bbb"]
