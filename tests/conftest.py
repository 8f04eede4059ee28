"""Shared test fixtures: an in-memory commit history and temp git repos."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import pytest

from diffblame.git.adapter import MissingParentError
from diffblame.git.models import Commit


class FakeHistory:
    """In-memory stand-in for ObjectStore, built commit by commit.

    Commit shas are the names given to :meth:`add`, commit times follow
    insertion order.
    """

    def __init__(self) -> None:
        self.commits: Dict[str, Commit] = {}
        self.files: Dict[str, Set[str]] = {}
        self.exists_calls: List[tuple] = []

    def add(self, name: str, parents: Iterable[str] = (), files: Iterable[str] = ()) -> Commit:
        commit = Commit(
            sha=name,
            tree=f"tree-{name}",
            parents=tuple(parents),
            committer="Test",
            commit_time=1_700_000_000 + len(self.commits) * 60,
            message=f"commit {name}",
        )
        self.commits[name] = commit
        self.files[name] = set(files)
        return commit

    def __getitem__(self, name: str) -> Commit:
        return self.commits[name]

    # ---- ObjectStore interface ----

    def exists(self, path: str, commit: Commit) -> bool:
        self.exists_calls.append((path, commit.sha))
        return path in self.files[commit.sha]

    def parent(self, commit: Commit, index: int) -> Commit:
        try:
            return self.commits[commit.parents[index]]
        except (IndexError, KeyError) as exc:
            raise MissingParentError(f"commit {commit.sha} has no parent #{index + 1}") from exc

    def is_ancestor(self, candidate: Commit, reference: Commit) -> bool:
        pending = [reference.sha]
        visited: Set[str] = set()
        while pending:
            sha = pending.pop()
            if sha == candidate.sha:
                return True
            if sha in visited or sha not in self.commits:
                continue
            visited.add(sha)
            pending.extend(self.commits[sha].parents)
        return False


class GitRepo:
    """A temporary git repository with deterministic commit dates."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ticks = 0
        path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")
        self.git("config", "user.email", "test@test.com")
        self.git("config", "user.name", "Test")

    def git(self, *args: str) -> str:
        stamp = f"2024-01-01T{self._ticks // 60:02d}:{self._ticks % 60:02d}:00+00:00"
        env = {
            **os.environ,
            "GIT_AUTHOR_DATE": stamp,
            "GIT_COMMITTER_DATE": stamp,
        }
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout

    def head(self) -> str:
        return self.git("rev-parse", "HEAD").strip()

    def commit(
        self,
        message: str,
        files: Optional[Dict[str, Optional[str]]] = None,
        renames: Optional[Dict[str, str]] = None,
    ) -> str:
        """Commit on top of HEAD. A file content of None deletes the file."""
        for old, new in (renames or {}).items():
            self.git("mv", old, new)
        for rel, content in (files or {}).items():
            if content is None:
                self.git("rm", "-q", rel)
                continue
            target = self.path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
            self.git("add", rel)
        self._ticks += 1
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.head()

    def checkout(self, rev: str) -> None:
        self.git("checkout", "-q", "--detach", rev)

    def merge(self, ours: str, theirs: str, message: str) -> str:
        """Create a merge commit with parents (ours, theirs)."""
        self.checkout(ours)
        self._ticks += 1
        self.git("merge", "-q", "--no-ff", "--no-edit", "-m", message, theirs)
        return self.head()


@pytest.fixture
def fake_history() -> FakeHistory:
    return FakeHistory()


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    """Create an empty temporary git repository."""
    return GitRepo(tmp_path / "repo")


@pytest.fixture
def linear_repo(git_repo: GitRepo) -> Dict[str, str]:
    """A(root) - B(adds file.txt) - C(modifies file.txt) - D(deletes file.txt).

    "base" is a release line forked from A that carries its own file.txt, so
    diffing base..D classifies file.txt as removed.
    """
    shas = {
        "A": git_repo.commit("root", {"README.md": "# Test\n"}),
        "B": git_repo.commit("add file", {"file.txt": "one\n"}),
        "C": git_repo.commit("modify file", {"file.txt": "one\ntwo\n"}),
        "D": git_repo.commit("delete file", {"file.txt": None}),
    }
    git_repo.checkout(shas["A"])
    shas["base"] = git_repo.commit("release file", {"file.txt": "release\n"})
    git_repo.checkout(shas["D"])
    return shas
