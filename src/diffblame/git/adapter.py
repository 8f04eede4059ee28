"""Git object store access: revisions, commits, path lookups, ancestry."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from diffblame.git.models import Commit

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"^(?P<name>.*?) <(?P<email>[^>]*)> (?P<time>-?\d+)(?: [+-]\d{4})?$")


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class RevisionError(GitError):
    """Raised when a revision name cannot be turned into a commit."""


class RevisionNotFound(RevisionError):
    pass


class AmbiguousRevision(RevisionError):
    pass


class NotACommit(RevisionError):
    pass


class StoreAccessError(GitError):
    """Raised when an object cannot be read from the repository."""


class HistoryError(GitError):
    """Raised when ancestry between two commits cannot be determined."""


class MissingParentError(GitError):
    """Raised when a commit refers to a parent that does not resolve."""


def _call_git(args: list[str], cwd: Path, timeout: int = 30) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process, whatever its exit code."""
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    result = _call_git(args, cwd, timeout)
    if result.returncode != 0:
        stderr = result.stderr.strip() or f"exit code {result.returncode}"
        raise GitError(f"git error: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def parse_commit(sha: str, raw: bytes) -> Commit:
    """Build a Commit from the raw body of a commit object."""
    text = raw.decode("utf-8", errors="replace")
    header, _, message = text.partition("\n\n")

    tree = ""
    parents: List[str] = []
    committer, email, when = "", "", 0
    for line in header.split("\n"):
        if line.startswith(" "):
            continue  # continuation of gpgsig / mergetag
        key, _, value = line.partition(" ")
        if key == "tree":
            tree = value
        elif key == "parent":
            parents.append(value)
        elif key == "committer":
            m = _IDENT_RE.match(value)
            if m:
                committer, email, when = m["name"], m["email"], int(m["time"])

    if not tree:
        raise StoreAccessError(f"commit {sha} has no tree")

    return Commit(
        sha=sha,
        tree=tree,
        parents=tuple(parents),
        committer=committer,
        committer_email=email,
        commit_time=when,
        message=message.rstrip("\n"),
    )


class _CatFile:
    """A long-lived ``git cat-file --batch[-check]`` process."""

    def __init__(self, repo_root: Path, mode: str) -> None:
        self._mode = mode
        try:
            self._proc = subprocess.Popen(
                ["git", "cat-file", mode],
                cwd=repo_root,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            raise GitError("git is not installed or not on PATH")

    def query(self, name: str) -> Tuple[Optional[str], bytes]:
        """Return ``(type, body)`` for *name*, or ``(None, b"")`` when it is missing.

        The body is only read in ``--batch`` mode.
        """
        if "\n" in name:
            raise StoreAccessError(f"object name {name!r} contains a newline")
        stdin, stdout = self._proc.stdin, self._proc.stdout
        assert stdin is not None and stdout is not None
        try:
            stdin.write(name.encode("utf-8") + b"\n")
            stdin.flush()
            header = stdout.readline()
        except OSError as exc:
            raise StoreAccessError(f"git cat-file {self._mode} failed on {name!r}: {exc}") from exc

        if not header:
            raise StoreAccessError(f"git cat-file {self._mode} exited while reading {name!r}")

        fields = header.decode("utf-8", errors="replace").rstrip("\n").split(" ")
        if fields[-1] == "missing":
            return None, b""
        if fields[-1] == "ambiguous":
            raise StoreAccessError(f"object name {name!r} is ambiguous")
        if len(fields) != 3 or not fields[2].isdigit():
            raise StoreAccessError(f"unexpected cat-file output for {name!r}: {header!r}")

        obj_type, size = fields[1], int(fields[2])
        body = b""
        if self._mode == "--batch":
            body = stdout.read(size + 1)[:size]  # drop trailing LF
            if len(body) != size:
                raise StoreAccessError(f"short read on object {name!r}")
        return obj_type, body

    def close(self) -> None:
        if self._proc.poll() is None:
            if self._proc.stdin:
                self._proc.stdin.close()
            try:
                self._proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._proc.kill()
                self._proc.wait()
        if self._proc.stdout:
            self._proc.stdout.close()


class ObjectStore:
    """Read-only view of a repository's commits and trees.

    Usage::

        with ObjectStore(repo_root) as store:
            end = store.resolve_commit("main")
            store.exists("README.md", end)
    """

    def __init__(self, repo_root: Path, *, remote: Optional[str] = "origin") -> None:
        self.repo_root = repo_root
        self.remote = remote
        self._objects = _CatFile(repo_root, "--batch")
        self._lookups = _CatFile(repo_root, "--batch-check")
        self._commits: Dict[str, Commit] = {}
        self._ancestry: Dict[Tuple[str, str], bool] = {}

    def __enter__(self) -> "ObjectStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._objects.close()
        self._lookups.close()

    # ---- revisions ----

    def _rev_parse(self, spec: str) -> Optional[str]:
        result = _call_git(["rev-parse", "--verify", spec], cwd=self.repo_root)
        # ambiguous refnames still exit 0, with a warning
        if "ambiguous" in result.stderr:
            raise AmbiguousRevision(f"{spec!r} is ambiguous: {result.stderr.strip()}")
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def resolve_commit(self, name: str) -> Commit:
        """Resolve a hash, branch, tag or remote branch name to a Commit."""
        if not name or not name.strip() or name.startswith("-"):
            raise RevisionNotFound(f"invalid revision name {name!r}")

        sha = self._rev_parse(f"{name}^{{commit}}")
        if sha is None and self.remote:
            prefix = f"{self.remote}/"
            short = name[len(prefix):] if name.startswith(prefix) else name
            sha = self._rev_parse(f"refs/remotes/{self.remote}/{short}^{{commit}}")

        if sha is None:
            if self._rev_parse(name) is not None:
                raise NotACommit(f"{name!r} does not point to a commit")
            raise RevisionNotFound(f"unknown revision {name!r}")

        logger.debug("Resolved %r to %s", name, sha)
        return self.commit(sha)

    # ---- commits ----

    def commit(self, sha: str) -> Commit:
        cached = self._commits.get(sha)
        if cached is not None:
            return cached

        obj_type, body = self._objects.query(sha)
        if obj_type is None:
            raise StoreAccessError(f"commit {sha} is missing from the object store")
        if obj_type != "commit":
            raise StoreAccessError(f"object {sha} is a {obj_type}, not a commit")

        commit = parse_commit(sha, body)
        self._commits[sha] = commit
        return commit

    def parent(self, commit: Commit, index: int) -> Commit:
        if not 0 <= index < len(commit.parents):
            raise MissingParentError(f"commit {commit.sha} has no parent #{index + 1}")
        try:
            return self.commit(commit.parents[index])
        except StoreAccessError as exc:
            raise MissingParentError(
                f"parent #{index + 1} of {commit.sha} does not resolve: {exc}"
            ) from exc

    # ---- trees ----

    def exists(self, path: str, commit: Commit) -> bool:
        """Return True if *path* is a file in *commit*'s tree."""
        if "\n" in path:
            return self._exists_via_ls_tree(path, commit)
        obj_type, _ = self._lookups.query(f"{commit.sha}:{path}")
        return obj_type == "blob"

    def _exists_via_ls_tree(self, path: str, commit: Commit) -> bool:
        # the batch protocol is line based, so names with LF go through ls-tree
        result = _call_git(
            ["--literal-pathspecs", "ls-tree", "-z", commit.sha, "--", path],
            cwd=self.repo_root,
        )
        if result.returncode != 0:
            raise StoreAccessError(
                f"git ls-tree failed on {path!r} in {commit.short_sha}: {result.stderr.strip()}"
            )
        for entry in result.stdout.split("\0"):
            meta, _, name = entry.partition("\t")
            if name == path:
                return meta.split(" ")[1:2] == ["blob"]
        return False

    def diff_trees(
        self,
        begin: Commit,
        end: Commit,
        *,
        rename_score: int = 70,
        rename_limit: int = 0,
    ) -> str:
        """Return raw ``diff-tree --name-status -z`` output between two commits' trees."""
        args = ["diff-tree", "-r", "-z", "--name-status", f"-M{rename_score}%"]
        if rename_limit > 0:
            args.append(f"-l{rename_limit}")
        args += [begin.tree, end.tree]
        return _run_git(args, cwd=self.repo_root, timeout=300)

    # ---- ancestry ----

    def is_ancestor(self, candidate: Commit, reference: Commit) -> bool:
        """Return True if *candidate* is *reference* or one of its ancestors."""
        key = (candidate.sha, reference.sha)
        cached = self._ancestry.get(key)
        if cached is not None:
            return cached

        if candidate.sha == reference.sha:
            answer = True
        else:
            result = _call_git(
                ["merge-base", "--is-ancestor", candidate.sha, reference.sha],
                cwd=self.repo_root,
                timeout=120,
            )
            if result.returncode not in (0, 1):
                raise HistoryError(
                    f"could not determine whether {candidate.sha} is an ancestor of "
                    f"{reference.sha}: {result.stderr.strip()}"
                )
            answer = result.returncode == 0

        self._ancestry[key] = answer
        return answer
