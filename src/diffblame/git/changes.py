"""Change set computation: classify the paths touched between two commits.

Parses ``git diff-tree -r -z --name-status -M`` output. Renames fold a
delete + create pair into one record, which is split back into an added
path (new name) and a removed path (old name). Paths under an excluded
prefix (vendored code by default) are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from diffblame.config.schema import DiffConfig
from diffblame.git.adapter import GitError, ObjectStore
from diffblame.git.models import ChangeList, Commit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffRecord:
    """One entry of a name-status diff."""

    status: str  # single letter: A, D, M, T, R, C
    path: str
    old_path: Optional[str] = None  # set on renames and copies
    score: Optional[int] = None


def parse_name_status(output: str) -> Iterator[DiffRecord]:
    """Yield DiffRecords from NUL-separated ``--name-status -z`` output."""
    fields = output.split("\0")
    if fields and fields[-1] == "":
        fields.pop()

    idx = 0
    while idx < len(fields):
        code = fields[idx]
        idx += 1
        if not code:
            continue
        letter = code[0]
        if letter in ("R", "C"):
            if idx + 1 >= len(fields):
                raise GitError(f"truncated rename record in diff output: {code!r}")
            score = int(code[1:]) if code[1:].isdigit() else None
            yield DiffRecord(letter, fields[idx + 1], old_path=fields[idx], score=score)
            idx += 2
        else:
            if idx >= len(fields):
                raise GitError(f"truncated record in diff output: {code!r}")
            yield DiffRecord(letter, fields[idx])
            idx += 1


def is_excluded(path: str, prefixes: Iterable[str]) -> bool:
    """Return True if *path* starts with, or has a directory starting with, any prefix."""
    for prefix in prefixes:
        if not prefix:
            continue
        if path.startswith(prefix) or f"/{prefix}" in path:
            return True
    return False


def build_change_list(records: Iterable[DiffRecord], exclude: Iterable[str] = ()) -> ChangeList:
    """Sort diff records into added / removed / changed path lists."""
    exclude = list(exclude)
    cl = ChangeList()
    for rec in records:
        # renames are judged by their old location
        source = rec.old_path if rec.old_path is not None else rec.path
        if is_excluded(source, exclude):
            logger.debug("Ignoring excluded path %r", source)
            continue

        if rec.status == "A":
            cl.added.append(rec.path)
        elif rec.status == "D":
            cl.removed.append(rec.path)
        elif rec.status == "R":
            cl.added.append(rec.path)
            cl.removed.append(rec.old_path)  # type: ignore[arg-type]
        elif rec.status == "C":
            cl.added.append(rec.path)
        elif rec.status in ("M", "T"):
            cl.changed.append(rec.path)
        else:
            logger.warning("Skipping %r with unexpected diff status %r", rec.path, rec.status)
    return cl


def compute_change_list(
    store: ObjectStore,
    begin: Commit,
    end: Commit,
    config: Optional[DiffConfig] = None,
) -> ChangeList:
    """Compare the trees of *begin* and *end* and classify every touched path."""
    config = config or DiffConfig()
    raw = store.diff_trees(
        begin,
        end,
        rename_score=config.rename_score,
        rename_limit=config.rename_limit,
    )
    cl = build_change_list(parse_name_status(raw), config.exclude)
    logger.debug(
        "Found changed files: added=%s removed=%s changed=%s",
        cl.added, cl.removed, cl.changed,
    )
    return cl


def format_change_list(cl: ChangeList) -> List[str]:
    """Render a ChangeList as ``<letter> <path>`` lines."""
    lines = [f"A {p}" for p in cl.added]
    lines += [f"D {p}" for p in cl.removed]
    lines += [f"M {p}" for p in cl.changed]
    return lines
