"""Commit graph walker and the diff-blame pipeline built on it.

The walk goes backward from the end commit. Linear stretches of history
are followed in a loop; at a merge every parent worth exploring becomes
a new frame on an explicit stack, with its own copy of the path
statuses. The set of seen commits is shared by all frames of one walk so
that history converging after a fork is only visited once.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

from diffblame.config.schema import DiffBlameConfig
from diffblame.git.adapter import ObjectStore
from diffblame.git.changes import compute_change_list
from diffblame.git.models import ChangeList, Commit
from diffblame.results.aggregator import merge_commits, sort_commits
from diffblame.results.models import BlameResult
from diffblame.walker.status import (
    PathStatus,
    StatusMap,
    branch_has_interest,
    initial_statuses,
    update_statuses,
)
from diffblame.walker.strategy import Accumulator, AddAlways, AddIfNotAncestor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkContext:
    """Everything a walk needs to know about the repository and the range."""

    store: ObjectStore
    begin: Commit
    end: Commit


def _describe(commit: Commit) -> str:
    return f"{commit.short_sha} {commit.summary[:80]}"


def _walk_branch(
    ctx: WalkContext,
    current: Commit,
    statuses: StatusMap,
    acc: Accumulator,
    seen: Set[str],
) -> Optional[Commit]:
    """Follow single-parent history from *current*.

    Returns the root or merge commit the branch ends on, or None when the
    branch runs into seen history or the accumulator asks to stop.
    """
    while True:
        if current.sha in seen:
            logger.debug("Commit %s has already been processed. Skipping.", current.short_sha)
            return None
        seen.add(current.sha)

        if len(current.parents) != 1:
            return current

        logger.debug("Considering commit %s.", _describe(current))
        if update_statuses(ctx.store, current, statuses):
            logger.debug("Running commit through %s.", acc.name)
            if not acc.on_commit(current):
                logger.debug("Bailing out based on %s output.", acc.name)
                return None

        current = ctx.store.parent(current, 0)


def _forks(ctx: WalkContext, merge: Commit, statuses: StatusMap) -> List[Tuple[Commit, StatusMap]]:
    """Return the parents of *merge* to descend into, each with its own statuses."""
    if merge.is_root:
        logger.debug("Reached root commit.")
        return []

    logger.debug("Considering merge commit %s.", _describe(merge))
    forks: List[Tuple[Commit, StatusMap]] = []
    for idx in range(len(merge.parents)):
        parent = ctx.store.parent(merge, idx)
        if not branch_has_interest(ctx.store, parent, statuses):
            logger.debug("Not branching as '%s' no longer contains any paths of interest.", _describe(parent))
        elif ctx.store.is_ancestor(parent, ctx.begin):
            logger.debug("Not branching as '%s' is an ancestor of the begin commit.", _describe(parent))
        else:
            forks.append((parent, dict(statuses)))
    return forks


def walk(
    ctx: WalkContext,
    start: Commit,
    statuses: StatusMap,
    acc: Accumulator,
    seen: Optional[Set[str]] = None,
) -> Set[str]:
    """Walk history backward from *start*, feeding processed commits to *acc*.

    *statuses* is mutated as the first branch advances. Returns the set of
    commits visited.
    """
    seen = set() if seen is None else seen
    stack: List[Tuple[Commit, StatusMap]] = [(start, statuses)]

    while stack:
        current, branch_statuses = stack.pop()
        end_of_branch = _walk_branch(ctx, current, branch_statuses, acc, seen)
        if end_of_branch is None:
            continue
        # reversed so the first parent is explored first
        stack.extend(reversed(_forks(ctx, end_of_branch, branch_statuses)))

    return seen


def compute_diff_blame(
    store: ObjectStore,
    begin: Commit,
    end: Commit,
    changes: ChangeList,
) -> BlameResult:
    """Find the commits responsible for *changes* between *begin* and *end*.

    One walk per class of path, each with its own seen set:
    added paths keep every commit in their lifetime, removed and changed
    paths stop at the history of the begin commit.
    """
    start = time.perf_counter()
    ctx = WalkContext(store=store, begin=begin, end=end)

    classes = [
        ("added", changes.added, PathStatus.FOUND, AddAlways()),
        ("removed", changes.removed, PathStatus.SEEKING, AddIfNotAncestor(store, begin)),
        ("changed", changes.changed, PathStatus.FOUND, AddIfNotAncestor(store, begin)),
    ]

    for name, paths, status, acc in classes:
        if not paths:
            continue
        logger.info(
            "Resolving commits for %d %s files from %s (%s).",
            len(paths), name, ctx.end.short_sha, acc.name,
        )
        walk(ctx, end, initial_statuses(paths, status), acc)

    logger.info("Sorting commit list.")
    merged = merge_commits(*(acc.commits for _, _, _, acc in classes))
    elapsed = (time.perf_counter() - start) * 1000

    return BlameResult(
        begin=begin,
        end=end,
        changes=changes,
        commits=sort_commits(merged.values()),
        class_counts={name: len(acc.commits) for name, _, _, acc in classes},
        duration_ms=round(elapsed, 2),
    )


def diff_blame(
    repo_root: Path,
    begin_rev: str,
    end_rev: str,
    config: Optional[DiffBlameConfig] = None,
    on_changes: Optional[Callable[[ChangeList], bool]] = None,
) -> Optional[BlameResult]:
    """Resolve both revisions in *repo_root* and run the full diff-blame.

    *on_changes* sees the change list before any history is walked; when it
    returns False the walk is skipped and None is returned.
    """
    config = config or DiffBlameConfig()
    with ObjectStore(repo_root, remote=config.refs.remote) as store:
        begin = store.resolve_commit(begin_rev)
        end = store.resolve_commit(end_rev)
        logger.info("Diff-blaming %s..%s", begin.short_sha, end.short_sha)
        changes = compute_change_list(store, begin, end, config.diff)
        if on_changes is not None and not on_changes(changes):
            return None
        return compute_diff_blame(store, begin, end, changes)
