"""Accumulation strategies: which processed commits to keep, and when to stop."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from diffblame.git.adapter import ObjectStore
from diffblame.git.models import Commit

logger = logging.getLogger(__name__)


class Accumulator:
    """Collects commits the walker reports as processed.

    :meth:`on_commit` returns False to tell the walker to abandon the
    current branch.
    """

    name = "base"

    def __init__(self, commits: Optional[Dict[str, Commit]] = None) -> None:
        self.commits: Dict[str, Commit] = commits if commits is not None else {}

    def on_commit(self, commit: Commit) -> bool:
        raise NotImplementedError


class AddAlways(Accumulator):
    """Keep every processed commit and never stop early."""

    name = "add-always"

    def on_commit(self, commit: Commit) -> bool:
        self.commits[commit.sha] = commit
        return True


class AddIfNotAncestor(Accumulator):
    """Keep commits outside the history of *boundary*; stop at the first one inside it."""

    name = "add-if-not-ancestor"

    def __init__(
        self,
        store: ObjectStore,
        boundary: Commit,
        commits: Optional[Dict[str, Commit]] = None,
    ) -> None:
        super().__init__(commits)
        self.store = store
        self.boundary = boundary

    def on_commit(self, commit: Commit) -> bool:
        if self.store.is_ancestor(commit, self.boundary):
            logger.debug(
                "Commit %s is an ancestor of boundary %s.",
                commit.short_sha, self.boundary.short_sha,
            )
            return False
        self.commits[commit.sha] = commit
        return True
