"""Per-path status tracking across a backward history walk."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable

from diffblame.git.adapter import ObjectStore
from diffblame.git.models import Commit

logger = logging.getLogger(__name__)


class PathStatus(str, Enum):
    SEEKING = "seeking"  # absent at the end revision, not located yet
    FOUND = "found"  # present in the last examined commit
    REMOVED = "removed"  # dropped for the rest of this branch


StatusMap = Dict[str, PathStatus]


def initial_statuses(paths: Iterable[str], status: PathStatus) -> StatusMap:
    return {path: status for path in paths}


def update_statuses(store: ObjectStore, commit: Commit, statuses: StatusMap) -> bool:
    """Advance every live path's status to *commit*, in place.

    Returns True if any path is present in *commit*, meaning the commit
    falls inside the lifetime of a path of interest. A path that was
    FOUND and is now missing becomes REMOVED; a SEEKING path that is
    still missing is left alone.
    """
    process = False
    for path, status in statuses.items():
        if status is PathStatus.REMOVED:
            continue

        if store.exists(path, commit):
            logger.debug("Processing as commit contains path %r.", path)
            statuses[path] = PathStatus.FOUND
            process = True
        elif status is PathStatus.FOUND:
            logger.debug("No longer considering path %r as it has disappeared from the history.", path)
            statuses[path] = PathStatus.REMOVED
        else:
            logger.debug("Path %r has still not been found.", path)
    return process


def branch_has_interest(store: ObjectStore, commit: Commit, statuses: StatusMap) -> bool:
    """Return True if walking into *commit* could still process something.

    SEEKING paths keep every branch open since they have not been found
    anywhere yet.
    """
    for path, status in statuses.items():
        if status is PathStatus.REMOVED:
            continue
        if status is PathStatus.SEEKING or store.exists(path, commit):
            return True
    return False
