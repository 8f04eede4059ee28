"""History walk: path status tracking, accumulation strategies, graph walker."""

from diffblame.walker.engine import WalkContext, compute_diff_blame, diff_blame, walk
from diffblame.walker.status import PathStatus, StatusMap, branch_has_interest, update_statuses
from diffblame.walker.strategy import Accumulator, AddAlways, AddIfNotAncestor

__all__ = [
    "Accumulator",
    "AddAlways",
    "AddIfNotAncestor",
    "PathStatus",
    "StatusMap",
    "WalkContext",
    "branch_has_interest",
    "compute_diff_blame",
    "diff_blame",
    "update_statuses",
    "walk",
]
