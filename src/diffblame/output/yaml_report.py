"""YAML reporter, same document as the JSON one."""

from __future__ import annotations

import yaml

from diffblame.output.json_report import to_dict
from diffblame.results.models import BlameResult


def render(result: BlameResult) -> str:
    return yaml.safe_dump(to_dict(result), sort_keys=False, allow_unicode=True)
