"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "plain", "json", "yaml"]

OUTPUT_FORMATS = ("terminal", "plain", "json", "yaml")


@dataclass
class DiffConfig:
    rename_score: int = 70  # similarity percentage for rename detection
    rename_limit: int = 0  # 0 = git's own default
    exclude: List[str] = field(default_factory=lambda: ["vendor/"])


@dataclass
class RefsConfig:
    remote: Optional[str] = "origin"  # fallback for names that are not local refs


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True
    sha_length: int = 6
    name_width: int = 30
    message_width: int = 80
    date_format: str = "%d/%m/%y"


@dataclass
class DiffBlameConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    refs: RefsConfig = field(default_factory=RefsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
