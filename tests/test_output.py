"""Tests for output reporters."""

import io
import json

import yaml
from rich.console import Console

from diffblame.config.schema import OutputConfig
from diffblame.git.models import ChangeList, Commit
from diffblame.output import json_report, terminal, yaml_report
from diffblame.results.models import BlameResult


def _commit(sha: str, when: int, message: str, committer: str = "Jane Doe") -> Commit:
    return Commit(
        sha=sha,
        tree="t" * 40,
        parents=("p" * 40,),
        committer=committer,
        committer_email="jane@example.com",
        commit_time=when,
        message=message,
    )


def _make_result(commits=None) -> BlameResult:
    """Build a BlameResult with sample data."""
    if commits is None:
        commits = [
            _commit("abcdef0123456789", 0, "Fix parser\n\nLonger body."),
            _commit("123456abcdef7890", 86400, "Add feature"),
        ]
    return BlameResult(
        begin=_commit("b" * 40, 0, "begin"),
        end=_commit("e" * 40, 0, "end"),
        changes=ChangeList(added=["new.go"], removed=["old.go"], changed=["main.go"]),
        commits=commits,
        class_counts={"added": 1, "removed": 0, "changed": 2},
        duration_ms=12.5,
    )


class TestPlain:
    def test_format_line(self):
        line = terminal.format_line(_commit("abcdef0123456789", 0, "Fix parser\n\nbody"))
        assert line == "abcdef > " + "Jane Doe".ljust(30) + " 01/01/70 Fix parser"

    def test_long_fields_cut(self):
        commit = _commit("abcdef0123456789", 0, "x" * 200, committer="N" * 50)
        line = terminal.format_line(commit)
        assert line == "abcdef > " + "N" * 30 + " 01/01/70 " + "x" * 80

    def test_custom_widths(self):
        cfg = OutputConfig(sha_length=10, name_width=4, date_format="%Y-%m-%d")
        line = terminal.format_line(_commit("abcdef0123456789", 0, "msg"), cfg)
        assert line == "abcdef0123 > Jane 1970-01-01 msg"

    def test_render_plain(self):
        text = terminal.render_plain(_make_result())
        assert len(text.splitlines()) == 2

    def test_render_plain_empty(self):
        assert terminal.render_plain(_make_result(commits=[])) == ""


class TestTerminal:
    def test_table_lists_commits(self):
        buf = io.StringIO()
        terminal.render(_make_result(), console=Console(file=buf, width=120))
        out = buf.getvalue()
        assert "abcdef" in out
        assert "Fix parser" in out
        assert "Commits:" in out

    def test_empty_result(self):
        buf = io.StringIO()
        terminal.render(_make_result(commits=[]), console=Console(file=buf, width=120))
        assert "No commits" in buf.getvalue()


class TestJsonReport:
    def test_valid_json(self):
        data = json.loads(json_report.render(_make_result()))
        assert data["version"] == "1.0"
        assert data["total_commits"] == 2
        assert data["begin"] == "b" * 40
        assert data["files"]["added"] == ["new.go"]
        assert data["class_counts"]["changed"] == 2

    def test_commit_fields(self):
        data = json.loads(json_report.render(_make_result()))
        first = data["commits"][0]
        assert first["sha"] == "abcdef0123456789"
        assert first["short_sha"] == "abcdef"
        assert first["summary"] == "Fix parser"
        assert first["date"] == "1970-01-01T00:00:00+00:00"
        assert first["parents"] == ["p" * 40]

    def test_empty_result(self):
        data = json.loads(json_report.render(_make_result(commits=[])))
        assert data["total_commits"] == 0
        assert data["commits"] == []


class TestYamlReport:
    def test_matches_json_document(self):
        result = _make_result()
        assert yaml.safe_load(yaml_report.render(result)) == json_report.to_dict(result)
