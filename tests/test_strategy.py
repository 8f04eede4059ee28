"""Tests for the accumulation strategies."""

from diffblame.walker.strategy import AddAlways, AddIfNotAncestor


class TestAddAlways:
    def test_keeps_everything(self, fake_history):
        a = fake_history.add("A")
        b = fake_history.add("B", parents=["A"])
        acc = AddAlways()
        assert acc.on_commit(b) is True
        assert acc.on_commit(a) is True
        assert set(acc.commits) == {"A", "B"}

    def test_shared_map(self, fake_history):
        a = fake_history.add("A")
        shared = {}
        AddAlways(shared).on_commit(a)
        assert shared == {"A": a}


class TestAddIfNotAncestor:
    def test_keeps_commit_outside_boundary(self, fake_history):
        a = fake_history.add("A")
        b = fake_history.add("B", parents=["A"])
        acc = AddIfNotAncestor(fake_history, a)
        assert acc.on_commit(b) is True
        assert acc.commits == {"B": b}

    def test_stops_at_boundary_history(self, fake_history):
        a = fake_history.add("A")
        b = fake_history.add("B", parents=["A"])
        acc = AddIfNotAncestor(fake_history, b)
        assert acc.on_commit(a) is False
        assert acc.commits == {}

    def test_boundary_itself_excluded(self, fake_history):
        a = fake_history.add("A")
        acc = AddIfNotAncestor(fake_history, a)
        assert acc.on_commit(a) is False
        assert acc.commits == {}
