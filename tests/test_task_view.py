"""Tests for the derived view pipeline (domain/task_view.py)."""

from __future__ import annotations

import locale
import random

import pytest

from todo_portal.domain.task_models import TaskPriority
from todo_portal.domain.task_view import (
    EMPTY_MESSAGES,
    MOTIVATION_MESSAGES,
    completion_rate,
    compute_stats,
    derive_view,
    filter_tasks,
    pick_motivation,
    search_tasks,
    sort_tasks,
    use_host_collation,
)
from todo_portal.domain.view_models import FilterMode, SortKey, ViewParams

from conftest import make_task


@pytest.fixture
def tasks():
    # Stored order is most recent first.
    return [
        make_task("d", "Write report", priority=TaskPriority.high, minutes=3),
        make_task("c", "call mom", completed=True, priority=TaskPriority.low, minutes=2),
        make_task("b", "Buy milk", completed=True, priority=TaskPriority.high, minutes=1),
        make_task("a", "archive mail", minutes=0),
    ]


def ids(items):
    return [t.id for t in items]


class TestFilter:
    def test_all_is_identity(self, tasks) -> None:
        assert ids(filter_tasks(tasks, FilterMode.all)) == ["d", "c", "b", "a"]

    def test_active(self, tasks) -> None:
        assert ids(filter_tasks(tasks, FilterMode.active)) == ["d", "a"]

    def test_completed(self, tasks) -> None:
        assert ids(filter_tasks(tasks, FilterMode.completed)) == ["c", "b"]

    def test_high_priority_ignores_completion(self, tasks) -> None:
        assert ids(filter_tasks(tasks, FilterMode.high)) == ["d", "b"]


class TestSearch:
    def test_empty_query_keeps_everything(self, tasks) -> None:
        assert ids(search_tasks(tasks, "")) == ["d", "c", "b", "a"]

    def test_case_insensitive_substring(self, tasks) -> None:
        assert ids(search_tasks(tasks, "MIL")) == ["b"]
        assert ids(search_tasks(tasks, "mail")) == ["a"]

    def test_not_tokenized(self, tasks) -> None:
        assert search_tasks(tasks, "milk buy") == []
        assert ids(search_tasks(tasks, "y m")) == ["b"]

    def test_simple_lowercasing_only(self) -> None:
        items = [make_task("s", "Straße")]
        assert search_tasks(items, "ss") == []
        assert ids(search_tasks(items, "STRA")) == ["s"]


class TestSort:
    def test_newest_and_oldest(self, tasks) -> None:
        assert ids(sort_tasks(tasks, SortKey.newest)) == ["d", "c", "b", "a"]
        assert ids(sort_tasks(tasks, SortKey.oldest)) == ["a", "b", "c", "d"]

    def test_priority_descending(self, tasks) -> None:
        assert ids(sort_tasks(tasks, SortKey.priority)) == ["d", "b", "a", "c"]

    def test_priority_sort_is_stable(self) -> None:
        same = [
            make_task("x", "x", priority=TaskPriority.medium, minutes=5),
            make_task("y", "y", priority=TaskPriority.medium, minutes=1),
            make_task("z", "z", priority=TaskPriority.medium, minutes=9),
        ]
        assert ids(sort_tasks(same, SortKey.priority)) == ["x", "y", "z"]

    def test_alphabetical(self) -> None:
        items = [
            make_task("1", "cherry"),
            make_task("2", "apple"),
            make_task("3", "banana"),
        ]
        assert ids(sort_tasks(items, SortKey.alphabetical)) == ["2", "3", "1"]

    def test_alphabetical_ignores_case(self) -> None:
        items = [
            make_task("1", "cherry"),
            make_task("2", "Banana"),
            make_task("3", "apple"),
        ]
        assert ids(sort_tasks(items, SortKey.alphabetical)) == ["3", "2", "1"]

    def test_sort_returns_a_copy(self, tasks) -> None:
        before = list(tasks)
        sort_tasks(tasks, SortKey.oldest)
        assert tasks == before


class TestStats:
    def test_counts(self, tasks) -> None:
        stats = compute_stats(tasks)
        assert stats.total == 4
        assert stats.completed == 2
        assert stats.active == 2
        assert stats.high_priority == 2
        assert stats.completion_rate == 50

    def test_empty_collection(self) -> None:
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.active + stats.completed == stats.total
        assert stats.completion_rate == 0

    @pytest.mark.parametrize(
        "completed,total,expected",
        [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (4, 4, 100)],
    )
    def test_completion_rate_rounds_half_up(self, completed, total, expected) -> None:
        assert completion_rate(completed, total) == expected

    def test_stats_ignore_view_params(self, tasks) -> None:
        view = derive_view(tasks, ViewParams(filter=FilterMode.completed, search="milk"))
        assert ids(view.tasks) == ["b"]
        assert view.stats.total == 4


class TestDeriveView:
    def test_pipeline_order(self, tasks) -> None:
        view = derive_view(tasks, ViewParams(filter=FilterMode.active, search="R", sort=SortKey.oldest))
        assert ids(view.tasks) == ["a", "d"]
        assert view.empty_message is None

    def test_default_params(self, tasks) -> None:
        assert ids(derive_view(tasks).tasks) == ["d", "c", "b", "a"]

    def test_empty_message_follows_filter(self, tasks) -> None:
        view = derive_view(tasks, ViewParams(filter=FilterMode.high, search="nothing here"))
        assert view.tasks == []
        assert view.empty_message == EMPTY_MESSAGES[FilterMode.high]

    def test_empty_collection(self) -> None:
        view = derive_view([])
        assert view.empty_message == EMPTY_MESSAGES[FilterMode.all]

    def test_serializes_with_camel_case_aliases(self, tasks) -> None:
        data = derive_view(tasks).model_dump(mode="json", by_alias=True)
        assert "createdAt" in data["tasks"][0]
        assert data["stats"]["highPriority"] == 2
        assert data["stats"]["completionRate"] == 50


def test_pick_motivation_uses_given_rng() -> None:
    first = pick_motivation(random.Random(7))
    assert first in MOTIVATION_MESSAGES
    assert pick_motivation(random.Random(7)) == first


def test_use_host_collation_sets_lc_collate(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(locale, "setlocale", lambda category, value=None: calls.append((category, value)))
    assert use_host_collation() is True
    assert calls == [(locale.LC_COLLATE, "")]


def test_use_host_collation_reports_unusable_locale(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(category, value=None):
        raise locale.Error("unsupported locale setting")

    monkeypatch.setattr(locale, "setlocale", broken)
    assert use_host_collation() is False
