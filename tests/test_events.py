"""
Tests for global events helpers: window, merge, filters, token rotation.
"""

import math

import pytest
from conftest import push_event, release_event, tag_event

from packages.release_monitor.events import (
    AccessTokenRotation,
    NoAccessTokensError,
    SeenEventWindow,
    build_message,
    events_valid,
    is_release_event,
    merge_pages,
)


class TestSeenEventWindow:
    """Tests for SeenEventWindow."""

    def test_evicts_oldest(self):
        window = SeenEventWindow(capacity=3)
        window.extend([1, 2, 3, 4])

        assert list(window) == [2, 3, 4]
        assert 1 not in window
        assert 4 in window
        assert len(window) == 3

    def test_push_one_at_a_time(self):
        window = SeenEventWindow(capacity=2)
        for event_id in (10, 11, 12):
            window.push(event_id)

        assert list(window) == [11, 12]

    def test_never_exceeds_capacity(self):
        window = SeenEventWindow(capacity=5)
        for start in range(0, 100, 7):
            window.extend(range(start, start + 7))
            assert len(window) <= 5

    def test_clear(self):
        window = SeenEventWindow()
        window.extend([1, 2])
        window.clear()

        assert len(window) == 0
        assert 1 not in window

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            SeenEventWindow(capacity=0)


class TestMergePages:
    """Tests for merge_pages."""

    def test_sorted_descending_and_deduplicated(self):
        pages = [[{"id": "5", "v": "first"}, {"id": "3"}, {"id": "5", "v": "second"}], [{"id": "4"}]]

        merged = merge_pages(pages)

        assert [e["id"] for e in merged] == ["5", "4", "3"]
        assert merged[0]["v"] == "first"

    def test_numeric_sort_not_lexical(self):
        merged = merge_pages([[{"id": "9"}, {"id": "10"}], [{"id": 100}]])

        assert [int(e["id"]) for e in merged] == [100, 10, 9]

    def test_empty_pages(self):
        assert merge_pages([[], [], []]) == []


class TestEventsValid:
    @pytest.mark.parametrize(
        "page",
        [
            [],
            [{"id": 1}],
            [{"id": "123"}, {"id": 4.0}],
        ],
    )
    def test_valid(self, page):
        assert events_valid(page) is True

    @pytest.mark.parametrize(
        "page",
        [
            None,
            {"id": 1},
            "events",
            [{"id": None}],
            [{"id": "abc"}],
            [{"id": "\u00b2"}],
            [{"id": True}],
            [{"id": math.nan}],
            [{"id": math.inf}],
            [{"type": "PushEvent"}],
            [{"id": 1}, "not an object"],
        ],
    )
    def test_invalid(self, page):
        assert events_valid(page) is False


class TestIsReleaseEvent:
    def test_release(self):
        assert is_release_event(release_event(1))

    def test_tag_creation(self):
        assert is_release_event(tag_event(1))

    def test_branch_creation_rejected(self):
        assert not is_release_event(tag_event(1, ref="main", ref_type="branch"))

    def test_other_types_rejected(self):
        assert not is_release_event(push_event(1))


class TestAccessTokenRotation:
    """Tests for time-sliced token selection."""

    def test_two_tokens_hourly_cycle(self):
        rotation = AccessTokenRotation(["a", "b"], cycle_seconds=3600, interval_seconds=1)

        assert rotation.pick(0) == "a"
        assert rotation.pick(1000) == "b"
        assert rotation.pick(1999) == "b"
        assert rotation.pick(1800000) == "a"

    def test_pure_function_of_time(self):
        rotation = AccessTokenRotation(["a", "b", "c"])

        assert [rotation.index_at(123456789) for _ in range(5)] == [rotation.index_at(123456789)] * 5

    def test_wraps_at_cycle_boundary(self):
        rotation = AccessTokenRotation(["a", "b", "c"], cycle_seconds=10, interval_seconds=1)

        # 10 slots per cycle: slot 9 -> index 0, slot 10 wraps to slot 0
        assert rotation.index_at(9000) == 0
        assert rotation.index_at(10000) == 0
        assert rotation.index_at(11000) == 1

    def test_index_in_range(self):
        rotation = AccessTokenRotation(["a", "b", "c", "d"], cycle_seconds=60, interval_seconds=2)

        for now_ms in range(0, 200000, 777):
            assert 0 <= rotation.index_at(now_ms) < 4

    def test_single_token(self):
        rotation = AccessTokenRotation(["only"])

        assert rotation.pick(987654321) == "only"

    def test_empty_tokens_rejected(self):
        with pytest.raises(NoAccessTokensError):
            AccessTokenRotation([])

    def test_cycle_shorter_than_interval_rejected(self):
        with pytest.raises(ValueError):
            AccessTokenRotation(["a"], cycle_seconds=1, interval_seconds=5)


class TestBuildMessage:
    def test_release_payload(self):
        message = build_message(release_event(42, repo="o/r", tag="v2.0.0"))

        assert message.to_payload() == {
            "id": 42,
            "type": "ReleaseEvent",
            "repoName": "o/r",
            "tagName": "v2.0.0",
            "createdAt": "2024-05-01T10:00:00Z",
        }

    def test_tag_creation_payload(self):
        payload = build_message(tag_event(7, repo="o/r", ref="v0.1")).to_payload()

        assert payload["type"] == "CreateEvent"
        assert payload["tagName"] == "v0.1"
