"""
Tests for fetch error classification and aggregation.
"""

import asyncio

import aiohttp
import pytest

from packages.release_monitor.atom.errors import FetchError, FetchErrorTracker, classify
from packages.shared.enums import FetchErrorKind


class TestClassify:
    """Tests for classify()."""

    def test_success(self):
        assert classify(200) is None

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 451, 499])
    def test_client_errors_are_bad_request(self, status):
        assert classify(status) is FetchErrorKind.BAD_REQUEST

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 301, 204])
    def test_other_statuses_are_bad_response(self, status):
        assert classify(status) is FetchErrorKind.BAD_RESPONSE

    def test_exceptions_are_unknown(self):
        assert classify(asyncio.TimeoutError()) is FetchErrorKind.UNKNOWN
        assert classify(aiohttp.ClientConnectionError("reset")) is FetchErrorKind.UNKNOWN

    def test_fetch_error_keeps_its_kind(self):
        assert classify(FetchError(FetchErrorKind.NO_ENTRIES)) is FetchErrorKind.NO_ENTRIES


class TestFetchError:
    def test_from_status(self):
        error = FetchError.from_status(503)

        assert error.kind is FetchErrorKind.BAD_RESPONSE
        assert error.status == 503
        assert error.retryable is True
        assert str(error) == "bad response 503"

    def test_bad_request_is_not_retryable(self):
        assert FetchError.from_status(404).retryable is False

    def test_rate_limit_is_retryable(self):
        assert FetchError.from_status(429).retryable is True

    def test_from_status_rejects_success(self):
        with pytest.raises(ValueError):
            FetchError.from_status(200)


class TestFetchErrorTracker:
    """Tests for FetchErrorTracker."""

    def test_no_errors_no_records(self, sink):
        tracker = FetchErrorTracker(sink=sink)

        tracker.log("fetchTagsErrors")

        assert sink.records == []

    def test_push_tags_repo(self, sink):
        tracker = FetchErrorTracker(sink=sink)
        error = FetchError.from_status(502)

        tracker.push("owner/repo", error)

        assert error.repo == "owner/repo"
        assert tracker.errors == [error]

    def test_groups_emit_count_then_details(self, sink):
        tracker = FetchErrorTracker(sink=sink)
        tracker.push("a/one", FetchError.from_status(503))
        tracker.push("a/two", FetchError.from_status(500))
        tracker.push("b/one", FetchError.from_status(404))

        tracker.log("fetchTagsErrors")

        assert sink.events == [
            "fetchTagsErrorsBadResponse",
            "fetchTagsErrorsBadResponseDetails",
            "fetchTagsErrorsBadRequest",
            "fetchTagsErrorsBadRequestDetails",
        ]
        assert sink.records[0][1] == {"count": 2}
        assert sink.records[1][1] == {"errors": [["a/one", 503], ["a/two", 500]]}
        assert sink.records[3][1] == {"errors": [["b/one", 404]]}

    def test_unknown_errors_go_to_other(self, sink):
        tracker = FetchErrorTracker(sink=sink)
        tracker.push("c/one", FetchError(FetchErrorKind.UNKNOWN))
        tracker.push("c/two", RuntimeError("boom"))

        tracker.log("x")

        assert sink.events == ["xOther", "xOtherDetails"]
        assert sink.records[0][1] == {"count": 2}
        details = sink.records[1][1]["errors"]
        assert [repo for repo, _ in details] == ["c/one", "c/two"]
        assert "unknown" in details[0][1]
        assert "boom" in details[1][1]
