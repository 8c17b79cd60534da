"""
Pytest fixtures for release monitor tests.

Upstream HTTP, Redis and the log sink are replaced with in-memory fakes.
"""

from typing import Any, Dict, List, Tuple

import pytest

from core.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from the developer's environment and cached settings."""
    for name in (
        "GITHUB_ACCESS_TOKENS",
        "REDIS_URL",
        "EVENTS_MONITORING_INTERVAL",
        "EVENTS_MONITORING_CYCLE",
        "MAX_TAGS_TO_FETCH",
        "FETCH_ATTEMPTS",
        "FETCH_ATTEMPTS_INTERVAL_MS",
        "FETCH_TIMEOUT_MS",
        "RELEASES_STREAM_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class RecordingSink:
    """Log sink capturing (event, fields) records."""

    def __init__(self):
        self.records: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, event: str, **fields: Any) -> None:
        self.records.append((event, fields))

    @property
    def events(self) -> List[str]:
        return [event for event, _ in self.records]


@pytest.fixture
def sink():
    return RecordingSink()


class ScriptedFeedClient:
    """FeedClient stand-in returning scripted bodies or raising scripted errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: List[str] = []

    async def fetch_text(self, url, timeout_ms, headers=None):
        self.calls.append(url)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def scripted_client():
    return ScriptedFeedClient


def atom_entry(tag: str, repo_id: int = 1234) -> str:
    return (
        "<entry>\n"
        f"    <id>tag:github.com,2008:Repository/{repo_id}/{tag}</id>\n"
        "    <updated>2024-05-01T10:00:00Z</updated>\n"
        f'    <link rel="alternate" type="text/html" href="https://github.com/owner/repo/releases/tag/{tag}"/>\n'
        f"    <title>{tag}</title>\n"
        "  </entry>"
    )


def atom_feed(*entries: str) -> str:
    body = "\n  ".join(entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom" xml:lang="en-US">\n'
        "  <id>tag:github.com,2008:https://github.com/owner/repo/tags</id>\n"
        "  <title>Tags from repo</title>\n"
        f"  {body}\n"
        "</feed>\n"
    )


@pytest.fixture
def sample_feed():
    """Atom feed with three tagged entries."""
    return atom_feed(atom_entry("v1.2.0"), atom_entry("v1.1.0"), atom_entry("v1.0.0"))


def release_event(event_id: int, repo: str = "owner/repo", tag: str = "v1.0.0") -> Dict[str, Any]:
    return {
        "id": str(event_id),
        "type": "ReleaseEvent",
        "repo": {"id": 1, "name": repo},
        "payload": {"action": "published", "release": {"tag_name": tag}},
        "created_at": "2024-05-01T10:00:00Z",
    }


def tag_event(event_id: int, repo: str = "owner/repo", ref: str = "v1.0.0", ref_type: str = "tag") -> Dict[str, Any]:
    return {
        "id": str(event_id),
        "type": "CreateEvent",
        "repo": {"id": 1, "name": repo},
        "payload": {"ref": ref, "ref_type": ref_type},
        "created_at": "2024-05-01T10:00:01Z",
    }


def push_event(event_id: int) -> Dict[str, Any]:
    return {
        "id": str(event_id),
        "type": "PushEvent",
        "repo": {"id": 1, "name": "owner/repo"},
        "payload": {},
        "created_at": "2024-05-01T10:00:02Z",
    }
