"""
Shared Pydantic Types/Schemas.

Contracts shared between the tag fetcher, the events monitor and the
downstream notifier. These schemas define the shape of data flowing through
the pipeline and onto the queue.
"""

from datetime import datetime
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

from core.constants import EVENT_TYPE_CREATE, EVENT_TYPE_RELEASE, REF_TYPE_TAG

from .enums import EventType

UserId = Union[int, str]


# =============================================================================
# Atom Feed Types
# =============================================================================

class TagEntry(BaseModel):
    """One tag parsed from a repository Atom feed."""
    model_config = ConfigDict(frozen=True)

    name: str
    raw_entry: str = ""


class RepoGroup(BaseModel):
    """A repository and the subscribers interested in its releases."""
    repo: str = Field(min_length=1, description='Repository as "owner/name"')
    users: List[UserId] = Field(default_factory=list)


class RepoGroupWithTags(RepoGroup):
    """A repository group with the tags fetched (or cached) for it."""
    tags: List[TagEntry] = Field(default_factory=list)


# =============================================================================
# Global Event Types
# =============================================================================

class GlobalEvent(BaseModel):
    """A release or tag-creation event from the global activity feed."""
    id: int
    type: EventType
    repo_name: str
    tag_name: str
    created_at: Union[datetime, str]

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "GlobalEvent":
        """Build from a raw event object as returned by the events endpoint."""
        payload = raw.get("payload") or {}
        raw_type = raw.get("type")

        if raw_type == EVENT_TYPE_RELEASE:
            event_type = EventType.RELEASE
            tag_name = (payload.get("release") or {}).get("tag_name", "")
        elif raw_type == EVENT_TYPE_CREATE and payload.get("ref_type") == REF_TYPE_TAG:
            event_type = EventType.TAG_CREATE
            tag_name = payload.get("ref", "")
        else:
            event_type = EventType.OTHER
            tag_name = ""

        return cls(
            id=int(raw["id"]),
            type=event_type,
            repo_name=(raw.get("repo") or {}).get("name", ""),
            tag_name=tag_name or "",
            created_at=raw.get("created_at", ""),
        )


class ReleaseMessage(BaseModel):
    """Message published to the downstream queue for each detected release."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    type: str
    repo_name: str = Field(alias="repoName")
    tag_name: str = Field(alias="tagName")
    created_at: Union[datetime, str] = Field(alias="createdAt")

    @classmethod
    def from_event(cls, event: GlobalEvent) -> "ReleaseMessage":
        return cls(
            id=event.id,
            type=event.type.value,
            repo_name=event.repo_name,
            tag_name=event.tag_name,
            created_at=event.created_at,
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON-serializable body using the queue's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
