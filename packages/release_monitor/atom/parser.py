"""Atom tag feed parsing."""

from typing import List

from core.constants import GITHUB_HOST, TAG_ENTRY_REGEXP, TAG_ID_REGEXP, TAGS_ATOM_PATH
from packages.shared.types import TagEntry


def tags_url(repo: str, host: str = GITHUB_HOST) -> str:
    """Atom feed URL listing the tags of ``repo`` ("owner/name")."""
    return f"https://{host}" + TAGS_ATOM_PATH.format(repo=repo)


def parse_atom(xml: str, include_raw_entry: bool = False) -> List[TagEntry]:
    """
    Extract tag entries from an Atom feed, in document order.

    Entries whose <id> lacks the Repository/<number>/ prefix are skipped; a
    feed with no entries yields an empty list.
    """
    tags = []
    for entry in TAG_ENTRY_REGEXP.findall(xml or ""):
        match = TAG_ID_REGEXP.search(entry)
        if not match:
            continue
        tags.append(TagEntry(name=match.group(1), raw_entry=entry if include_raw_entry else ""))
    return tags
