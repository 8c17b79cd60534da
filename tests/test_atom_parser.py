"""
Tests for Atom feed parsing.
"""

from conftest import atom_entry, atom_feed

from packages.release_monitor.atom.parser import parse_atom, tags_url
from packages.shared.types import TagEntry


class TestParseAtom:
    """Tests for parse_atom."""

    def test_entries_in_document_order(self, sample_feed):
        tags = parse_atom(sample_feed, include_raw_entry=False)

        assert [t.name for t in tags] == ["v1.2.0", "v1.1.0", "v1.0.0"]
        assert all(t.raw_entry == "" for t in tags)

    def test_include_raw_entry(self):
        entry = atom_entry("v2.0.0")
        tags = parse_atom(atom_feed(entry), include_raw_entry=True)

        assert tags == [TagEntry(name="v2.0.0", raw_entry=entry)]

    def test_entries_without_matching_id_are_dropped(self):
        """k entries, j with a tag id -> exactly j results, order kept."""
        feed = atom_feed(
            atom_entry("v3"),
            "<entry><id>urn:uuid:no-path</id><title>odd</title></entry>",
            atom_entry("v2"),
            "<entry><title>no id at all</title></entry>",
            atom_entry("v1"),
        )

        tags = parse_atom(feed)

        assert [t.name for t in tags] == ["v3", "v2", "v1"]

    def test_slash_tags_kept_whole(self):
        feed = atom_feed(atom_entry("release/1.0"), atom_entry("cli/v2.0"), atom_entry("api/v2.0"))

        assert [t.name for t in parse_atom(feed)] == ["release/1.0", "cli/v2.0", "api/v2.0"]

    def test_id_without_repository_prefix_is_dropped(self):
        feed = atom_feed("<entry><id>https://github.com/owner/repo/v1</id></entry>", atom_entry("v2"))

        assert [t.name for t in parse_atom(feed)] == ["v2"]

    def test_empty_feed(self):
        assert parse_atom(atom_feed()) == []
        assert parse_atom("") == []

    def test_feed_level_id_is_ignored(self, sample_feed):
        tags = parse_atom(sample_feed)

        assert "tags" not in [t.name for t in tags]

    def test_multiline_entries_match_non_greedily(self):
        feed = "<feed>" + atom_entry("a") + "\n\n" + atom_entry("b") + "</feed>"

        assert [t.name for t in parse_atom(feed, True)] == ["a", "b"]
        assert all(t.raw_entry.count("<entry>") == 1 for t in parse_atom(feed, True))


class TestTagsUrl:
    def test_default_host(self):
        assert tags_url("owner/repo") == "https://github.com/owner/repo/tags.atom"

    def test_custom_host(self):
        assert tags_url("o/r", host="ghe.example.com") == "https://ghe.example.com/o/r/tags.atom"
