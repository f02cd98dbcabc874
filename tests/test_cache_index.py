import pytest

from zbookmarks.cache import ResolutionCache
from zbookmarks.errors import CyclicReferenceError, UnknownBookmarkError, UnknownCommandError
from zbookmarks.index import EntryIndex


class TestResolutionCache:
    def test_one_failure_does_not_block_the_rest(self, sample_config):
        cache = ResolutionCache.build(sample_config)
        assert [r.name for r in cache.resolved()] == ["alpha", "beta", "greet"]
        assert list(cache.errors()) == ["broken"]
        assert cache.get("greet").command == "echo local"

    def test_get_raises_recorded_error(self, sample_config):
        cache = ResolutionCache.build(sample_config)
        with pytest.raises(UnknownCommandError):
            cache.get("broken")

    def test_get_unknown_name(self, sample_config):
        cache = ResolutionCache.build(sample_config)
        with pytest.raises(UnknownBookmarkError):
            cache.get("nope")

    def test_cycle_is_recorded_per_bookmark(self, make_config):
        config = make_config("""
            bookmarks:
              - name: ok
                cmds: ["ls"]
              - name: loop
                cmds: ["bookmark::loop"]
        """)
        cache = ResolutionCache.build(config)
        assert cache.get("ok").command == "ls"
        assert isinstance(cache.errors()["loop"], CyclicReferenceError)

    def test_invalidate_all(self, sample_config):
        cache = ResolutionCache.build(sample_config)
        cache.invalidate_all()
        assert len(cache) == 0
        assert "alpha" not in cache


class TestEntryIndex:
    def test_bookmark_rows_keep_document_ids(self, sample_generation):
        rows = sample_generation.index.bookmarks
        assert [(r.id, r.name) for r in rows] == [(1, "alpha"), (2, "beta"), (3, "greet")]
        assert rows[1].exec is True

    def test_failures_are_listed_separately(self, sample_generation):
        failures = sample_generation.index.failures
        assert [(f.id, f.name) for f in failures] == [(4, "broken")]
        assert "missing" in failures[0].message

    def test_labels_in_first_seen_order(self, sample_generation):
        labels = sample_generation.index.labels
        assert [(l.id, l.name) for l in labels] == [(1, "files"), (2, "tmp"), (3, "nav")]
        assert labels[0].bookmarks == ("alpha", "beta")

    def test_empty_index(self, make_config):
        config = make_config("bookmarks: []")
        index = EntryIndex.build(config, ResolutionCache.build(config))
        assert index.bookmarks == ()
        assert index.labels == ()
