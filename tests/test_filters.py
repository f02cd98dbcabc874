import pytest

from zbookmarks.filters import FilterMode, effective_filter_mode, filter_rows
from zbookmarks.index import BookmarkRow, LabelRow

ROWS = [
    BookmarkRow(id=1, name="alpha", command="ls", exec=False, labels=("Files",)),
    BookmarkRow(id=2, name="beta", command="cd", exec=False, labels=("nav",)),
    BookmarkRow(id=12, name="Alphabet", command="echo", exec=False),
]


def names(rows):
    return [r.name for r in rows]


class TestByName:
    @pytest.mark.parametrize("query", ["al", "AL"])
    def test_ignore_case(self, query):
        assert names(filter_rows(ROWS[:2], FilterMode.NAME, query, ignore_case=True)) == ["alpha"]

    def test_case_sensitive(self):
        assert names(filter_rows(ROWS, FilterMode.NAME, "Al", ignore_case=False)) == ["Alphabet"]

    def test_order_is_preserved(self):
        assert names(filter_rows(ROWS, FilterMode.NAME, "a", ignore_case=True)) == ["alpha", "beta", "Alphabet"]

    def test_empty_query_keeps_everything(self):
        assert filter_rows(ROWS, FilterMode.NAME, "") == ROWS


class TestByID:
    def test_exact_match(self):
        assert names(filter_rows(ROWS, FilterMode.ID, "2")) == ["beta"]

    def test_no_prefix_match(self):
        assert names(filter_rows(ROWS, FilterMode.ID, "1")) == ["alpha"]

    def test_non_numeric_query_matches_nothing(self):
        assert filter_rows(ROWS, FilterMode.ID, "x") == []


class TestByLabel:
    def test_substring_on_labels(self):
        assert names(filter_rows(ROWS, FilterMode.LABEL, "fil", ignore_case=True)) == ["alpha"]

    def test_rows_without_labels_never_match(self):
        assert names(filter_rows(ROWS, FilterMode.LABEL, "a", ignore_case=True)) == ["beta"]

    def test_label_rows(self):
        labels = [LabelRow(id=1, name="files"), LabelRow(id=2, name="nav")]
        assert [l.name for l in filter_rows(labels, FilterMode.NAME, "NA")] == ["nav"]
        assert [l.name for l in filter_rows(labels, FilterMode.ID, "1")] == ["files"]


class TestAutodetect:
    def test_digits_switch_to_id(self):
        assert effective_filter_mode(FilterMode.NAME, "12", autodetect=True) == FilterMode.ID

    def test_disabled(self):
        assert effective_filter_mode(FilterMode.NAME, "12", autodetect=False) == FilterMode.NAME

    def test_text_keeps_selected_mode(self):
        assert effective_filter_mode(FilterMode.LABEL, "nav", autodetect=True) == FilterMode.LABEL

    def test_empty_query_keeps_selected_mode(self):
        assert effective_filter_mode(FilterMode.NAME, "", autodetect=True) == FilterMode.NAME

    def test_forced_mode_wins(self):
        assert effective_filter_mode(FilterMode.NAME, "12", autodetect=True, forced=True) == FilterMode.NAME
