"""Tests for record_normalizer.py - dedup, grouping and display order."""

from idloc_search.application.search.record_normalizer import (
    canonical_form,
    dedupe_by_uri,
    display_sort_key,
    fold_accents,
    group,
    normalize_key,
    ordered_groups,
)
from idloc_search.domain.entities import EnrichedWork, WorkListing


def _work(uri, title, *, is_text=True, work_type=None):
    return EnrichedWork(
        uri=f"http://id.loc.gov/resources/works/{uri}",
        label=title,
        display_title=title,
        normalized_title=normalize_key(title),
        is_text=is_text,
        work_type=work_type,
    )


# ============================================================
# normalize_key
# ============================================================


class TestNormalizeKey:
    def test_basic(self):
        assert normalize_key("The Cat, in the Hat!") == "the cat in the hat"

    def test_punctuation_variants_collide(self):
        assert normalize_key("Harry Potter: the  stone.") == normalize_key("harry potter the stone")

    def test_curly_quotes(self):
        assert normalize_key("Philosopher’s “Stone”") == "philosophers stone"

    def test_brackets_and_dashes(self):
        assert normalize_key("[Poems] — collected (1990)") == "poems collected 1990"

    def test_empty(self):
        assert normalize_key("") == ""

    def test_idempotent(self):
        for title in ("The Cat, in the Hat!", "  A  -- B ", "Œuvres complètes"):
            once = normalize_key(title)
            assert normalize_key(once) == once


# ============================================================
# dedupe_by_uri
# ============================================================


class TestDedupeByUri:
    def test_first_occurrence_kept_in_order(self):
        a, b = WorkListing("u:a", "first"), WorkListing("u:b", "b")
        dup = WorkListing("u:a", "second")
        assert dedupe_by_uri([a, b, dup]) == [a, b]

    def test_plain_dicts(self):
        rows = [{"uri": "x"}, {"uri": "y"}, {"uri": "x"}]
        assert dedupe_by_uri(rows) == [{"uri": "x"}, {"uri": "y"}]

    def test_records_without_uri_kept(self):
        rows = [{"label": "a"}, {"label": "a"}]
        assert len(dedupe_by_uri(rows)) == 2

    def test_custom_key(self):
        rows = ["a1", "a2", "b1"]
        assert dedupe_by_uri(rows, key=lambda r: r[0]) == ["a1", "b1"]

    def test_idempotent(self):
        rows = [WorkListing("1"), WorkListing("2"), WorkListing("1")]
        once = dedupe_by_uri(rows)
        assert dedupe_by_uri(once) == once


# ============================================================
# Grouping
# ============================================================


class TestCanonicalForm:
    def test_most_frequent(self):
        assert canonical_form(["Emma.", "Emma", "Emma"]) == "Emma"

    def test_tie_first_seen(self):
        assert canonical_form(["Emma.", "Emma"]) == "Emma."

    def test_empty(self):
        assert canonical_form([]) == ""


class TestGroup:
    def test_merges_on_normalized_title(self):
        groups = group([_work("1", "Harry Potter."), _work("2", "harry potter"), _work("3", "Emma")])
        assert len(groups) == 2
        merged = groups[(True, "harry potter")]
        assert merged.count == 2
        assert merged.canonical_display_title == "Harry Potter."

    def test_text_and_non_text_not_merged(self):
        groups = group([_work("1", "Emma"), _work("2", "Emma", is_text=False, work_type="MovingImage")])
        assert set(groups) == {(True, "emma"), (False, "emma")}

    def test_duplicates_dropped_before_counting(self):
        groups = group([_work("1", "Emma"), _work("1", "Emma")])
        assert groups[(True, "emma")].count == 1

    def test_members_first_seen_order(self):
        groups = group([_work("9", "Emma"), _work("2", "emma")])
        assert [m.work_id for m in groups[(True, "emma")].members] == ["9", "2"]

    def test_every_work_in_exactly_one_group(self):
        works = [_work(str(i), t) for i, t in enumerate(["A", "a.", "B", "C", "b"])]
        groups = group(works)
        uris = [uri for g in groups.values() for uri in g.uris]
        assert sorted(uris) == sorted(w.uri for w in works)


class TestOrderedGroups:
    def test_sections(self):
        grouped = ordered_groups(
            [
                _work("1", "Zebra"),
                _work("2", "Harry Potter"),
                _work("3", "Harry Potter."),
                _work("4", "Audiobook", is_text=False, work_type="Audio"),
            ]
        )
        assert [g.canonical_display_title for g in grouped.multiple_instances] == ["Harry Potter"]
        assert [g.canonical_display_title for g in grouped.single_instance] == ["Zebra"]
        assert [g.work_type for g in grouped.non_text] == ["Audio"]

    def test_single_member_non_text_stays_non_text(self):
        grouped = ordered_groups([_work("1", "Score", is_text=False, work_type="NotatedMusic")])
        assert not grouped.single_instance
        assert len(grouped.non_text) == 1

    def test_sorted_case_insensitively(self):
        grouped = ordered_groups([_work("1", "banana"), _work("2", "Apple"), _work("3", "cherry")])
        assert [g.canonical_display_title for g in grouped.single_instance] == ["Apple", "banana", "cherry"]

    def test_accented_titles_sort_with_base_letter(self):
        grouped = ordered_groups([_work("1", "Zola"), _work("2", "Émile"), _work("3", "Eagle")])
        assert [g.canonical_display_title for g in grouped.single_instance] == ["Eagle", "Émile", "Zola"]

    def test_ordered_and_primary_works(self):
        grouped = ordered_groups([_work("1", "B"), _work("2", "A"), _work("3", "A")])
        assert [g.key for g in grouped.ordered()] == ["a", "b"]
        assert [w.work_id for w in grouped.primary_works()] == ["2", "1"]

    def test_empty(self):
        assert ordered_groups([]).is_empty

    def test_input_order_does_not_matter(self):
        works = [_work("1", "C"), _work("2", "a"), _work("3", "B"), _work("4", "a")]
        forward = ordered_groups(works)
        backward = ordered_groups(list(reversed(works)))
        assert [g.key for g in forward.ordered()] == [g.key for g in backward.ordered()]


class TestDisplaySortKey:
    def test_tie_break_on_literal(self):
        assert display_sort_key("emma") != display_sort_key("Emma")

    def test_accent_sorts_after_plain_form(self):
        assert sorted(["Émile", "emile", "Emile"], key=display_sort_key) == ["Emile", "emile", "Émile"]

    def test_fold_accents(self):
        assert fold_accents("Ça déjà vu") == "Ca deja vu"
