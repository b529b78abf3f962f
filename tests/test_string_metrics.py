"""Tests for string_metrics.py - edit distance and initials."""

from idloc_search.application.search.string_metrics import edit_distance, initials


class TestEditDistance:
    def test_classic_example(self):
        assert edit_distance("kitten", "sitting") == 3

    def test_identity(self):
        assert edit_distance("rowling", "rowling") == 0

    def test_empty_sides(self):
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "") == 3
        assert edit_distance("", "") == 0

    def test_symmetry(self):
        pairs = [("harry", "potter"), ("flaw", "lawn"), ("gumbo", "gambol")]
        for a, b in pairs:
            assert edit_distance(a, b) == edit_distance(b, a)

    def test_case_sensitive(self):
        """Folding case is the caller's job."""
        assert edit_distance("Rowling", "rowling") == 1

    def test_code_points(self):
        assert edit_distance("café", "cafe") == 1

    def test_triangle_inequality(self):
        a, b, c = "tolkien", "tolstoy", "toland"
        assert edit_distance(a, c) <= edit_distance(a, b) + edit_distance(b, c)


class TestInitials:
    def test_last_first(self):
        assert initials("Smith, John") == "JS"

    def test_with_dates(self):
        assert initials("Rowling, J. K.") == "JR"

    def test_single_part(self):
        assert initials("Madonna") == "M"

    def test_empty(self):
        assert initials("") == ""
        assert initials(None) == ""

    def test_only_separators(self):
        assert initials(" , ") == ""

    def test_lowercase_input(self):
        assert initials("austen, jane") == "JA"
