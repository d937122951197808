"""Tests for property map rendering."""

from hbpatch.scripter.formatter import (
    comment_lines,
    escape_double_quotes,
    has_line_break,
    render_properties,
    sorted_properties,
)


class TestEscapeDoubleQuotes:
    """Tests for double quote escaping."""

    def test_escapes_each_double_quote(self):
        """Every double quote gets a backslash in front of it."""
        assert escape_double_quotes('say "hi"') == 'say \\"hi\\"'

    def test_other_characters_untouched(self):
        """Single quotes, backslashes, #{} and newlines pass through unchanged."""
        value = "it's a \\path #{x}\n"
        assert escape_double_quotes(value) == value

    def test_empty_string(self):
        assert escape_double_quotes("") == ""


class TestSortedProperties:
    """Tests for canonical property ordering."""

    def test_keys_sorted_regardless_of_insertion_order(self):
        """Keys {z, a, m} always come out as a, m, z."""
        props = {"z": "1", "a": "2", "m": "3"}
        assert list(sorted_properties(props)) == [("a", "2"), ("m", "3"), ("z", "1")]

    def test_values_escaped(self):
        assert list(sorted_properties({"k": 'say "hi"'})) == [("k", 'say \\"hi\\"')]

    def test_keys_not_escaped(self):
        """Only values are escaped by the formatter."""
        assert list(sorted_properties({'a"b': "v"})) == [('a"b', "v")]

    def test_empty_map_yields_nothing(self):
        assert list(sorted_properties({})) == []

    def test_is_lazy(self):
        """sorted_properties returns an iterator, not a list."""
        result = sorted_properties({"a": "1"})
        assert next(result) == ("a", "1")


class TestRenderProperties:
    """Tests for the shared property rendering routine."""

    def test_render_callback_receives_sorted_escaped_entries(self):
        lines = list(
            render_properties(
                {"b": '"x"', "a": "y"}, lambda k, v: f"{k}={v}"
            )
        )
        assert lines == ["a=y", 'b=\\"x\\"']

    def test_render_empty(self):
        assert list(render_properties({}, lambda k, v: k)) == []


class TestCommentLines:
    """Tests for rendering free text as comments."""

    def test_single_line(self):
        assert comment_lines("hello") == ["# hello"]

    def test_each_physical_line_prefixed(self):
        assert comment_lines("a\nputs 1\r\nb", "#   ") == ["#   a", "#   puts 1", "#   b"]

    def test_empty_text(self):
        assert comment_lines("") == ["#"]

    def test_has_line_break(self):
        assert has_line_break("a\nb")
        assert has_line_break("a\r")
        assert not has_line_break("a b")
