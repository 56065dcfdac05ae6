"""
Tests for the namepath algebra — splitting and composing namepaths

These tests validate:
- shorten() splits at the rightmost unquoted separator
- '#' and '~' stay on the container, '.' is dropped
- Quoted literals are never split internally
- join() reverses shorten()
"""

import pytest

from namepath.core.names import (
    ANONYMOUS,
    first_token,
    join,
    joiner_for,
    normalize_prototype,
    shorten,
    strip_last_segment,
    strip_scheme,
)


# ============================================================================
# SHORTEN
# ============================================================================

class TestShorten:
    """Split a namepath into (container prefix, short name)."""

    def test_static_member(self):
        """'.' is dropped from the prefix."""
        assert shorten("a.b.c") == ("a.b", "c")

    def test_instance_member_keeps_marker(self):
        """'#' stays as a trailing scope marker."""
        assert shorten("a#b") == ("a#", "b")

    def test_inner_member_keeps_marker(self):
        """'~' stays as a trailing scope marker."""
        assert shorten("a~b") == ("a~", "b")

    def test_quoted_segment_is_atomic(self):
        """Separators inside quotes are not split points."""
        assert shorten('"a.b".c') == ('"a.b"', "c")

    def test_quoted_short_name(self):
        """A quoted final segment comes back whole."""
        assert shorten('ns."x#y"') == ("ns", '"x#y"')

    def test_two_quoted_segments(self):
        assert shorten('"a.b"."c.d"') == ('"a.b"', '"c.d"')

    def test_only_quoted(self):
        """A single quoted literal has no container."""
        assert shorten('"a.b~c"') == ("", '"a.b~c"')

    def test_no_separator(self):
        assert shorten("foo") == ("", "foo")

    def test_empty(self):
        assert shorten("") == ("", "")

    def test_rightmost_separator_wins(self):
        """Mixed separators split at whichever is last."""
        assert shorten("a#b.c~d") == ("a#b.c~", "d")
        assert shorten("a~b#c.d") == ("a~b#c", "d")

    def test_trailing_separator(self):
        """A trailing '.' leaves an empty short name."""
        assert shorten("Foo.") == ("Foo", "")

    def test_unmatched_quote_is_plain_text(self):
        """A lone quote does not start a literal."""
        assert shorten('"open.end') == ('"open', "end")

    def test_placeholder_like_text_survives(self):
        """Text resembling the mask token is not mangled."""
        assert shorten('"q.r".@{0}@') == ('"q.r"', "@{0}@")

    @pytest.mark.parametrize("path", [
        "a.b.c",
        "a#b",
        "a~b",
        '"a.b".c',
        "x.y#z",
        "mod.init~helper",
        'ns."odd.key"#run',
    ])
    def test_reconstructs_path(self, path):
        """join(shorten(p)) gives back p."""
        prefix, name = shorten(path)
        assert join(prefix, name) == path


# ============================================================================
# COMPOSITION
# ============================================================================

class TestJoin:
    """Compose a container with a name."""

    def test_plain_container_uses_dot(self):
        assert join("Foo", "bar") == "Foo.bar"

    def test_instance_marker_is_the_join(self):
        assert join("Foo#", "bar") == "Foo#bar"

    def test_inner_marker_is_the_join(self):
        assert join("Foo~", "bar") == "Foo~bar"

    def test_empty_container(self):
        assert join("", "bar") == "bar"

    def test_placeholder_container(self):
        assert join(ANONYMOUS, "x") == "[[anonymous]].x"

    def test_joiner_for(self):
        assert joiner_for("Foo") == "."
        assert joiner_for("Foo#") == ""
        assert joiner_for("Foo~") == ""


# ============================================================================
# NORMALIZATION HELPERS
# ============================================================================

class TestNormalizePrototype:
    """Prototype indirection becomes '#'."""

    def test_prototype_member(self):
        assert normalize_prototype("Foo.prototype.bar") == "Foo#bar"

    def test_trailing_prototype(self):
        assert normalize_prototype("Foo.prototype") == "Foo#"

    def test_chained_prototypes(self):
        assert normalize_prototype("a.prototype.b.prototype.c") == "a#b#c"

    def test_no_prototype(self):
        assert normalize_prototype("Foo.bar") == "Foo.bar"


class TestFirstToken:
    """Only the first word of a name tag is significant."""

    def test_discards_trailing_words(self):
        assert first_token("Foo.bar the bar method") == "Foo.bar"

    def test_leading_whitespace(self):
        assert first_token("   Foo") == "Foo"

    def test_empty(self):
        assert first_token("") == ""
        assert first_token("   ") == ""


class TestStripScheme:
    """Explicit scheme scan instead of shared match state."""

    def test_event_scheme(self):
        assert strip_scheme("event:changed") == (True, "changed")

    def test_module_scheme_with_slashes(self):
        assert strip_scheme("module:foo/bar") == (True, "foo/bar")

    def test_case_insensitive(self):
        assert strip_scheme("Custom-Kind:x") == (True, "x")

    def test_no_scheme(self):
        assert strip_scheme("changed") == (False, "changed")

    def test_colon_without_scheme(self):
        """A leading colon is not a scheme."""
        assert strip_scheme(":x") == (False, ":x")


class TestStripLastSegment:
    """Remove the final segment, keeping its separator."""

    def test_instance_method(self):
        assert strip_last_segment("Klass#method") == "Klass#"

    def test_static_chain(self):
        assert strip_last_segment("ns.Klass.run") == "ns.Klass."

    def test_single_segment(self):
        """Nothing is left once the only segment goes."""
        assert strip_last_segment("init") == ""

    def test_quoted_last_segment(self):
        assert strip_last_segment('Klass#"a.b"') == "Klass#"

    def test_already_ends_in_separator(self):
        assert strip_last_segment("Klass#") == "Klass#"
