"""
Tests for DocletExtractor — end-to-end resolution of JavaScript sources

These tests parse real JavaScript with tree-sitter and check the
resolved namepaths. Skipped when tree-sitter-language-pack is missing.
"""

import logging
from pathlib import Path

import pytest

pytest.importorskip("tree_sitter_language_pack")

from namepath.core.resolver import NameResolver
from namepath.parsing.javascript import DocletExtractor


@pytest.fixture
def extractor():
    extractor = DocletExtractor(NameResolver())
    if not extractor.is_available():
        pytest.skip("JavaScript grammar not available")
    return extractor


def _paths(doclets):
    return [doclet.path for doclet in doclets]


def _by_path(doclets):
    return {doclet.path: doclet for doclet in doclets}


# ============================================================================
# PROTOTYPES AND `this`
# ============================================================================

CONSTRUCTOR_SOURCE = """
/** @constructor */
function Widget(name) {
    /** The widget name. */
    this.name = name;
}

/** Render it. */
Widget.prototype.render = function () {
    /** Render count. */
    this.count = 1;
};
"""


class TestConstructors:
    """Constructor members and prototype methods."""

    def test_paths(self, extractor):
        doclets = extractor.extract(Path("widget.js"), CONSTRUCTOR_SOURCE)
        assert _paths(doclets) == ["Widget", "Widget#name", "Widget#render", "Widget#count"]

    def test_kinds(self, extractor):
        doclets = _by_path(extractor.extract(Path("widget.js"), CONSTRUCTOR_SOURCE))

        assert doclets["Widget"].kind == "constructor"
        assert doclets["Widget#render"].kind == "method"
        assert doclets["Widget#name"].kind == "property"

    def test_members(self, extractor):
        doclets = _by_path(extractor.extract(Path("widget.js"), CONSTRUCTOR_SOURCE))

        render = doclets["Widget#render"]
        assert render.name == "render"
        assert render.memberof == "Widget#"

    def test_lines(self, extractor):
        doclets = extractor.extract(Path("widget.js"), CONSTRUCTOR_SOURCE)
        assert doclets[0].line == 2


# ============================================================================
# MODULES, CLOSURES, OBJECT LITERALS
# ============================================================================

MODULE_SOURCE = """
/** @module widgets */

/** Create one. */
exports.create = function () {
    /** Local helper. */
    function helper() {}
};

/** Settings. */
var settings = {
    /** Debug flag. */
    debug: false
};
"""


class TestModules:
    """Re-exports, inner functions and object members."""

    def test_paths(self, extractor):
        doclets = extractor.extract(Path("widgets.js"), MODULE_SOURCE)
        assert _paths(doclets) == [
            "module:widgets",
            "module:widgets.create",
            "module:widgets.create~helper",
            "settings",
            "settings.debug",
        ]

    def test_inner_helper(self, extractor):
        doclets = _by_path(extractor.extract(Path("widgets.js"), MODULE_SOURCE))

        helper = doclets["module:widgets.create~helper"]
        assert helper.memberof == "module:widgets.create"
        assert helper.is_inner() is True

    def test_module_scope_ends_with_file(self, extractor):
        """The next file starts without a current module."""
        extractor.extract(Path("widgets.js"), MODULE_SOURCE)
        doclets = extractor.extract(Path("other.js"), "/** Make. */\nexports.make = 1;\n")

        assert _paths(doclets) == ["exports.make"]


CLOSURE_SOURCE = """
(function () {
    /** Counter. */
    var count = 0;
})();
"""


class TestClosures:
    """Symbols inside anonymous functions."""

    def test_anonymous_function(self, extractor):
        doclets = extractor.extract(Path("closure.js"), CLOSURE_SOURCE)

        assert _paths(doclets) == ["[[anonymous]]~count"]
        assert doclets[0].is_inner() is True


CLASS_SOURCE = """
/** A shape. */
class Shape {
    /** Area. */
    area() {
        /** Cached. */
        this.cache = null;
    }
}
"""


STATIC_SOURCE = """
/** A. */
class A {
    /** Not static. */
    staticky = 1;
    /** Not static either. */
    statistics() {}
    /** Shared count. */
    static count = 0;
    /** Factory. */
    static make() {}
}
"""

CONSTRUCTOR_CLASS_SOURCE = """
/** A shape. */
class Shape {
    /** Build. */
    constructor() {
        /** Width. */
        this.width = 1;
    }
}
"""


class TestClasses:
    """Class bodies hang off the class doclet."""

    def test_paths(self, extractor):
        doclets = extractor.extract(Path("shape.js"), CLASS_SOURCE)
        assert _paths(doclets) == ["Shape", "Shape#area", "Shape#cache"]

    def test_class_kind(self, extractor):
        doclets = _by_path(extractor.extract(Path("shape.js"), CLASS_SOURCE))
        assert doclets["Shape"].kind == "constructor"

    def test_static_members(self, extractor):
        """Only the static keyword makes a member static, not its name."""
        doclets = extractor.extract(Path("a.js"), STATIC_SOURCE)
        assert _paths(doclets) == ["A", "A#staticky", "A#statistics", "A.count", "A.make"]

    def test_this_in_documented_constructor(self, extractor):
        doclets = extractor.extract(Path("shape.js"), CONSTRUCTOR_CLASS_SOURCE)
        assert _paths(doclets) == ["Shape", "Shape#width"]

    def test_this_in_undocumented_constructor(self, extractor):
        source = CONSTRUCTOR_CLASS_SOURCE.replace("/** Build. */", "")
        doclets = extractor.extract(Path("shape.js"), source)
        assert _paths(doclets) == ["Shape", "Shape#width"]


# ============================================================================
# EXPLICIT TAGS AND EDGE CASES
# ============================================================================

class TestExplicitTags:
    """Comment tags take precedence over code."""

    def test_name_and_memberof(self, extractor):
        source = "/**\n * @name bar\n * @memberof Foo\n */\nvar ignored = 1;\n"
        doclets = extractor.extract(Path("a.js"), source)
        assert _paths(doclets) == ["Foo.bar"]

    def test_virtual_event(self, extractor):
        source = "/**\n * @event changed\n * @memberof Widget\n */\n"
        doclets = extractor.extract(Path("a.js"), source)
        assert _paths(doclets) == ["Widget.event:changed"]

    def test_file_doclet(self, extractor):
        doclets = extractor.extract(Path("lib/util.js"), "/** @file Helpers. */\n")
        assert _paths(doclets) == ["lib/util.js"]


class TestEdgeCases:
    """Nothing documented, nothing returned."""

    def test_plain_comments_ignored(self, extractor):
        source = "// line\n/* block */\nvar x = 1;\n"
        assert extractor.extract(Path("a.js"), source) == []

    def test_comment_without_code(self, extractor):
        assert extractor.extract(Path("a.js"), "/** Orphan. */\n") == []

    def test_oversized_file_skipped(self):
        extractor = DocletExtractor(NameResolver(), max_file_size=10)
        assert extractor.extract(Path("a.js"), "/** Big. */\nvar big = 1;\n") == []

    def test_size_limit_counts_bytes(self):
        source = "/** \u00e9\u00e9\u00e9\u00e9\u00e9 */\nvar x;\n"
        assert len(source) == 20
        extractor = DocletExtractor(NameResolver(), max_file_size=20)
        assert extractor.extract(Path("a.js"), source) == []

    def test_extract_file(self, extractor, tmp_path):
        source = tmp_path / "w.js"
        source.write_text(CONSTRUCTOR_SOURCE, encoding="utf-8")
        assert _paths(extractor.extract_file(source))[0] == "Widget"

    def test_missing_file(self, extractor, tmp_path):
        assert extractor.extract_file(tmp_path / "missing.js") == []


class GrammarDownloadError(Exception):
    """Stands in for the language pack's own error types."""


class TestParserUnavailable:
    """A grammar that fails to load means no doclets, not a crash."""

    @pytest.fixture
    def broken_pack(self, monkeypatch):
        import tree_sitter_language_pack

        def get_parser(name):
            raise GrammarDownloadError("download failed")

        monkeypatch.setattr(tree_sitter_language_pack, "get_parser", get_parser)

    def test_extract_returns_empty(self, broken_pack):
        extractor = DocletExtractor(NameResolver())
        assert extractor.extract(Path("a.js"), CONSTRUCTOR_SOURCE) == []

    def test_not_available(self, broken_pack, caplog):
        extractor = DocletExtractor(NameResolver())
        with caplog.at_level(logging.WARNING, logger="namepath.parsing.javascript"):
            assert extractor.is_available() is False
        assert "download failed" in caplog.text
