"""
Parsing module — Doclets from JavaScript source via tree-sitter.

- comments: JSDoc comment -> raw tags
- javascript: tree-sitter walk, code-derived names, resolver driving

Usage:
    from namepath.parsing import DocletExtractor

    extractor = DocletExtractor()
    doclets = extractor.extract(Path("app.js"), content)
"""

from .comments import parse_comment, is_doc_comment, doclet_from_comment
from .javascript import DocletExtractor, JsNode, JsSource

__all__ = [
    'parse_comment',
    'is_doc_comment',
    'doclet_from_comment',
    'DocletExtractor',
    'JsNode',
    'JsSource',
]
