"""
DocletExtractor — JSDoc doclets from JavaScript via tree-sitter

Walks a tree-sitter JavaScript AST, attaches each JSDoc comment to the
code it decorates and feeds the result through NameResolver.

Design principle: Registration follows document order, so by the time a
comment inside a function or object literal is resolved, the enclosing
function or literal already has its doclet in the registry.

Usage:
    from namepath.core import NameResolver
    from namepath.parsing import DocletExtractor

    extractor = DocletExtractor(NameResolver())
    doclets = extractor.extract(Path("widgets.js"), content)
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

from ..core.doclet import Doclet
from ..core.names import INSTANCE_SEPARATOR, STATIC_SEPARATOR
from ..core.resolver import NameResolver, THIS_PREFIX
from .comments import doclet_from_comment, is_doc_comment

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Tree


logger = logging.getLogger(__name__)

# Lazy import for tree-sitter to allow graceful degradation
_language_pack_available = None

TREE_SITTER_NAME = 'javascript'
DEFAULT_MAX_FILE_SIZE = 300_000  # 300KB

FUNCTION_TYPES = frozenset({
    'function_declaration',
    'generator_function_declaration',
    'function_expression',
    'function',
    'generator_function',
    'arrow_function',
    'method_definition',
})

CLASS_TYPES = frozenset({'class_declaration', 'class'})

# Kinds documented on their own, never attached to the following code
VIRTUAL_KINDS = frozenset({'file', 'module', 'event'})

INNER_DECLARATION_TYPES = frozenset({
    'variable_declarator',
    'function_declaration',
    'generator_function_declaration',
    'class_declaration',
})

# Values worth registering: later comments may look them up as containers
CONTAINER_TYPES = FUNCTION_TYPES | CLASS_TYPES | {'object'}

_WHITESPACE = re.compile(r'\s+')


def _check_language_pack() -> bool:
    """Check if tree-sitter-language-pack is available."""
    global _language_pack_available
    if _language_pack_available is None:
        try:
            import tree_sitter_language_pack  # noqa: F401
            _language_pack_available = True
        except ImportError:
            _language_pack_available = False
    return _language_pack_available


# =============================================================================
# Syntax node adapter
# =============================================================================

class JsSource:
    """
    One parsed file: the tree plus the bytes its offsets refer to.

    Wrappers are cached per node type and byte span, so the same tree-sitter
    node always maps to the same JsNode object.
    """

    def __init__(self, tree: 'Tree', data: bytes, file_path: Path):
        self.tree = tree
        self.data = data
        self.file_path = file_path
        self._wrappers: Dict[Tuple[str, int, int], 'JsNode'] = {}

    def text(self, node: 'Node') -> str:
        return self.data[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def wrap(self, node: Optional['Node']) -> Optional['JsNode']:
        if node is None:
            return None
        key = (node.type, node.start_byte, node.end_byte)
        wrapper = self._wrappers.get(key)
        if wrapper is None:
            wrapper = self._wrappers[key] = JsNode(node, self)
        return wrapper


class JsNode:
    """
    tree-sitter node seen through the resolver's SyntaxNode protocol.

    tree-sitter hands out fresh Python objects for the same node; build
    wrappers through JsSource.wrap so each node has one stable identity.
    """

    __slots__ = ('node', 'source')

    def __init__(self, node: 'Node', source: JsSource):
        self.node = node
        self.source = source

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def parent(self) -> Optional['JsNode']:
        return self.source.wrap(self.node.parent)

    @property
    def name(self) -> str:
        """Identifier of a function or class node ('' when anonymous)."""
        child = self.node.child_by_field_name('name')
        return self.source.text(child) if child is not None else ''

    @property
    def text(self) -> str:
        return self.source.text(self.node)

    @property
    def line(self) -> int:
        return self.node.start_point[0] + 1  # tree-sitter is 0-indexed

    def field(self, field_name: str) -> Optional['JsNode']:
        return self.source.wrap(self.node.child_by_field_name(field_name))

    def enclosing_function(self) -> Optional['JsNode']:
        """Nearest function strictly containing this node."""
        current = self.node.parent
        while current is not None:
            if current.type in FUNCTION_TYPES:
                return self.source.wrap(current)
            current = current.parent
        return None

    def __repr__(self) -> str:
        return f"JsNode({self.type}@{self.line})"


# =============================================================================
# Code inspection
# =============================================================================

class CodeInfo:
    """What a comment decorates: derived name, value node and how to qualify."""

    __slots__ = ('name', 'node', 'value', 'is_member', 'is_static')

    def __init__(
        self,
        name: str,
        node: JsNode,
        value: Optional[JsNode],
        is_member: bool = False,
        is_static: bool = False,
    ):
        self.name = name
        self.node = node              # Node passed to resolve_this / resolve_inner
        self.value = value            # Node registered with the doclet
        self.is_member = is_member    # Class body member
        self.is_static = is_static


def _compact(text: str) -> str:
    return _WHITESPACE.sub('', text)


def _property_key(node: JsNode) -> str:
    """Object/class key text; string keys become double-quoted literals."""
    text = node.text
    if node.type == 'string':
        return '"' + text[1:-1] + '"'
    return text


def _has_static_keyword(node: JsNode) -> bool:
    return any(child.type == 'static' for child in node.node.children)


def _unwrap(node: JsNode) -> JsNode:
    """Skip export wrappers and expression statements."""
    if node.type == 'export_statement':
        inner = node.field('declaration') or node.field('value')
        if inner is not None:
            return _unwrap(inner)
    if node.type == 'expression_statement' and node.node.named_child_count:
        return node.source.wrap(node.node.named_children[0])
    return node


def inspect_code(node: JsNode) -> Optional[CodeInfo]:
    """
    Derive a name and value node from the code a comment decorates.

    Returns:
        CodeInfo, or None when the node names nothing
    """
    node = _unwrap(node)
    kind = node.type

    if kind == 'assignment_expression':
        left = node.field('left')
        if left is None:
            return None
        return CodeInfo(_compact(left.text), node, node.field('right'))

    if kind in ('lexical_declaration', 'variable_declaration'):
        for child in node.node.named_children:
            if child.type == 'variable_declarator':
                declarator = node.source.wrap(child)
                target = declarator.field('name')
                if target is None:
                    return None
                return CodeInfo(target.text, declarator, declarator.field('value'))
        return None

    if kind in FUNCTION_TYPES or kind in CLASS_TYPES:
        is_member = kind == 'method_definition' and node.node.parent is not None \
            and node.node.parent.type == 'class_body'
        name_node = node.field('name')
        if name_node is None:
            return None
        is_static = is_member and _has_static_keyword(node)
        return CodeInfo(_property_key(name_node), node, node, is_member, is_static)

    if kind == 'field_definition':
        prop = node.field('property')
        if prop is None:
            return None
        is_static = _has_static_keyword(node)
        return CodeInfo(_property_key(prop), node, node.field('value'), True, is_static)

    if kind == 'pair':
        key = node.field('key')
        if key is None:
            return None
        return CodeInfo(_property_key(key), node, node.field('value'))

    return None


def infer_kind(info: CodeInfo) -> str:
    """Default isa for undocumented kinds."""
    value = info.value
    if value is not None and value.type in CLASS_TYPES:
        return 'constructor'
    if value is not None and value.type in FUNCTION_TYPES:
        return 'method'
    return 'property'


# =============================================================================
# Extraction
# =============================================================================

class DocletExtractor:
    """
    Extracts and resolves doclets from JavaScript source.

    The resolver's registry is shared across files extracted by the same
    instance; the current module is cleared at the start of each file.
    """

    def __init__(
        self,
        resolver: Optional[NameResolver] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ):
        self.resolver = resolver if resolver is not None else NameResolver()
        self.max_file_size = max_file_size
        self._parsers: Dict[str, 'Parser'] = {}  # Lazy-loaded parsers

    def _get_parser(self) -> Optional['Parser']:
        """Get tree-sitter parser for JavaScript (lazy-loaded)."""
        if TREE_SITTER_NAME in self._parsers:
            return self._parsers[TREE_SITTER_NAME]

        if not _check_language_pack():
            return None

        try:
            from tree_sitter_language_pack import get_parser
            parser = get_parser(TREE_SITTER_NAME)
        except Exception as e:
            logger.warning("tree-sitter grammar %r unavailable: %s", TREE_SITTER_NAME, e)
            return None

        self._parsers[TREE_SITTER_NAME] = parser
        return parser

    def is_available(self) -> bool:
        """Check if tree-sitter extraction is available."""
        return self._get_parser() is not None

    def extract_file(self, file_path: Path) -> List[Doclet]:
        """Read and extract a file; unreadable files yield no doclets."""
        try:
            content = Path(file_path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("cannot read %s: %s", file_path, e)
            return []
        return self.extract(Path(file_path), content)

    def extract(self, file_path: Path, content: str) -> List[Doclet]:
        """
        Extract resolved doclets from file content.

        Args:
            file_path: Path used for file doclets and diagnostics
            content: JavaScript source

        Returns:
            Doclets with a resolved path, in document order
        """
        data = content.encode('utf-8')
        if len(data) > self.max_file_size:
            logger.info("skipping %s: larger than %d bytes", file_path, self.max_file_size)
            return []

        parser = self._get_parser()
        if parser is None:
            return []

        tree = parser.parse(data)
        source = JsSource(tree, data, Path(file_path))

        self.resolver.set_current_module('')

        doclets: List[Doclet] = []
        for comment in self._doc_comments(source):
            doclet = self._process_comment(comment, source)
            if doclet is not None:
                doclets.append(doclet)
        return doclets

    def _doc_comments(self, source: JsSource) -> Iterator[JsNode]:
        """JSDoc comment nodes in document order."""
        stack = [source.tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == 'comment':
                if is_doc_comment(source.text(node)):
                    yield source.wrap(node)
                continue
            stack.extend(reversed(node.children))

    def _decorated_node(self, comment: JsNode) -> Optional[JsNode]:
        """First non-comment named sibling following a comment."""
        sibling = comment.node.next_named_sibling
        while sibling is not None and sibling.type == 'comment':
            sibling = sibling.next_named_sibling
        return comment.source.wrap(sibling)

    def _process_comment(self, comment: JsNode, source: JsSource) -> Optional[Doclet]:
        doclet = doclet_from_comment(comment.text, line=comment.line)

        info = None
        if doclet.kind not in VIRTUAL_KINDS:
            decorated = self._decorated_node(comment)
            info = inspect_code(decorated) if decorated is not None else None
        if info is not None and info.is_member and info.name == 'constructor':
            # Documented by the class doclet, which also owns the constructor node
            logger.debug("constructor comment at %s:%d folded into its class",
                         source.file_path, comment.line)
            return None
        if info is not None:
            doclet.node = info.node

        if not doclet.tag_value('name'):
            if info is not None:
                doclet.set_tag('name', self._qualify(info, doclet))
            elif doclet.kind == 'file':
                doclet.set_tag('name', source.file_path.as_posix())

        if not doclet.tag_value('isa') and info is not None:
            doclet.set_tag('isa', infer_kind(info))

        path = self.resolver.resolve(doclet)
        if not path:
            logger.debug("comment at %s:%d names nothing", source.file_path, comment.line)
            return None

        if doclet.kind == 'module':
            self.resolver.set_current_module(path)

        if info is not None and info.value is not None and info.value.type in CONTAINER_TYPES:
            self.resolver.register(info.value, doclet)
            if info.value.type in CLASS_TYPES:
                self._register_constructor(info.value, doclet)

        return doclet

    def _qualify(self, info: CodeInfo, doclet: Doclet) -> str:
        """Turn a code-derived name into a resolvable one."""
        name = info.name
        node = info.node
        parent = node.parent

        if info.is_member:
            return self._qualify_member(info)

        if name.startswith(THIS_PREFIX) or (parent is not None and parent.type == 'object'):
            return self.resolver.resolve_this(name, node, doclet)

        # Only declarations are local; bare assignments may target globals
        if node.type in INNER_DECLARATION_TYPES and node.enclosing_function() is not None:
            return self.resolver.resolve_inner(name, node, doclet)

        return name

    def _qualify_member(self, info: CodeInfo) -> str:
        """Class body members hang off the class doclet."""
        body = info.node.parent
        class_node = body.parent if body is not None else None
        class_doc = self.resolver.lookup(class_node)
        if class_doc is None or not class_doc.path:
            return info.name
        separator = STATIC_SEPARATOR if info.is_static else INSTANCE_SEPARATOR
        return class_doc.path + separator + info.name

    def _register_constructor(self, class_node: JsNode, doclet: Doclet) -> None:
        """`this` inside a class constructor refers to instances of the class."""
        body = class_node.field('body')
        if body is None:
            return
        for child in body.node.named_children:
            if child.type != 'method_definition':
                continue
            member = body.source.wrap(child)
            key = member.field('name')
            if key is not None and key.text == 'constructor':
                self.resolver.register(member, doclet)
                return
