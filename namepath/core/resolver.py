"""
NameResolver — Computes canonical namepaths for doclets

Reconstructs a global namespace from local, often incomplete hints:
- Prototype chains ('Foo.prototype.bar' -> 'Foo#bar')
- Lexical `this` ('this.x' inside Klass#method -> 'Klass#x')
- Closure-local symbols ('helper' inside mod.init -> 'mod.init~helper')
- Module re-exports ('exports.create' -> '<module>.create')
- Doc-namespace schemes ('event:changed')

Design principle: Never fail a resolution pass. Every input, however
malformed, produces a best-effort string.

Usage:
    from namepath.core import NameResolver, Doclet

    resolver = NameResolver()
    doclet = Doclet.from_tags(name='Foo.prototype.bar', isa='method')
    resolver.resolve(doclet)    # 'Foo#bar'
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Tuple

from .dictionary import TagDictionary
from .doclet import Doclet
from .names import (
    ANONYMOUS,
    ANONYMOUS_OBJECT,
    INNER_SEPARATOR,
    INSTANCE_SEPARATOR,
    SEPARATORS,
    first_token,
    join,
    joiner_for,
    normalize_prototype,
    shorten,
    strip_last_segment,
    strip_scheme,
)
from .registry import NodeDocletRegistry

logger = logging.getLogger(__name__)

THIS_PREFIX = 'this.'

# Node types treated as object/record literals (tree-sitter JavaScript naming)
OBJECT_LITERAL_TYPES = frozenset({'object'})

_EXPORTS = re.compile(r'^exports\.(?=.)', re.DOTALL)


class SyntaxNode(Protocol):
    """Capabilities the resolver needs from a syntax node."""
    parent: Optional['SyntaxNode']
    type: str
    name: str

    def enclosing_function(self) -> Optional['SyntaxNode']:
        ...


@dataclass
class ResolverContext:
    """
    Per-session resolution state.

    Attributes:
        registry: Nodes already associated with finalized doclets
        current_module: Identifier substituted for 'exports.' (empty = none)
    """
    registry: NodeDocletRegistry = field(default_factory=NodeDocletRegistry)
    current_module: str = ""

    def set_current_module(self, identifier: str) -> None:
        self.current_module = identifier or ""

    def reset(self) -> None:
        """Forget every registration and the current module."""
        self.registry.clear()
        self.current_module = ""


class NameResolver:
    """
    Resolves doclet names into namepaths.

    Each instance owns its context, so independent sessions (e.g. two
    documentation builds) never share registrations or module state.
    """

    def __init__(
        self,
        dictionary: Optional[TagDictionary] = None,
        context: Optional[ResolverContext] = None,
    ):
        self.dictionary = dictionary if dictionary is not None else TagDictionary()
        self.context = context if context is not None else ResolverContext()

    # =========================================================================
    # Context
    # =========================================================================

    @property
    def current_module(self) -> str:
        return self.context.current_module

    def set_current_module(self, identifier: str) -> None:
        self.context.set_current_module(identifier)

    def reset(self) -> None:
        self.context.reset()

    def register(self, node: Any, doclet: Doclet) -> None:
        self.context.registry.register(node, doclet)

    def lookup(self, node: Any) -> Optional[Doclet]:
        return self.context.registry.lookup(node)

    @staticmethod
    def shorten(path: str) -> Tuple[str, str]:
        return shorten(path)

    # =========================================================================
    # resolve
    # =========================================================================

    def resolve(self, doclet: Doclet) -> str:
        """
        Calculate and store the path, memberof and name of a doclet.

        Args:
            doclet: Doclet carrying raw name/memberof/isa tags

        Returns:
            The resolved path ('' when the doclet carries no name)
        """
        kind = doclet.tag_value('isa')
        memberof = doclet.tag_value('memberof')
        docspace = ''

        # Only the first word of the tagged name counts
        name = first_token(doclet.tag_value('name'))

        module = self.context.current_module
        if module:
            name = _EXPORTS.sub(lambda _: module + '.', name)

        name = normalize_prototype(name)
        path = name

        if memberof:
            # @name Foo.bar with @memberof Foo
            if name.startswith(memberof):
                path = name
                _, name = shorten(name)
        elif kind != 'file':
            memberof, name = shorten(name)
            if memberof:
                self._store_memberof(doclet, memberof)

        # The scheme belongs in the path, not in the name
        if self.dictionary.lookup(kind).sets_doclet_docspace:
            _, name = strip_scheme(name)
            docspace = kind + ':'

        if name:
            doclet.set_tag('name', name)

        if memberof and not name.startswith(memberof):
            path = memberof + joiner_for(memberof) + docspace + name
        elif docspace:
            path = docspace + name

        if path:
            doclet.set_tag('path', path)

        logger.debug("resolved %r (isa=%r) -> %r", doclet.tag_value('name'), kind, path)
        return path

    def _store_memberof(self, doclet: Doclet, memberof: str) -> None:
        # A trailing '~' marks an inner symbol
        if len(memberof) > 1 and memberof.endswith(INNER_SEPARATOR):
            doclet.set_tag('memberof', memberof[:-1])
            doclet.set_tag('access', 'inner')
        else:
            doclet.set_tag('memberof', memberof)

    # =========================================================================
    # resolve_this
    # =========================================================================

    def resolve_this(self, name: str, node: SyntaxNode, doclet: Doclet) -> str:
        """
        Qualify a member of an object literal or a `this.`-prefixed name.

        Does not touch doclet.path; feed the result to resolve().

        Args:
            name: Raw name (e.g., 'this.x', or a bare object literal key)
            node: Syntax node the doclet decorates
            doclet: Doclet being resolved (its memberof tag is consulted)

        Returns:
            Rewritten name
        """
        memberof = normalize_prototype(doclet.tag_value('memberof'))
        parent = getattr(node, 'parent', None)

        if parent is not None and parent.type in OBJECT_LITERAL_TYPES:
            enclosing_doc = self.lookup(parent)
            if enclosing_doc is not None:
                container = normalize_prototype(enclosing_doc.path) or ANONYMOUS_OBJECT
                name = join(container, name)
            return name

        if not name.startswith(THIS_PREFIX):
            return name

        member = name[len(THIS_PREFIX):]

        if memberof and memberof != 'this':
            # An explicit @memberof supplies the qualification
            return member

        enclosing = node.enclosing_function()
        enclosing_doc = self.lookup(enclosing)

        if enclosing_doc is None:
            container = ''
        elif enclosing_doc.is_inner():
            # Inner functions have the global `this`
            container = ''
        else:
            container = enclosing_doc.tag_value('path')

        if enclosing is not None and not container:
            logger.debug("'this' in %r resolves to an anonymous function scope", name)
            return member

        # `this` is the nearest non-inner owner: drop the method itself
        if enclosing_doc is not None and enclosing_doc.kind != 'constructor':
            container = strip_last_segment(container)

        if not container or container[-1] in SEPARATORS:
            joiner = ''
        else:
            joiner = INSTANCE_SEPARATOR
        return container + joiner + member

    # =========================================================================
    # resolve_inner
    # =========================================================================

    def resolve_inner(self, name: str, node: SyntaxNode, doclet: Doclet) -> str:
        """
        Qualify a symbol local to a closure with its enclosing function path.

        Returns:
            '<enclosing path>~name', or name unchanged without a container
        """
        enclosing = node.enclosing_function()
        enclosing_doc = self.lookup(enclosing)

        if enclosing_doc is not None:
            container = enclosing_doc.tag_value('path')
        elif enclosing is not None and not getattr(enclosing, 'name', ''):
            container = ANONYMOUS
        else:
            container = ''

        if not container:
            logger.debug("no enclosing container for inner symbol %r", name)
            return name
        return container + INNER_SEPARATOR + name
