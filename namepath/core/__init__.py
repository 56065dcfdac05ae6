"""
Core layer — Namepath resolution

- names: Stateless namepath algebra (shorten, join)
- doclet: Tag container for one documented symbol
- registry: Node -> doclet associations
- dictionary: Symbol kind classification
- resolver: NameResolver orchestrating the above
"""

from .doclet import Doclet, Tag
from .dictionary import TagDictionary, TagDefinition, DEFAULT_DOCSPACE_KINDS
from .names import shorten, join, ANONYMOUS, ANONYMOUS_OBJECT
from .registry import NodeDocletRegistry
from .resolver import NameResolver, ResolverContext, SyntaxNode, OBJECT_LITERAL_TYPES

__all__ = [
    'Doclet', 'Tag',
    'TagDictionary', 'TagDefinition', 'DEFAULT_DOCSPACE_KINDS',
    'shorten', 'join', 'ANONYMOUS', 'ANONYMOUS_OBJECT',
    'NodeDocletRegistry',
    'NameResolver', 'ResolverContext', 'SyntaxNode', 'OBJECT_LITERAL_TYPES',
]
