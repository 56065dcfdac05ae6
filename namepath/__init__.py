"""
namepath — JSDoc namepath resolution

Turns partially annotated doc comments into canonical namepaths:
prototype members (Foo#bar), inner symbols (mod.init~helper),
`this` members and module re-exports.

Usage:
    namepath paths src/
    namepath paths widgets.js --format json
    namepath config
"""

__version__ = "0.1.0"

# Core layer
from .core.doclet import Doclet, Tag
from .core.dictionary import TagDictionary, TagDefinition
from .core.names import shorten, join
from .core.registry import NodeDocletRegistry
from .core.resolver import NameResolver, ResolverContext

# Parsing layer
from .parsing.comments import parse_comment
from .parsing.javascript import DocletExtractor

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'Doclet', 'Tag',
    'TagDictionary', 'TagDefinition',
    'shorten', 'join',
    'NodeDocletRegistry',
    'NameResolver', 'ResolverContext',
    # Parsing
    'parse_comment', 'DocletExtractor',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
