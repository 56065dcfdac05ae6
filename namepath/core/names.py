"""
Namepath Algebra — Stateless string operations on namepaths

A namepath is a sequence of segments joined by one of three separators:
- '.'  static member (Foo.bar)
- '#'  instance member (Foo#bar, after a prototype indirection)
- '~'  inner symbol (Foo~bar, local to a closure)

Quoted segments ("a.b") are atomic: separators inside them are never
split points.

Usage:
    from namepath.core.names import shorten, join

    shorten('a.b.c')        # ('a.b', 'c')
    shorten('Foo#bar')      # ('Foo#', 'bar')
    join('Foo#', 'bar')     # 'Foo#bar'
"""

import re
from typing import Tuple


# Separators, in no particular precedence. The rightmost one wins.
SEPARATORS = '.#~'

# Separators that stay attached to the container as a scope marker
SCOPE_MARKERS = '#~'

INSTANCE_SEPARATOR = '#'
INNER_SEPARATOR = '~'
STATIC_SEPARATOR = '.'

# Placeholders for containers that have no stable name
ANONYMOUS = '[[anonymous]]'
ANONYMOUS_OBJECT = '[[anonymousObject]]'

_QUOTED = re.compile(r'(".+?")')
_PROTOTYPE = re.compile(r'\.prototype\.?')
_SCHEME = re.compile(r'^[a-z_$-]+:(\S+)', re.IGNORECASE)


# =============================================================================
# Quoted literal masking
# =============================================================================

def _mask_quoted(path: str) -> str:
    """
    Blank out quoted literals so their contents hide from separator search.

    The mask has the same length as path, so indexes found in it can
    slice the original string directly.
    """
    return _QUOTED.sub(lambda match: '_' * len(match.group(1)), path)


def _last_separator(path: str) -> int:
    """Index of the rightmost unquoted separator in path, or -1."""
    masked = _mask_quoted(path)
    return max(masked.rfind(sep) for sep in SEPARATORS)


# =============================================================================
# Public operations
# =============================================================================

def shorten(path: str) -> Tuple[str, str]:
    """
    Split a namepath into (container prefix, short name).

    The split happens at the rightmost unquoted separator. A '#' or '~'
    separator is kept as the last character of the prefix; a '.' is dropped.

    Examples:
        shorten('a.b.c')      -> ('a.b', 'c')
        shorten('a#b')        -> ('a#', 'b')
        shorten('a~b')        -> ('a~', 'b')
        shorten('"a.b".c')    -> ('"a.b"', 'c')
        shorten('foo')        -> ('', 'foo')

    Args:
        path: Namepath to split (may be empty)

    Returns:
        Tuple of (prefix, short name)
    """
    if not path:
        return '', ''

    split_at = _last_separator(path)
    if split_at == -1:
        return '', path

    separator = path[split_at]
    prefix = path[:split_at]
    shortname = path[split_at + 1:]

    if separator in SCOPE_MARKERS:
        prefix += separator

    return prefix, shortname


def join(container: str, name: str) -> str:
    """
    Compose a container reference with a trailing name.

    Uses '.' unless the container already ends in a scope marker
    ('#' or '~'), which then acts as the join itself.
    """
    if not container:
        return name
    return container + joiner_for(container) + name


def joiner_for(container: str) -> str:
    """Separator to insert after container (empty for scope markers)."""
    if container and container[-1] in SCOPE_MARKERS:
        return ''
    return STATIC_SEPARATOR


def normalize_prototype(name: str) -> str:
    """Rewrite '.prototype.' and a trailing '.prototype' as '#'."""
    return _PROTOTYPE.sub(INSTANCE_SEPARATOR, name)


def first_token(name: str) -> str:
    """First whitespace-delimited token of a raw name tag."""
    parts = name.split()
    return parts[0] if parts else ''


def strip_scheme(name: str) -> Tuple[bool, str]:
    """
    Strip a leading doc-namespace scheme such as 'event:' from name.

    Returns:
        (True, remainder) when a scheme prefix was present,
        (False, name) otherwise
    """
    match = _SCHEME.match(name)
    if match:
        return True, match.group(1)
    return False, name


def strip_last_segment(path: str) -> str:
    """
    Remove the final segment of path, keeping its separator.

    Quoted literals are atomic. A path with no separator has no container
    left, so the result is empty. A path that already ends in a separator
    is returned unchanged.

    Examples:
        strip_last_segment('Klass#method')   -> 'Klass#'
        strip_last_segment('ns.Klass.run')   -> 'ns.Klass.'
        strip_last_segment('Klass')          -> ''
    """
    split_at = _last_separator(path)
    if split_at == -1:
        return ''
    return path[:split_at + 1]

