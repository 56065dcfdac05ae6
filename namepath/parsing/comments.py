"""
JSDoc comment parsing — Raw tag extraction from /** ... */ blocks

Produces the raw tags the resolver consumes. Kind tags (@constructor,
@method, @event, ...) are folded into a single 'isa' tag; a kind tag
with a value (e.g. '@event changed') also names the symbol.

Usage:
    tags = parse_comment('/** @constructor Foo */')
    # [Tag('isa', 'constructor'), Tag('name', 'Foo')]
"""

import re
from typing import List, Tuple

from ..core.doclet import Doclet, Tag


# Tag title -> isa value
KIND_TAGS = {
    'constructor': 'constructor',
    'class': 'constructor',
    'function': 'method',
    'method': 'method',
    'namespace': 'namespace',
    'property': 'property',
    'member': 'property',
    'event': 'event',
    'module': 'module',
    'file': 'file',
    'fileoverview': 'file',
    'overview': 'file',
}

# Tag title -> access value
ACCESS_TAGS = {
    'inner': 'inner',
    'private': 'private',
    'public': 'public',
    'protected': 'protected',
}

_TAG_START = re.compile(r'^@([A-Za-z][\w-]*)\s*(.*)$')
_TYPE_EXPRESSION = re.compile(r'^\{[^}]*\}\s*')


def is_doc_comment(text: str) -> bool:
    """JSDoc comments start with exactly two asterisks."""
    return text.startswith('/**') and not text.startswith('/***') and text != '/**/'


def _comment_lines(text: str) -> List[str]:
    """Strip comment delimiters and leading asterisks."""
    body = text.strip()
    if body.startswith('/**'):
        body = body[3:]
    if body.endswith('*/'):
        body = body[:-2]

    lines = []
    for line in body.split('\n'):
        line = line.strip()
        if line.startswith('*'):
            line = line[1:].strip()
        lines.append(line)
    return lines


def _split_tags(lines: List[str]) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Group comment lines into a description and (title, text) pairs.

    Continuation lines are appended to the preceding tag.
    """
    description: List[str] = []
    raw_tags: List[Tuple[str, List[str]]] = []

    for line in lines:
        # Tags may share a line: '@inner @constructor'
        for chunk in re.split(r'\s+(?=@[A-Za-z])', line) if line.startswith('@') else [line]:
            match = _TAG_START.match(chunk)
            if match:
                raw_tags.append((match.group(1), [match.group(2)]))
            elif raw_tags:
                raw_tags[-1][1].append(chunk)
            else:
                description.append(chunk)

    tags = [(title, ' '.join(part for part in parts if part).strip()) for title, parts in raw_tags]
    return ' '.join(part for part in description if part).strip(), tags


def parse_comment(text: str) -> List[Tag]:
    """
    Parse a JSDoc comment into raw doclet tags.

    Unknown tags are kept under their own title so nothing is lost.

    Args:
        text: Full comment text including delimiters

    Returns:
        Tags in source order ('desc' first when there is a description)
    """
    description, raw_tags = _split_tags(_comment_lines(text))

    tags: List[Tag] = []
    if description:
        tags.append(Tag('desc', description))

    named = any(title == 'name' for title, _ in raw_tags)

    for title, value in raw_tags:
        if title in KIND_TAGS:
            tags.append(Tag('isa', KIND_TAGS[title]))
            symbol_name = _name_from_value(value) if KIND_TAGS[title] != 'file' else ''
            if symbol_name and not named:
                tags.append(Tag('name', symbol_name))
                named = True
        elif title in ACCESS_TAGS:
            tags.append(Tag('access', ACCESS_TAGS[title]))
        else:
            tags.append(Tag(title, value))

    return tags


def doclet_from_comment(text: str, line: int = 0) -> Doclet:
    """Build a doclet holding the raw tags of one comment."""
    return Doclet(tags=parse_comment(text), line=line)


def _name_from_value(value: str) -> str:
    """First word of a kind tag value, skipping a leading {type}."""
    words = _TYPE_EXPRESSION.sub('', value).split()
    return words[0] if words else ''
