"""
Doclet — Structured metadata extracted from one documentation comment

A doclet is an ordered list of tags (title/value pairs). The resolver
reads raw tags (name, memberof, isa) and writes back the derived ones
(name, memberof, path, access).

Usage:
    doclet = Doclet.from_tags(name='Foo.prototype.bar', isa='method')
    doclet.tag_value('name')        # 'Foo.prototype.bar'
    doclet.set_tag('name', 'bar')   # replaces
    doclet.add_tag('access', 'inner')
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Tag:
    """A single documentation tag."""
    title: str      # Tag name, case-sensitive (e.g., "memberof")
    value: str = ""

    def to_dict(self) -> dict:
        return {'title': self.title, 'value': self.value}


@dataclass
class Doclet:
    """
    Tag container for one documented symbol.

    Attributes:
        tags: Tags in the order they were written
        node: Syntax node the comment decorates (None for virtual doclets)
        line: 1-indexed line of the comment (0 when unknown)
    """
    tags: List[Tag] = field(default_factory=list)
    node: Optional[Any] = None
    line: int = 0

    @classmethod
    def from_tags(cls, **values: str) -> 'Doclet':
        """Build a doclet from keyword tag values, skipping empty ones."""
        return cls(tags=[Tag(title, value) for title, value in values.items() if value])

    def tag_value(self, title: str) -> str:
        """Value of the first tag with this title, or empty string."""
        for tag in self.tags:
            if tag.title == title:
                return tag.value
        return ""

    def has_tag(self, title: str) -> bool:
        return any(tag.title == title for tag in self.tags)

    def set_tag(self, title: str, value: str) -> None:
        """Replace every tag with this title by a single tag."""
        kept = [tag for tag in self.tags if tag.title != title]
        kept.append(Tag(title, value))
        self.tags = kept

    def add_tag(self, title: str, value: str = "") -> None:
        """Append a tag without replacing existing ones."""
        self.tags.append(Tag(title, value))

    def is_inner(self) -> bool:
        """True when the symbol is local to a closure."""
        if self.has_tag('inner'):
            return True
        return any(tag.title == 'access' and tag.value == 'inner' for tag in self.tags)

    # -------------------------------------------------------------------------
    # Derived fields
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.tag_value('name')

    @property
    def memberof(self) -> str:
        return self.tag_value('memberof')

    @property
    def path(self) -> str:
        return self.tag_value('path')

    @property
    def kind(self) -> str:
        return self.tag_value('isa')

    @property
    def access(self) -> str:
        return self.tag_value('access')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'path': self.path,
            'name': self.name,
            'memberof': self.memberof,
            'access': self.access,
            'line': self.line,
        }
