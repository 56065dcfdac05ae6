"""
Tag Dictionary — Classifies symbol kinds

Answers one question for the resolver: does a symbol kind introduce its
own doc-namespace? Kinds that do (event, module) get a 'kind:' scheme in
their path, e.g. 'Widget.event:changed'.
"""

from dataclasses import dataclass
from typing import Dict, Iterable


DEFAULT_DOCSPACE_KINDS = ('event', 'module')


@dataclass(frozen=True)
class TagDefinition:
    """How a symbol kind behaves during name resolution."""
    title: str
    sets_doclet_docspace: bool = False


class TagDictionary:
    """
    Lookup table of symbol kind definitions.

    Unknown kinds resolve to a plain definition rather than failing.
    """

    def __init__(self, docspace_kinds: Iterable[str] = DEFAULT_DOCSPACE_KINDS):
        self._definitions: Dict[str, TagDefinition] = {}
        for kind in docspace_kinds:
            self.define(kind, sets_doclet_docspace=True)

    def define(self, title: str, sets_doclet_docspace: bool = False) -> TagDefinition:
        """Add or replace a kind definition."""
        definition = TagDefinition(title, sets_doclet_docspace)
        self._definitions[title] = definition
        return definition

    def lookup(self, title: str) -> TagDefinition:
        return self._definitions.get(title) or TagDefinition(title or "")

    def docspace_kinds(self) -> list:
        return sorted(
            title for title, definition in self._definitions.items()
            if definition.sets_doclet_docspace
        )

    def __contains__(self, title: str) -> bool:
        return title in self._definitions
