"""
Node–Doclet Registry — Associates syntax nodes with their doclets

Populated by the driver as each doclet is finalized, consulted by the
resolver to find already-resolved enclosing functions and object literals.

Nodes are keyed by object identity, so any node type works, hashable or
not. Registering a node a second time shadows the earlier doclet: the most
recent registration wins.
"""

from typing import Any, Dict, Optional, Tuple

from .doclet import Doclet


class NodeDocletRegistry:
    """Process-scoped map from syntax node to the doclet produced for it."""

    def __init__(self):
        # id(node) -> (node, doclet); holding the node keeps its id unique
        self._refs: Dict[int, Tuple[Any, Doclet]] = {}

    def register(self, node: Any, doclet: Doclet) -> None:
        """Associate node with doclet. Never fails."""
        if node is None:
            return
        key = id(node)
        # Re-insert so iteration order follows the latest registration
        self._refs.pop(key, None)
        self._refs[key] = (node, doclet)

    def lookup(self, node: Any) -> Optional[Doclet]:
        """Most recently registered doclet for node, or None."""
        if node is None:
            return None
        entry = self._refs.get(id(node))
        return entry[1] if entry is not None else None

    def clear(self) -> None:
        self._refs.clear()

    def __len__(self) -> int:
        return len(self._refs)

    def __contains__(self, node: Any) -> bool:
        return node is not None and id(node) in self._refs
