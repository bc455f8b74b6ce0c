"""
Namespace Table for Gnosis Mage

Keeps every namespace known to a grimoire together with its directly-defined
function entries and its ordered parent chain. Name lookups fall back through
the parent chain depth-first, in declaration order, and unsuccessful lookups
are remembered until the table is next modified.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

DEFAULT_NAMESPACE = "__main__"


@dataclass
class Namespace:
    """A named scope owning function entries and a parent chain."""

    name: str
    functions: Dict[str, Any] = field(default_factory=dict)
    parents: List[str] = field(default_factory=list)

    def defines(self, name: str) -> bool:
        """Check whether ``name`` is defined directly in this namespace."""
        return name in self.functions


class NamespaceTable:
    """Mapping of namespace identifiers to ``Namespace`` records."""

    def __init__(self, default_namespace: str = DEFAULT_NAMESPACE):
        self.default_namespace = default_namespace
        self._namespaces: Dict[str, Namespace] = {}
        self._misses: Set[Tuple[str, str]] = set()

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._namespaces

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._namespaces))

    def __len__(self) -> int:
        return len(self._namespaces)

    def known(self, namespace: str) -> bool:
        """Check whether a namespace has been seen by this table."""
        return namespace in self._namespaces

    def get(self, namespace: str) -> Namespace:
        """Get a namespace, creating it on first use."""
        record = self._namespaces.get(namespace)
        if record is None:
            record = Namespace(namespace)
            self._namespaces[namespace] = record
        return record

    def find(self, namespace: str) -> Optional[Namespace]:
        """Get a namespace without creating it."""
        return self._namespaces.get(namespace)

    def is_default(self, namespace: str) -> bool:
        return namespace == self.default_namespace

    def define(self, namespace: str, name: str, entry: Any):
        """Store an entry directly on a namespace."""
        self.get(namespace).functions[name] = entry
        self.invalidate()

    def undefine(self, namespace: str, name: str) -> bool:
        """Remove a directly-defined entry. Returns False if there was none."""
        record = self._namespaces.get(namespace)
        if record is None or name not in record.functions:
            return False
        del record.functions[name]
        self.invalidate()
        return True

    def set_parents(self, namespace: str, parents: List[str]):
        """Replace the parent chain of a namespace."""
        self.get(namespace).parents = list(parents)
        self.invalidate()

    def parents_of(self, namespace: str) -> List[str]:
        record = self._namespaces.get(namespace)
        return list(record.parents) if record else []

    def direct_names(self, namespace: str) -> List[str]:
        """Names defined directly on a namespace (inherited names excluded)."""
        record = self._namespaces.get(namespace)
        return list(record.functions) if record else []

    def invalidate(self):
        """Forget memoized negative lookups."""
        self._misses.clear()

    def lookup(self, namespace: str, name: str) -> Optional[Tuple[Namespace, Any]]:
        """
        Resolve ``name`` starting at ``namespace``.

        Returns ``(owner, entry)`` for the first namespace in the hierarchy
        that defines the name, or None.
        """
        key = (namespace, name)
        if key in self._misses:
            return None

        hit = self._search(namespace, name, set())
        if hit is None:
            self._misses.add(key)
        return hit

    def _search(self, namespace: str, name: str, seen: Set[str]):
        if namespace in seen:
            return None
        seen.add(namespace)

        record = self._namespaces.get(namespace)
        if record is None:
            return None
        if name in record.functions:
            return record, record.functions[name]

        for parent in record.parents:
            hit = self._search(parent, name, seen)
            if hit is not None:
                return hit
        return None

    def ancestry(self, namespace: str) -> List[str]:
        """Namespaces in lookup order, starting with ``namespace`` itself."""
        order: List[str] = []
        self._walk(namespace, order)
        return order

    def _walk(self, namespace: str, order: List[str]):
        if namespace in order:
            return
        order.append(namespace)
        for parent in self.parents_of(namespace):
            self._walk(parent, order)
