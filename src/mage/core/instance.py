"""
Objects built by a namespace constructor.

An ``Instance`` has no methods of its own: attribute access looks the name up
in its namespace (and that namespace's parents) and returns a callable that
goes through the registry at call time. Functions declared with
``receiver=True`` get the instance as their first argument.
"""

import functools
from typing import Any, Dict, Optional


class Instance:
    """An object whose methods live in a grimoire namespace."""

    def __init__(self, registry, namespace: str, attributes: Optional[Dict[str, Any]] = None):
        self._mage_registry = registry
        self._mage_namespace = namespace
        self._mage_attributes = dict(attributes or {})

    @property
    def namespace(self) -> str:
        return self._mage_namespace

    @property
    def attributes(self) -> Dict[str, Any]:
        """Per-instance storage used by ``has`` declarations."""
        return self._mage_attributes

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        hit = self._mage_registry.table.lookup(self._mage_namespace, name)
        if hit is None:
            raise AttributeError(
                f'Can\'t locate object method "{name}" via package "{self._mage_namespace}"'
            )

        call = functools.partial(self._mage_registry.call, self._mage_namespace, name)
        if hit[1].receiver:
            return functools.partial(call, self)
        return call

    def can(self, name: str) -> bool:
        """Check whether a method resolves for this instance."""
        return self._mage_registry.resolves(self._mage_namespace, name)

    def isa(self, namespace: str) -> bool:
        """Check whether ``namespace`` is in this instance's hierarchy."""
        return namespace in self._mage_registry.table.ancestry(self._mage_namespace)

    def __repr__(self):
        return f"<{self._mage_namespace} instance {self._mage_attributes!r}>"
