"""
Interception Engine for Gnosis Mage

Replaces (``override``), wraps (``before``, ``after``, ``around``) and
un-replaces (``restore``) registered functions. The first interception of a
function snapshots its implementation; ``restore`` always goes back to that
snapshot, however many layers were added since.

Overriding a missing function only warns. Hooking a missing function is an
error, because a hook without a target would silently never run.
"""

from typing import Callable, Iterable, List, Type, Union

from .errors import HookTargetError, warn
from .registry import After, Around, Base, Before, FunctionRegistry, Implementation

Names = Union[str, Iterable[str]]


def as_names(names: Names) -> List[str]:
    """Normalize a single name or an iterable of names to a list."""
    if isinstance(names, str):
        return [names]
    return list(names)


def as_implementation(impl: Union[Callable, Implementation]) -> Implementation:
    if isinstance(impl, Implementation):
        return impl
    if not callable(impl):
        raise TypeError(f"Expected a callable, got {type(impl).__name__}")
    return Base(impl)


class Interceptor:
    """Override, restore and hook operations over a registry."""

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def _debug(self, event: str, message: str, **fields):
        if self.registry.diagnostics is not None:
            self.registry.diagnostics.debug(event, message, **fields)

    def override(self, namespace: str, name: str, impl: Callable) -> bool:
        """Replace an existing function. Returns False if there is none."""
        if not self.registry.resolves(namespace, name):
            warn("Cannot override a subroutine that doesn't exist")
            return False

        self._debug(
            "override",
            f"Override called for sub '{name}' in package '{namespace}'",
            namespace=namespace,
            function=name,
        )
        self.registry.capture_once(namespace, name)
        self.registry.set(namespace, name, as_implementation(impl))
        return True

    def restore(self, namespace: str, name: str) -> bool:
        """Put back the implementation captured on first interception."""
        qualified = f"{namespace}.{name}"
        snapshot = self.registry.snapshot_of(namespace, name)
        if snapshot is None:
            self._debug(
                "restore_failed",
                f"Failed to restore '{qualified}' because it's not in the Subs list. "
                "Was it overriden, or modified by a hook?",
                namespace=namespace,
                function=name,
            )
            warn(f"I have no recollection of '{qualified}'")
            return False

        self.registry.set(namespace, name, snapshot.impl, snapshot.receiver)
        self._debug("restore", f"Restores sub {qualified}", namespace=namespace, function=name)
        return True

    def before(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        """Run ``hook`` ahead of each named function; results are unchanged."""
        return self._compose(Before, "before", namespace, names, hook)

    def after(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        """Run ``hook`` after each named function; its result is returned."""
        return self._compose(After, "after", namespace, names, hook)

    def around(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        """Call ``hook(original, *args)`` in place of each named function."""
        return self._compose(Around, "around", namespace, names, hook)

    def _compose(
        self,
        node_type: Type[Implementation],
        kind: str,
        namespace: str,
        names: Names,
        hook: Callable,
    ) -> List[str]:
        if not callable(hook):
            raise TypeError(f"{kind} hook must be callable, got {type(hook).__name__}")

        names = as_names(names)

        # All targets must exist before anything is wrapped
        for name in names:
            if not self.registry.resolves(namespace, name):
                raise HookTargetError(namespace, name)

        for name in names:
            old = self.registry.get(namespace, name)
            self.registry.capture_once(namespace, name)
            self.registry.set(namespace, name, node_type(hook, old))
            self._debug(
                kind,
                f"Added {kind} hook modifier to '{name}'",
                namespace=namespace,
                function=name,
            )

        return names
