"""
Lifecycle operations: create, withdraw, duplicate and export functions.

None of these take snapshots. A created function has nothing to be restored
to, and withdrawing a function leaves any existing snapshot in place, so a
``restore`` after ``withdraw`` brings back the pre-interception version.
"""

from typing import Callable, Iterable, List, Union

from .errors import warn
from .interceptor import as_implementation, as_names
from .registry import Forward, FunctionRegistry


class Lifecycle:
    """Add, remove, copy and republish registry entries."""

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def _debug(self, event: str, message: str, **fields):
        if self.registry.diagnostics is not None:
            self.registry.diagnostics.debug(event, message, **fields)

    def create(self, namespace: str, name: str, impl: Callable, receiver: bool = False) -> bool:
        """Define a new function. Refuses to replace an existing one."""
        if self.registry.resolves(namespace, name):
            warn("You can't conjur a subroutine that already exists. Did you mean 'override'?")
            return False

        self.registry.set(namespace, name, as_implementation(impl), receiver)
        self._debug(
            "create",
            f"Conjured new subroutine '{name}' in '{namespace}'",
            namespace=namespace,
            function=name,
        )
        return True

    def withdraw(self, namespace: str, name: str) -> bool:
        """Delete a function defined directly on ``namespace``."""
        if not self.registry.remove(namespace, name):
            warn(f"Cannot withdraw '{name}': it is not defined in '{namespace}'")
            return False

        self._debug(
            "withdraw",
            f"Withdrew subroutine '{name}' from '{namespace}'",
            namespace=namespace,
            function=name,
        )
        return True

    def duplicate(self, name: str, source: str, target: str) -> bool:
        """Copy the current implementation of ``source.name`` onto ``target``."""
        if not self.registry.resolves(source, name):
            warn(f"Failed to clone '{name}' from '{source}': no such method")
            return False

        entry = self.registry.entry(source, name)
        self.registry.set(target, name, entry.impl, entry.receiver)
        self._debug(
            "duplicate",
            f"Cloned sub '{name}' from '{source}' into '{target}'",
            namespace=target,
            function=name,
        )
        return True

    def exports(self, namespace: str, name: str, targets: Union[str, Iterable[str]]) -> List[str]:
        """
        Publish ``namespace.name`` into other namespaces.

        Each target gets a forwarder that looks the origin up at call time,
        so later changes to the origin are seen through the forwarder.
        Targets the grimoire has never seen, and the origin namespace itself,
        are skipped with a warning. Nothing is exported if the origin does not
        resolve ``name``.

        Returns:
            The targets that received the function.
        """
        hit = self.registry.table.lookup(namespace, name)
        if hit is None:
            warn(f"Could not export '{name}' from '{namespace}': no such method")
            return []
        receiver = hit[1].receiver

        exported = []
        for target in as_names(targets):
            if target == namespace:
                warn(f"Could not export '{name}' into its own namespace '{namespace}'")
                continue
            if not self.registry.table.known(target):
                warn(f"Could not export '{name}' into '{target}': unknown namespace")
                continue

            self.registry.set(target, name, Forward(self.registry, namespace, name), receiver)
            exported.append(target)
            self._debug(
                "export",
                f"Exported '{namespace}.{name}' into '{target}'",
                namespace=target,
                function=name,
            )

        return exported
