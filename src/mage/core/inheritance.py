"""
Namespace inheritance for Gnosis Mage.

``augment`` gives a namespace an ordered list of parents that lookups fall
back to. Parents the grimoire has not seen yet are loaded on demand: by
default a parent named like an importable Python module is filled with that
module's top-level functions.
"""

import importlib
import inspect
from types import ModuleType
from typing import Callable, List, Optional, Union

from .errors import warn
from .registry import Base, FunctionRegistry


class ModuleLoader:
    """Register the functions of a Python module as a namespace."""

    def __call__(self, registry: FunctionRegistry, namespace: str) -> List[str]:
        module = importlib.import_module(namespace)
        return self.load(registry, module, namespace)

    def load(
        self, registry: FunctionRegistry, module: ModuleType, namespace: Optional[str] = None
    ) -> List[str]:
        """
        Register every function defined in ``module`` (imports excluded).

        Returns:
            The registered function names.
        """
        namespace = namespace or module.__name__
        registry.table.get(namespace)

        names = []
        for name, obj in inspect.getmembers(module, inspect.isfunction):
            if obj.__module__ != module.__name__:
                continue
            registry.set(namespace, name, Base(obj), receiver=False)
            names.append(name)
        return names


class Inheritance:
    """Parent chains and on-demand loading of parent namespaces."""

    def __init__(
        self,
        registry: FunctionRegistry,
        loader: Optional[Callable[[FunctionRegistry, str], object]] = None,
        autoload: bool = True,
    ):
        self.registry = registry
        self.loader = loader or ModuleLoader()
        self.autoload = autoload

    def _debug(self, event: str, message: str, **fields):
        if self.registry.diagnostics is not None:
            self.registry.diagnostics.debug(event, message, **fields)

    def augment(self, namespace: str, *parents: str) -> bool:
        """Set the parent chain of ``namespace``."""
        if self.registry.table.is_default(namespace):
            warn(f"You can't augment the default namespace '{namespace}'")
            return False

        for parent in parents:
            if self.autoload and not self.registry.table.known(parent):
                self.load(parent)

        self.registry.table.set_parents(namespace, list(parents))
        self._debug(
            "augment",
            f"'{namespace}' now extends {', '.join(parents) or 'nothing'}",
            namespace=namespace,
            parents=list(parents),
        )
        return True

    def load(self, namespace: str) -> bool:
        """Load a namespace with the configured loader. Failures only warn."""
        try:
            self.loader(self.registry, namespace)
        except Exception as e:
            warn(f"Could not load namespace '{namespace}': {e}")
            return False

        self._debug("load", f"Loaded namespace '{namespace}'", namespace=namespace)
        return True

    def load_module(self, module: Union[str, ModuleType], namespace: Optional[str] = None) -> List[str]:
        """Register a module's functions, importing it first if given by name."""
        if isinstance(module, str):
            module = importlib.import_module(module)
        names = ModuleLoader().load(self.registry, module, namespace)
        self._debug(
            "load",
            f"Loaded {len(names)} functions from '{module.__name__}'",
            namespace=namespace or module.__name__,
        )
        return names
