"""Read-only helpers for running and querying registered functions."""

from typing import Any, Callable, Iterable, List, Optional, Union

from .errors import FunctionNotFound, warn
from .interceptor import as_names
from .registry import FunctionRegistry


class Dispatcher:
    """``sub_run``, ``have`` and ``sublist`` over a registry."""

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def sub_run(self, namespace: str, names: Union[str, Iterable[str]], /, *args, **kwargs):
        """Call each name in order with the same arguments, skipping missing ones."""
        for name in as_names(names):
            try:
                impl = self.registry.get(namespace, name)
            except FunctionNotFound as e:
                warn(f"Could not run '{name}': {e}")
                continue
            impl(*args, **kwargs)

    def have(
        self,
        namespace: str,
        name: str,
        then: Callable,
        or_: Optional[Union[Callable, str]] = None,
    ) -> Any:
        """
        Call ``then(namespace, name)`` if ``name`` resolves on ``namespace``.

        Otherwise ``or_`` is called the same way if it is callable, or used as
        a warning message if it is not; in the latter case False is returned.
        """
        if self.registry.resolves(namespace, name):
            return then(namespace, name)

        if callable(or_):
            return or_(namespace, name)
        if or_ is not None:
            warn(str(or_))
        return False

    def sublist(self, namespace: str) -> List[str]:
        """Names of the functions defined directly on a namespace, in no set order."""
        return self.registry.direct_names(namespace)
