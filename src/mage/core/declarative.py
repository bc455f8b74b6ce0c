"""
Declarative helpers built on the interception and lifecycle operations.

``accessor`` and ``has`` declare attribute-like functions, ``chainable``
makes a method hand back its receiver, and ``sub_alert``/``tag`` instrument
functions so every call writes an alert line.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from .errors import HookTargetError, ReadOnlyAttributeError
from .instance import Instance
from .interceptor import Interceptor, as_names
from .lifecycle import Lifecycle

_UNSET = object()

ACCESS_MODES = ("ro", "rw")


def _split_receiver(args: tuple):
    if args and isinstance(args[0], Instance):
        return args[0], args[1:]
    return None, args


class Declarations:
    """Accessor, attribute and instrumentation helpers."""

    def __init__(
        self,
        interceptor: Interceptor,
        lifecycle: Lifecycle,
        installed: Optional[Dict[str, Set[str]]] = None,
    ):
        self.interceptor = interceptor
        self.lifecycle = lifecycle
        self.registry = interceptor.registry
        # names installed into each namespace by the grimoire itself
        self.installed = installed if installed is not None else {}

    def accessor(self, namespace: str, name: str, default: Any = None) -> bool:
        """
        Declare a read/write accessor holding one value for the namespace.

        Calling it with no value returns the held value; calling it with one
        value replaces the held value for every later caller. An instance
        passed as receiver is ignored, so all instances share the value.
        """

        value = default

        def access(*args):
            nonlocal value
            _, values = _split_receiver(args)
            if len(values) > 1:
                raise TypeError(f"{name}() takes at most 1 value ({len(values)} given)")
            if values:
                value = values[0]
            return value

        access.__name__ = access.__qualname__ = name
        return self.lifecycle.create(namespace, name, access, receiver=True)

    def has(self, namespace: str, name: str, is_: str = "rw", default: Any = None) -> bool:
        """
        Declare an attribute.

        Args:
            namespace: Namespace receiving the attribute function
            name: Attribute name
            is_: ``"ro"`` to reject writes, ``"rw"`` to allow them
            default: Value read while nothing has been stored

        Values are stored on the instance when one is passed as receiver,
        otherwise on the namespace.
        """
        if is_ not in ACCESS_MODES:
            raise ValueError(f"is_ must be one of {ACCESS_MODES}, got {is_!r}")

        shared: Dict[str, Any] = {}

        def attribute(*args):
            receiver, values = _split_receiver(args)
            slots = receiver.attributes if receiver is not None else shared

            if not values:
                stored = slots.get(name, _UNSET)
                return default if stored is _UNSET else stored
            if len(values) > 1:
                raise TypeError(f"{name}() takes at most 1 value ({len(values)} given)")
            if is_ == "ro":
                raise ReadOnlyAttributeError(namespace, name)

            slots[name] = values[0]
            return values[0]

        attribute.__name__ = attribute.__qualname__ = name
        return self.lifecycle.create(namespace, name, attribute, receiver=True)

    def chainable(self, namespace: str, name: str) -> List[str]:
        """Make a method return its receiver so calls can be chained."""

        def chain(receiver=None, *args, **kwargs):
            return receiver

        return self.interceptor.after(namespace, name, chain)

    def sub_alert(self, namespace: str) -> List[str]:
        """
        Alert on every call to the functions defined directly in a namespace.

        All-uppercase names are treated as constants and skipped, as are the
        operations the grimoire installed into the namespace.

        Returns:
            The instrumented function names.
        """
        skip = self.installed.get(namespace, set())
        names = [
            name
            for name in self.registry.direct_names(namespace)
            if name != name.upper() and name not in skip
        ]

        for name in names:
            self.interceptor.before(namespace, name, self._alert_hook(namespace, name, f"{name} called"))
        return names

    def tag(self, namespace: str, names: Union[str, Iterable[str]], message: str) -> List[str]:
        """Alert with ``message`` whenever one of ``names`` is called."""
        names = as_names(names)
        for name in names:
            if not self.registry.resolves(namespace, name):
                raise HookTargetError(namespace, name)

        for name in names:
            text = f"{name}: {message}" if len(names) > 1 else message
            self.interceptor.before(namespace, name, self._alert_hook(namespace, name, text))
        return names

    def _alert_hook(self, namespace: str, name: str, message: str) -> Callable:
        diagnostics = self.registry.diagnostics

        def alert(*args, **kwargs):
            if diagnostics is not None:
                diagnostics.alert(namespace, message, function=name)

        alert.__name__ = alert.__qualname__ = f"alert[{namespace}.{name}]"
        return alert
