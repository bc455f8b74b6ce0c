"""
Function Registry for Gnosis Mage

The registry maps ``(namespace, name)`` to the implementation currently
invoked for that function, and keeps a parallel snapshot store holding the
implementation captured the first time each function was intercepted.

Implementations are immutable chain nodes. A hook never mutates the node it
wraps; it produces a new node pointing at the previous one, so a snapshot is
simply a reference to an older node.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import FunctionNotFound
from .namespace import NamespaceTable


def _label(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


class Implementation:
    """Base class of implementation chain nodes. Calling a node evaluates it."""

    def __call__(self, /, *args, **kwargs):
        return evaluate(self, args, kwargs)

    @property
    def next(self) -> Optional["Implementation"]:
        return None


@dataclass(frozen=True, eq=False)
class Base(Implementation):
    """A plain callable."""

    fn: Callable

    def __repr__(self):
        return f"Base({_label(self.fn)})"


@dataclass(frozen=True, eq=False)
class Before(Implementation):
    """Run ``hook`` then the wrapped implementation; keep the wrapped result."""

    hook: Callable
    wrapped: Implementation

    @property
    def next(self) -> Implementation:
        return self.wrapped

    def __repr__(self):
        return f"Before({_label(self.hook)})"


@dataclass(frozen=True, eq=False)
class After(Implementation):
    """Run the wrapped implementation then ``hook``; keep the hook's result."""

    hook: Callable
    wrapped: Implementation

    @property
    def next(self) -> Implementation:
        return self.wrapped

    def __repr__(self):
        return f"After({_label(self.hook)})"


@dataclass(frozen=True, eq=False)
class Around(Implementation):
    """Call ``hook(wrapped, *args)``; the hook decides whether to proceed."""

    hook: Callable
    wrapped: Implementation

    @property
    def next(self) -> Implementation:
        return self.wrapped

    def __repr__(self):
        return f"Around({_label(self.hook)})"


@dataclass(frozen=True, eq=False)
class Forward(Implementation):
    """Late-bound call to a function of another namespace."""

    registry: "FunctionRegistry" = field(repr=False)
    namespace: str
    name: str

    def __repr__(self):
        return f"Forward({self.namespace}.{self.name})"


def evaluate(impl: Implementation, args: tuple, kwargs: dict) -> Any:
    """Run an implementation chain with the given arguments."""
    if isinstance(impl, Base):
        return impl.fn(*args, **kwargs)

    if isinstance(impl, Before):
        impl.hook(*args, **kwargs)
        return evaluate(impl.wrapped, args, kwargs)

    if isinstance(impl, After):
        evaluate(impl.wrapped, args, kwargs)
        return impl.hook(*args, **kwargs)

    if isinstance(impl, Around):
        return impl.hook(impl.wrapped, *args, **kwargs)

    if isinstance(impl, Forward):
        return impl.registry.call(impl.namespace, impl.name, *args, **kwargs)

    raise TypeError(f"Not an implementation: {impl!r}")


def layers(impl: Implementation) -> Iterator[Implementation]:
    """Yield the nodes of a chain, outermost first."""
    node = impl
    while node is not None:
        yield node
        node = node.next


def describe(impl: Implementation) -> str:
    """Render a chain as ``Before(hook) > Base(fn)``."""
    return " > ".join(repr(node) for node in layers(impl))


@dataclass
class FunctionEntry:
    """Registry record for one function of one namespace."""

    namespace: str
    name: str
    impl: Implementation
    receiver: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"


@dataclass(frozen=True)
class Snapshot:
    """Implementation captured the first time a function was intercepted."""

    impl: Implementation
    receiver: bool
    captured_from: str


class SnapshotStore:
    """First-touch snapshots keyed by ``(namespace, name)``."""

    def __init__(self):
        self._snapshots: Dict[Tuple[str, str], Snapshot] = {}

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)

    def get(self, namespace: str, name: str) -> Optional[Snapshot]:
        return self._snapshots.get((namespace, name))

    def put_once(self, namespace: str, name: str, snapshot: Snapshot) -> bool:
        """Store a snapshot unless one exists. Returns True if stored."""
        key = (namespace, name)
        if key in self._snapshots:
            return False
        self._snapshots[key] = snapshot
        return True

    def keys(self) -> List[Tuple[str, str]]:
        return list(self._snapshots)


class FunctionRegistry:
    """Current implementations and snapshots for every namespace."""

    def __init__(self, table: Optional[NamespaceTable] = None, diagnostics=None):
        self.table = table if table is not None else NamespaceTable()
        self.snapshots = SnapshotStore()
        self.diagnostics = diagnostics

    def _debug(self, event: str, message: str, **fields):
        if self.diagnostics is not None:
            self.diagnostics.debug(event, message, **fields)

    def resolves(self, namespace: str, name: str) -> bool:
        """Check whether ``name`` is reachable from ``namespace``."""
        return self.table.lookup(namespace, name) is not None

    def entry(self, namespace: str, name: str) -> FunctionEntry:
        """Get the entry ``name`` resolves to, searching parents."""
        hit = self.table.lookup(namespace, name)
        if hit is None:
            raise FunctionNotFound(namespace, name)
        return hit[1]

    def get(self, namespace: str, name: str) -> Implementation:
        """Get the current implementation of a function."""
        return self.entry(namespace, name).impl

    def set(
        self,
        namespace: str,
        name: str,
        impl: Implementation,
        receiver: Optional[bool] = None,
    ) -> FunctionEntry:
        """
        Install ``impl`` as the implementation of ``namespace.name``.

        The entry is written on ``namespace`` itself even when the name was
        inherited. If ``receiver`` is None the calling convention of the
        entry being replaced (or inherited) is kept.
        """
        if receiver is None:
            hit = self.table.lookup(namespace, name)
            receiver = hit[1].receiver if hit else False

        entry = FunctionEntry(namespace, name, impl, receiver)
        self.table.define(namespace, name, entry)
        return entry

    def remove(self, namespace: str, name: str) -> bool:
        """Remove a directly-defined function. Snapshots are left alone."""
        return self.table.undefine(namespace, name)

    def capture_once(self, namespace: str, name: str) -> bool:
        """Snapshot the current implementation unless already snapshotted."""
        if (namespace, name) in self.snapshots:
            return False

        entry = self.entry(namespace, name)
        self.snapshots.put_once(
            namespace, name, Snapshot(entry.impl, entry.receiver, entry.namespace)
        )
        self._debug(
            "capture",
            f"Captured original of '{namespace}.{name}'",
            namespace=namespace,
            function=name,
        )
        return True

    def snapshot_of(self, namespace: str, name: str) -> Optional[Snapshot]:
        return self.snapshots.get(namespace, name)

    def call(self, namespace: str, name: str, /, *args, **kwargs) -> Any:
        """Invoke a function by name."""
        return self.get(namespace, name)(*args, **kwargs)

    def direct_names(self, namespace: str) -> List[str]:
        return self.table.direct_names(namespace)
