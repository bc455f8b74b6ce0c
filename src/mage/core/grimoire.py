"""
Grimoire: the root context of Gnosis Mage

A ``Grimoire`` owns one namespace table, one function registry with its
snapshot store, and one diagnostic stream. Every operation is available on it
with an explicit namespace argument. ``install`` binds the operation set to
one namespace and returns a ``Spellbook`` whose methods default to that
namespace, registering the operations themselves as functions of the
namespace along the way.

Most programs use the process-wide grimoire returned by ``get_grimoire``;
tests build their own.
"""

import functools
import inspect
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from ..config import MageConfig, get_config
from .declarative import Declarations
from .diagnostics import DiagnosticLogger
from .dispatch import Dispatcher
from .inheritance import Inheritance
from .instance import Instance
from .interceptor import Interceptor
from .lifecycle import Lifecycle
from .namespace import NamespaceTable
from .registry import Base, FunctionRegistry, Implementation, Snapshot, describe

FULL_VOCABULARY = (
    "override",
    "restore",
    "before",
    "after",
    "around",
    "create",
    "conjur",
    "withdraw",
    "duplicate",
    "clone",
    "exports",
    "have",
    "sub_run",
    "sublist",
    "sub_alert",
    "tag",
    "accessor",
    "has",
    "augment",
    "chainable",
)

# creation and instrumentation only; method modifiers are left to the host
MOOSE_VOCABULARY = (
    "create",
    "conjur",
    "withdraw",
    "duplicate",
    "clone",
    "exports",
    "have",
    "sub_run",
    "sublist",
    "sub_alert",
    "tag",
)

CLASS_VOCABULARY = ("new", "augment", "extends", "accessor", "has")

Names = Union[str, Iterable[str]]


def vocabulary_for(class_mode: bool = False, moose: bool = False) -> List[str]:
    """The operation names installed for a combination of toggles."""
    names = list(MOOSE_VOCABULARY if moose else FULL_VOCABULARY)
    if class_mode:
        names.extend(n for n in CLASS_VOCABULARY if n not in names)
    return names


class Grimoire:
    """Registry, snapshots and diagnostics for one set of namespaces."""

    def __init__(
        self,
        config: Optional[MageConfig] = None,
        debug: Optional[bool] = None,
        loader: Optional[Callable] = None,
    ):
        self.config = config or get_config()
        self.diagnostics = DiagnosticLogger(
            prefix=self.config.diagnostic_prefix,
            format=self.config.log_format,
            level=self.config.log_level,
            to_stdout=self.config.log_to_stdout,
            buffer_size=self.config.buffer_size,
        )
        self.table = NamespaceTable(self.config.default_namespace)
        self.registry = FunctionRegistry(self.table, self.diagnostics)

        # namespace -> operation names installed there by ``install``
        self.installed: Dict[str, Set[str]] = {}

        self.interceptor = Interceptor(self.registry)
        self.lifecycle = Lifecycle(self.registry)
        self.declarations = Declarations(self.interceptor, self.lifecycle, self.installed)
        self.dispatcher = Dispatcher(self.registry)
        self.inheritance = Inheritance(self.registry, loader, self.config.autoload_parents)

        if debug is None:
            debug = self.config.debug
        if debug:
            self.diagnostics.enable()

    @property
    def debug(self) -> bool:
        return self.diagnostics.enabled

    @property
    def default_namespace(self) -> str:
        return self.table.default_namespace

    # Interception

    def override(self, namespace: str, name: str, impl: Callable) -> bool:
        return self.interceptor.override(namespace, name, impl)

    def restore(self, namespace: str, name: str) -> bool:
        return self.interceptor.restore(namespace, name)

    def before(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        return self.interceptor.before(namespace, names, hook)

    def after(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        return self.interceptor.after(namespace, names, hook)

    def around(self, namespace: str, names: Names, hook: Callable) -> List[str]:
        return self.interceptor.around(namespace, names, hook)

    # Lifecycle

    def create(self, namespace: str, name: str, impl: Callable, receiver: bool = False) -> bool:
        return self.lifecycle.create(namespace, name, impl, receiver)

    conjur = create

    def withdraw(self, namespace: str, name: str) -> bool:
        return self.lifecycle.withdraw(namespace, name)

    def duplicate(self, name: str, source: str, target: str) -> bool:
        return self.lifecycle.duplicate(name, source, target)

    clone = duplicate

    def exports(self, namespace: str, name: str, targets: Names) -> List[str]:
        return self.lifecycle.exports(namespace, name, targets)

    # Declarations

    def accessor(self, namespace: str, name: str, default: Any = None) -> bool:
        return self.declarations.accessor(namespace, name, default)

    def has(self, namespace: str, name: str, is_: str = "rw", default: Any = None) -> bool:
        return self.declarations.has(namespace, name, is_, default)

    def chainable(self, namespace: str, name: str) -> List[str]:
        return self.declarations.chainable(namespace, name)

    def sub_alert(self, namespace: str) -> List[str]:
        return self.declarations.sub_alert(namespace)

    def tag(self, namespace: str, names: Names, message: str) -> List[str]:
        return self.declarations.tag(namespace, names, message)

    # Inheritance

    def augment(self, namespace: str, *parents: str) -> bool:
        return self.inheritance.augment(namespace, *parents)

    extends = augment

    def load_module(self, module, namespace: Optional[str] = None) -> List[str]:
        """Register the functions of a Python module as a namespace."""
        return self.inheritance.load_module(module, namespace)

    # Dispatch

    def sub_run(self, namespace: str, names: Names, /, *args, **kwargs):
        return self.dispatcher.sub_run(namespace, names, *args, **kwargs)

    def have(self, namespace: str, name: str, then: Callable, or_=None) -> Any:
        return self.dispatcher.have(namespace, name, then, or_)

    def sublist(self, namespace: str) -> List[str]:
        return self.dispatcher.sublist(namespace)

    def call(self, namespace: str, name: str, /, *args, **kwargs) -> Any:
        """Invoke ``namespace.name`` with the given arguments."""
        return self.registry.call(namespace, name, *args, **kwargs)

    def function(self, namespace: str, name: str) -> Callable:
        """A callable that looks ``namespace.name`` up each time it is called."""
        return functools.partial(self.registry.call, namespace, name)

    def new(self, namespace: str, /, **attributes) -> Instance:
        """Construct an instance through the namespace's ``new`` function."""
        return self.registry.call(namespace, "new", namespace, **attributes)

    # Introspection

    def implementation(self, namespace: str, name: str) -> Implementation:
        return self.registry.get(namespace, name)

    def snapshot(self, namespace: str, name: str) -> Optional[Snapshot]:
        return self.registry.snapshot_of(namespace, name)

    def describe(self, namespace: str, name: str) -> str:
        """Render the implementation chain of a function."""
        return describe(self.registry.get(namespace, name))

    # Installation

    def install(
        self,
        namespace: Optional[str] = None,
        debug: bool = False,
        class_mode: bool = False,
        moose: bool = False,
    ) -> "Spellbook":
        """
        Install the operation set into a namespace.

        Args:
            namespace: Target namespace (defaults to the default namespace)
            debug: Switch the diagnostic stream on
            class_mode: Also install a ``new`` constructor, ``augment``,
                ``extends``, ``accessor`` and ``has``
            moose: Restrict the operations to creation and instrumentation

        Returns:
            A ``Spellbook`` bound to ``namespace``
        """
        namespace = namespace or self.default_namespace
        if debug:
            self.diagnostics.enable()

        vocabulary = vocabulary_for(class_mode=class_mode, moose=moose)
        book = Spellbook(self, namespace, vocabulary)

        installed = self.installed.setdefault(namespace, set())
        for name in vocabulary:
            if name == "new":
                if not self.registry.resolves(namespace, "new"):
                    self.registry.set(namespace, "new", Base(self._constructor), receiver=True)
                    installed.add(name)
                continue
            self.registry.set(namespace, name, Base(getattr(book, name)), receiver=False)
            installed.add(name)

        self.table.get(namespace)
        self.diagnostics.debug(
            "install",
            f"Installed {len(vocabulary)} operations into '{namespace}'",
            namespace=namespace,
        )
        return book

    def _constructor(self, receiver: Union[str, Instance], /, **attributes) -> Instance:
        # reached through an instance, build another of the same namespace
        if isinstance(receiver, Instance):
            receiver = receiver.namespace
        return Instance(self.registry, receiver, attributes)


class Spellbook:
    """The operation set of a grimoire bound to one namespace."""

    def __init__(self, grimoire: Grimoire, namespace: str, vocabulary: Iterable[str]):
        self.grimoire = grimoire
        self.namespace = namespace
        self.vocabulary = frozenset(vocabulary)
        self._spells = _Spells(grimoire, namespace)

    def __getattr__(self, name: str):
        if name.startswith("_") or name not in self.__dict__.get("vocabulary", ()):
            raise AttributeError(f"'{name}' is not installed in '{self.__dict__.get('namespace')}'")
        return getattr(self._spells, name)

    def __dir__(self):
        return sorted(set(super().__dir__()) | self.vocabulary)

    def call(self, name: str, /, *args, **kwargs) -> Any:
        """Invoke a function of the bound namespace."""
        return self.grimoire.call(self.namespace, name, *args, **kwargs)

    def function(self, name: str) -> Callable:
        return self.grimoire.function(self.namespace, name)

    def __repr__(self):
        return f"Spellbook({self.namespace!r}, {len(self.vocabulary)} operations)"


class _Spells:
    """Every operation, defaulting to one namespace."""

    def __init__(self, grimoire: Grimoire, namespace: str):
        self._grimoire = grimoire
        self._namespace = namespace

    def _ns(self, namespace: Optional[str]) -> str:
        return namespace or self._namespace

    def override(self, name: str, impl: Callable, namespace: Optional[str] = None) -> bool:
        return self._grimoire.override(self._ns(namespace), name, impl)

    def restore(self, name: str, namespace: Optional[str] = None) -> bool:
        return self._grimoire.restore(self._ns(namespace), name)

    def before(self, names: Names, hook: Callable, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.before(self._ns(namespace), names, hook)

    def after(self, names: Names, hook: Callable, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.after(self._ns(namespace), names, hook)

    def around(self, names: Names, hook: Callable, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.around(self._ns(namespace), names, hook)

    def create(
        self, name: str, impl: Callable, receiver: bool = False, namespace: Optional[str] = None
    ) -> bool:
        return self._grimoire.create(self._ns(namespace), name, impl, receiver)

    conjur = create

    def withdraw(self, name: str, namespace: Optional[str] = None) -> bool:
        return self._grimoire.withdraw(self._ns(namespace), name)

    def duplicate(self, name: str, source: Optional[str] = None, target: Optional[str] = None) -> bool:
        return self._grimoire.duplicate(name, self._ns(source), self._ns(target))

    clone = duplicate

    def exports(self, name: str, into: Names) -> List[str]:
        return self._grimoire.exports(self._namespace, name, into)

    def have(self, name: str, then: Callable, or_=None, namespace: Optional[str] = None) -> Any:
        return self._grimoire.have(self._ns(namespace), name, then, or_)

    def sub_run(self, names: Names, /, *args, **kwargs):
        return self._grimoire.sub_run(self._namespace, names, *args, **kwargs)

    def sublist(self, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.sublist(self._ns(namespace))

    def sub_alert(self, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.sub_alert(self._ns(namespace))

    def tag(self, names: Names, message: str, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.tag(self._ns(namespace), names, message)

    def accessor(self, name: str, default: Any = None, namespace: Optional[str] = None) -> bool:
        return self._grimoire.accessor(self._ns(namespace), name, default)

    def has(
        self, name: str, is_: str = "rw", default: Any = None, namespace: Optional[str] = None
    ) -> bool:
        return self._grimoire.has(self._ns(namespace), name, is_, default)

    def chainable(self, name: str, namespace: Optional[str] = None) -> List[str]:
        return self._grimoire.chainable(self._ns(namespace), name)

    def augment(self, *parents: str) -> bool:
        return self._grimoire.augment(self._namespace, *parents)

    extends = augment

    def new(self, /, **attributes) -> Instance:
        return self._grimoire.new(self._namespace, **attributes)


_default: Optional[Grimoire] = None
_default_lock = threading.RLock()


def get_grimoire() -> Grimoire:
    """Get the process-wide grimoire, creating it from the configuration."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Grimoire()
        return _default


def reset_grimoire() -> None:
    """Forget the process-wide grimoire."""
    global _default
    with _default_lock:
        _default = None


def install(
    namespace: Optional[str] = None,
    debug: bool = False,
    class_mode: bool = False,
    moose: bool = False,
    grimoire: Optional[Grimoire] = None,
) -> Spellbook:
    """
    Install the operation set into a namespace of the process-wide grimoire.

    When ``namespace`` is omitted the calling module's ``__name__`` is used.

    Example:
        book = install("shop.cart", debug=True)
        book.create("total", lambda items: sum(items))
        book.before("total", lambda items: print("totalling"))
    """
    if namespace is None:
        frame = inspect.currentframe().f_back
        namespace = frame.f_globals.get("__name__") if frame else None

    grimoire = grimoire or get_grimoire()
    return grimoire.install(namespace, debug=debug, class_mode=class_mode, moose=moose)
