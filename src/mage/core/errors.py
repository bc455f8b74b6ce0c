"""
Errors and warnings for Gnosis Mage.

Interception problems come in two severities. Recoverable ones (overriding
something that does not exist, restoring something never touched, ...) are
reported with a ``MageWarning`` and the operation returns ``False``. Hooking a
name that cannot be found anywhere in a namespace hierarchy is fatal and
raises ``HookTargetError``.
"""

import warnings


class MageError(Exception):
    """Base class for all Gnosis Mage errors."""


class MageWarning(UserWarning):
    """Non-fatal problem reported by an interception operation."""


class FunctionNotFound(MageError, LookupError):
    """Raised when a registry read finds no function."""

    def __init__(self, namespace: str, name: str):
        super().__init__(f"No function '{name}' in namespace '{namespace}'")
        self.namespace = namespace
        self.name = name


class HookTargetError(MageError, LookupError):
    """Raised when a hook is attached to a name missing from the hierarchy."""

    def __init__(self, namespace: str, name: str):
        super().__init__(f"Could not find {name} in the hierarchy for {namespace}")
        self.namespace = namespace
        self.name = name


class ReadOnlyAttributeError(MageError, AttributeError):
    """Raised when writing to an attribute declared with ``is_="ro"``."""

    def __init__(self, namespace: str, name: str):
        super().__init__(f"Cannot alter a Read-Only accessor '{name}' in '{namespace}'")
        self.namespace = namespace
        self.name = name


def warn(message: str, stacklevel: int = 3):
    """Emit a ``MageWarning``."""
    warnings.warn(message, MageWarning, stacklevel=stacklevel)
