"""
Gnosis Mage - Function Interception for Python Namespaces

Override, restore, wrap, create, delete, duplicate and export the functions
of named namespaces, keeping enough history to undo a replacement.
"""

__version__ = "0.1.0"
__author__ = "Gnosis Team"
__email__ = "team@gnosis.dev"
__license__ = "Apache-2.0"

# Core public API
# Configuration
from .config import MageConfig, load_config, save_config
from .core.diagnostics import DiagnosticFormat, DiagnosticLogger
from .core.errors import (
    FunctionNotFound,
    HookTargetError,
    MageError,
    MageWarning,
    ReadOnlyAttributeError,
)
from .core.grimoire import (
    CLASS_VOCABULARY,
    FULL_VOCABULARY,
    MOOSE_VOCABULARY,
    Grimoire,
    Spellbook,
    get_grimoire,
    install,
    reset_grimoire,
)
from .core.instance import Instance
from .core.namespace import DEFAULT_NAMESPACE, Namespace, NamespaceTable
from .core.registry import (
    After,
    Around,
    Base,
    Before,
    Forward,
    FunctionEntry,
    FunctionRegistry,
    Implementation,
    Snapshot,
    describe,
    layers,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    # Installation
    "install",
    "Grimoire",
    "Spellbook",
    "get_grimoire",
    "reset_grimoire",
    "FULL_VOCABULARY",
    "MOOSE_VOCABULARY",
    "CLASS_VOCABULARY",
    "Instance",
    # Registry
    "DEFAULT_NAMESPACE",
    "Namespace",
    "NamespaceTable",
    "FunctionEntry",
    "FunctionRegistry",
    "Snapshot",
    "Implementation",
    "Base",
    "Before",
    "After",
    "Around",
    "Forward",
    "layers",
    "describe",
    # Errors
    "MageError",
    "MageWarning",
    "FunctionNotFound",
    "HookTargetError",
    "ReadOnlyAttributeError",
    # Diagnostics
    "DiagnosticLogger",
    "DiagnosticFormat",
    # Configuration
    "MageConfig",
    "load_config",
    "save_config",
]
