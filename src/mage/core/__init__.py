"""
Core functionality package for Gnosis Mage.

This package contains the namespace table, the function registry with its
snapshot store, and the interception, lifecycle, declaration and dispatch
operations built on them.
"""

from .declarative import *
from .diagnostics import *
from .dispatch import *
from .errors import *
from .grimoire import *
from .inheritance import *
from .instance import *
from .interceptor import *
from .lifecycle import *
from .namespace import *
from .registry import *

__version__ = "0.1.0"
