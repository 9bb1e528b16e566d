"""
tagwright - Component template compiler

Compiles HTML/XML component templates into JavaScript constructor modules.
"""

from .. import __version__
from .program import Program, Span
from .registry import TemplateRegistry
from .compiler import Compiler
from .loader import TemplateLoader, ModuleLoadError
from .errors import TranslationError
from .log import LOG, state_connectToLogger

__all__ = [
    "Program",
    "Span",
    "TemplateRegistry",
    "Compiler",
    "TemplateLoader",
    "ModuleLoadError",
    "TranslationError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
