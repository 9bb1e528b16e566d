"""
tagwright - Component template compiler

Compiles declarative HTML/XML component templates into JavaScript modules
that build the component's node tree at runtime.
"""

__version__ = "1.0.0"

from .lib import Compiler, TemplateLoader, Program, LOG, state_connectToLogger

__all__ = ["Compiler", "TemplateLoader", "Program", "LOG", "state_connectToLogger", "__version__"]
