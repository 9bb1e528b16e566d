"""
Models package for tagwright

Contains data structures and type definitions for the compilation pipeline.
"""

from .state import ProgramState, pipeline
from .document import Document, Element, Text
from .module import Module
from .scope import CompileScope
from .tags import TagKind, TagBinding, ParameterSignature, ParameterPart

__all__ = [
    "ProgramState",
    "pipeline",
    "Document",
    "Element",
    "Text",
    "Module",
    "CompileScope",
    "TagKind",
    "TagBinding",
    "ParameterSignature",
    "ParameterPart",
]
