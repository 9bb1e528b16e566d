"""
Compilation errors shared by the analyzer, generator and compiler
"""


class TranslationError(Exception):
    """Raised when a template cannot be compiled"""
    pass
