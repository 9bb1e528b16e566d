"""
Terminal highlighting for generated programs
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JavascriptLexer


def program_highlight(text: str) -> str:
    """
    Highlight a generated program for terminal display

    Args:
        text: Digested program text

    Returns:
        Text with ANSI color escapes
    """
    return highlight(text, JavascriptLexer(), TerminalFormatter())
