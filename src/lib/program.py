"""
Program builder for generated source text

Assembles indentation-aware program text line by line. A Program holds its
own lines plus an ordered list of nested sections; digest() flattens the
whole tree once generation is finished.

Lines are stored newline-terminated. Retracting a span blanks its entries in
place, so spans handed out earlier keep pointing at the right lines.

Example:
    >>> program = Program()
    >>> program.line_add("if (x) {")
    Span(start=0, stop=1)
    >>> _ = program.indent().line_add("y();")
    >>> program.exdent()
    >>> _ = program.line_add("}")
    >>> program.digest()
    'if (x) {\\n    y();\\n}\\n\\n'
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from ..config import appsettings


@dataclass(frozen=True)
class Span:
    """
    Handle for the lines produced by one line_add() call

    Attributes:
        start: Index of the first stored line
        stop: Index one past the last stored line
    """
    start: int
    stop: int


class Program:
    """
    Nested, indentation-aware line buffer

    Attributes:
        name: Section label (None for the root program)
        lines: Stored lines, each newline-terminated ("" once retracted)
        sections: Nested programs, digested after this program's lines
    """

    def __init__(self, name: Optional[str] = None, indent_unit: Optional[str] = None) -> None:
        if indent_unit is None:
            indent_unit = appsettings.indent_unit
        self.name = name
        self.indent_unit = indent_unit
        self.lines: List[str] = []
        self.sections: List["Program"] = []
        self.tabs: List[str] = []

    def __repr__(self) -> str:
        return f"Program(name={self.name!r}, lines={len(self.lines)}, sections={len(self.sections)})"

    def line_add(self, text: str) -> Span:
        """
        Append text at the current indentation

        Text containing newlines fans out into one indented line per
        physical line; the returned span covers all of them.

        Args:
            text: Line content without trailing newline

        Returns:
            Span covering the stored lines
        """
        start = len(self.lines)
        prefix = "".join(self.tabs)
        for line in text.split("\n"):
            self.lines.append(f"{prefix}{line}\n" if line else "\n")
        return Span(start, len(self.lines))

    def retract(self, span: Span) -> None:
        """Blank every line of a previously returned span"""
        for index in range(span.start, span.stop):
            self.lines[index] = ""

    def lines_blankSince(self, since: int) -> bool:
        """True if every line stored at or after index 'since' is retracted"""
        return not any(self.lines[since:])

    def indent(self) -> "Program":
        """Render subsequent lines one level deeper"""
        self.tabs.append(self.indent_unit)
        return self

    def exdent(self) -> None:
        """Restore the previous indentation level"""
        self.tabs.pop()

    @contextmanager
    def indented(self) -> Iterator["Program"]:
        """Indent for the duration of a with-block"""
        self.indent()
        try:
            yield self
        finally:
            self.exdent()

    def section_add(self, name: str) -> "Program":
        """
        Create a nested section

        The section is owned by this program and digested after this
        program's own lines, in creation order.

        Args:
            name: Section label, for traceability

        Returns:
            The new, empty section
        """
        section = Program(name=name, indent_unit=self.indent_unit)
        self.sections.append(section)
        return section

    def lines_collect(self, lines: List[str]) -> None:
        """Pre-order traversal: own lines first, then each section"""
        lines.extend(self.lines)
        for section in self.sections:
            section.lines_collect(lines)

    def digest(self) -> str:
        """
        Serialize the program tree

        Returns:
            Concatenated text, terminated by one trailing blank line
        """
        lines: List[str] = []
        self.lines_collect(lines)
        lines.append("\n")
        return "".join(lines)
