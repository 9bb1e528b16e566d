"""
Module descriptor

A compilation unit as seen by the module system. The loader creates it,
the compiler fills in dependencies, needed tags, parameter and the
generated text.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tags import ParameterSignature


@dataclass
class Module:
    """
    One template (or plain script) known to the module system

    Attributes:
        id: Canonical module identity (e.g., "widgets/button.html")
        filename: Path the constructor name is derived from, if any (the
                  loader normalizes .htm and .xhtml to .html and .xml)
        text: Source text before compilation, generated program after
        dependencies: Every reference discovered during analysis, in
                      discovery order (duplicates allowed)
        needed_tags: Uppercase tag alias -> reference, for tags that must
                     be loaded before code generation
        parameter: Parsed <meta accepts> declaration, None if absent
        redirect: Export-forward target when the template only re-exports
                  another module
    """
    id: str
    filename: str = ""
    text: str = ""
    dependencies: List[str] = field(default_factory=list)
    needed_tags: Dict[str, str] = field(default_factory=dict)
    parameter: Optional["ParameterSignature"] = None
    redirect: Optional[str] = None

    @property
    def display(self) -> str:
        """Identifying path used to derive the generated constructor name"""
        return self.filename or self.id
