"""
Compile-time scope

Lexical context threaded down the template tree during code generation.
Distinct from the runtime scope objects the generated program manipulates.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class CompileScope:
    """
    Immutable per-element generation context

    Attributes:
        namespace: Namespace URI for created elements (inherited)
        significant_space: Whether text keeps its leading/trailing
                           whitespace (inherited, only ever turned on)
    """
    namespace: Optional[str] = None
    significant_space: bool = False

    def nest(self, **changes: Any) -> "CompileScope":
        """Return a child scope, overriding the given fields"""
        return replace(self, **changes)
