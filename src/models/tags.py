"""
Tag binding and parameter signature models

Defines what an uppercase tag name can resolve to while a template is
compiled, and the parsed form of a template's <meta accepts> contract.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .module import Module


class TagKind(Enum):
    """
    Kinds of tag binding

    The generator dispatches on this; every kind must be handled.
    """
    THIS = "this"              # the component being compiled
    SUPER = "super"            # the component named by <link rel="extends">
    EXTERNAL = "external"      # <link rel="tag">, another compiled component
    ARGUMENT = "argument"      # <meta accepts as=...>, the caller's content
    ATTRIBUTE = "attribute"    # <link rel="attribute">, an attribute directive


# Kinds that instantiate a component rather than a plain element
COMPONENT_KINDS = frozenset({TagKind.THIS, TagKind.SUPER, TagKind.EXTERNAL, TagKind.ARGUMENT})


@dataclass(frozen=True)
class ParameterPart:
    """
    One named part of a parameter, e.g. ".header" or ".footer?"

    Attributes:
        name: Part name without the leading dot
        optional: Whether the caller may omit it
    """
    name: str
    optional: bool = False


@dataclass(frozen=True)
class ParameterSignature:
    """
    Parsed form of an accepts declaration

    Attributes:
        source: The declaration as written
        body: Whether the whole child content is accepted ("[body]")
        parts: Named parts, in declaration order

    Example:
        accepts="[body] .footer?" parses to
        ParameterSignature(
            source="[body] .footer?",
            body=True,
            parts=(ParameterPart("footer", optional=True),)
        )
    """
    source: str
    body: bool = False
    parts: Tuple[ParameterPart, ...] = ()


@dataclass
class TagBinding:
    """
    What a tag name resolves to during compilation

    Attributes:
        kind: Binding kind
        name: Canonical uppercase name
        ref: Module reference for SUPER, EXTERNAL and ATTRIBUTE bindings
        module: Resolved module for EXTERNAL bindings, set by the resolver
        parameter: Parameter signature of the bound component, if any
    """
    kind: TagKind
    name: str
    ref: Optional[str] = None
    module: Optional["Module"] = field(default=None, repr=False)
    parameter: Optional[ParameterSignature] = None

    @property
    def is_component(self) -> bool:
        return self.kind in COMPONENT_KINDS
