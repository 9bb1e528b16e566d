"""
Template registry

Per-compilation symbol table: the tag and attribute vocabularies a template
declares in its <head>, its export names, and its inheritance.
"""

from typing import Dict, Optional

from ..models.tags import TagBinding, TagKind


class TemplateRegistry:
    """
    Registry of tag and attribute bindings for one template

    Tag and attribute names are case-insensitive: they are uppercased on
    insertion and on lookup. Export names keep their case.

    Attributes:
        tags: Uppercase tag name -> binding, in registration order
        attributes: Uppercase attribute name -> ATTRIBUTE binding
        exports: Export name -> exported alias
        extends: Whether the template extends another template
        forward: Export-forward target of a pure re-export template
    """

    def __init__(self) -> None:
        self.tags: Dict[str, TagBinding] = {}
        self.attributes: Dict[str, TagBinding] = {}
        self.exports: Dict[str, str] = {}
        self.extends = False
        self.forward: Optional[str] = None
        self.argument_index = 0

    def tag_add(self, name: str, binding: TagBinding) -> None:
        """Register a tag binding, replacing any binding of the same name"""
        binding.name = name.upper()
        self.tags[binding.name] = binding

    def tag_get(self, name: str) -> Optional[TagBinding]:
        return self.tags.get(name.upper())

    def tag_has(self, name: str) -> bool:
        return name.upper() in self.tags

    def attribute_add(self, name: str, binding: TagBinding) -> None:
        """Register an attribute directive"""
        binding.name = name.upper()
        self.attributes[binding.name] = binding

    def attribute_get(self, name: str) -> Optional[TagBinding]:
        return self.attributes.get(name.upper())

    def attribute_has(self, name: str) -> bool:
        return name.upper() in self.attributes

    def export_add(self, name: str, alias: str) -> None:
        self.exports[name] = alias

    def export_get(self, name: str) -> Optional[str]:
        return self.exports.get(name)

    def export_has(self, name: str) -> bool:
        return name in self.exports

    def super_set(self, ref: str) -> None:
        """
        Mark the template as extending the component at ref

        Binds the SUPER tag. A template extends at most one other template.

        Args:
            ref: Reference of the parent template

        Raises:
            ValueError: If the template already extends another template
        """
        if self.extends:
            raise ValueError(f"Template already extends {self.tags['SUPER'].ref!r}; cannot also extend {ref!r}")
        self.extends = True
        self.tag_add("SUPER", TagBinding(kind=TagKind.SUPER, name="SUPER", ref=ref))

    def argument_indexNext(self) -> int:
        """Allocate the next argument procedure index"""
        index = self.argument_index
        self.argument_index += 1
        return index
