"""
Document analyzer

Reads a parsed template before any code is generated:

1. Head pass: <link> and <meta> declarations populate the template
   registry (tags, attribute directives, exports, inheritance) and the
   module's dependency list, needed tags and parameter signature.
2. Body pass: every href in the body is recorded as a dependency.

Dependencies are appended in discovery order, head before body, so that
repeated compilations of the same template produce the same list.
"""

from typing import Callable, Optional

from ..config import AppSettings, appsettings
from ..models.document import Document, Element
from ..models.module import Module
from ..models.tags import ParameterSignature, TagBinding, TagKind
from .errors import TranslationError
from .log import LOG
from .registry import TemplateRegistry


SignatureParser = Callable[[str], ParameterSignature]


class DocumentAnalyzer:
    """
    Populates a TemplateRegistry and Module from a parsed Document

    Args:
        template: Registry for the template being compiled
        module: Module descriptor receiving dependencies and parameter
        signature_parser: Parses <meta accepts> declarations
        settings: Application settings (alias suffixes, argument tag)
    """

    def __init__(
        self,
        template: TemplateRegistry,
        module: Module,
        signature_parser: SignatureParser,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.template = template
        self.module = module
        self.signature_parser = signature_parser
        self.settings = settings or appsettings

    def analyze(self, document: Document) -> None:
        """Run the head pass, then the body pass"""
        self.template.tag_add("THIS", TagBinding(kind=TagKind.THIS, name="THIS"))

        head = document.head
        if head is not None:
            for child in head.elements():
                self.declaration_read(child)

        # THIS resolves to the component being compiled, parameter included
        self.template.tag_get("THIS").parameter = self.module.parameter

        body = document.body
        if body is not None:
            self.hrefs_collect(body)

        LOG(f"{self.module.id}: {len(self.module.dependencies)} dependencies", level=2)

    def declaration_read(self, element: Element) -> None:
        """Dispatch one head element"""
        tag_name = element.tag_name.lower()
        if tag_name == "link":
            self.link_read(element)
        elif tag_name == "meta":
            self.meta_read(element)

    def link_read(self, link: Element) -> None:
        rel = link.attributes.get("rel", "")
        href = link.attributes.get("href")

        if rel not in ("extends", "exports", "tag", "attribute"):
            LOG(f"{self.module.id}: ignoring <link rel={rel!r}>", level=2)
            return
        if not href:
            raise TranslationError(f"{self.module.id}: <link rel={rel!r}> requires an href")

        self.module.dependencies.append(href)

        if rel == "extends":
            if self.template.extends:
                raise TranslationError(f"{self.module.id}: a template can extend only one template, found second extends {href!r}")
            self.template.super_set(href)
        elif rel == "exports":
            self.template.forward = href
            self.module.redirect = href
        elif rel == "tag":
            alias = self.alias_resolve(link, href)
            self.template.tag_add(alias, TagBinding(kind=TagKind.EXTERNAL, name=alias, ref=href))
            self.module.needed_tags[alias.upper()] = href
            LOG(f"{self.module.id}: tag <{alias.lower()}> from {href}", level=3)
        else:
            alias = self.alias_resolve(link, href)
            self.template.attribute_add(alias, TagBinding(kind=TagKind.ATTRIBUTE, name=alias, ref=href))
            LOG(f"{self.module.id}: attribute {alias.lower()}= from {href}", level=3)

    def meta_read(self, meta: Element) -> None:
        attributes = meta.attributes
        if "accepts" in attributes:
            # SignatureError propagates unchanged
            self.module.parameter = self.signature_parser(attributes["accepts"])
            name = attributes.get("as") or self.settings.argument_tag
            self.template.tag_add(name, TagBinding(kind=TagKind.ARGUMENT, name=name))
        elif "exports" in attributes:
            name = attributes["exports"]
            self.template.export_add(name, attributes.get("as") or name)
        else:
            LOG(f"{self.module.id}: ignoring <meta> without accepts or exports", level=3)

    def alias_resolve(self, link: Element, href: str) -> str:
        """Explicit 'as', else the href's trailing segment without suffix"""
        alias = link.attributes.get("as") or self.settings.alias_derive(href)
        if not alias:
            raise TranslationError(f"{self.module.id}: cannot derive a name for {href!r}; add an 'as' attribute")
        return alias.upper()

    def hrefs_collect(self, element: Element) -> None:
        """Depth-first, document-order walk recording href attributes"""
        for child in element.elements():
            href = child.attributes.get("href")
            if href:
                self.module.dependencies.append(href)
            self.hrefs_collect(child)
