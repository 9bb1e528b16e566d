"""
Compiler for tagwright templates

Turns a template module (HTML or XML source) into a CommonJS module that
exports a component constructor.

Pipeline for one module:
1. Validate the mime type and derive the constructor display name
2. Parse the source into a Document
3. Analyze head declarations and body references
4. Load every custom tag module (all loads joined before step 5)
5. Generate the program and store its digest as the module text
"""

from typing import Optional

from ..config import AppSettings, appsettings
from ..models.module import Module
from .accepts import signature_parse
from .analyzer import DocumentAnalyzer, SignatureParser
from .errors import TranslationError
from .generator import CodeGenerator
from .log import LOG
from .markup import MIME_TYPES, MarkupParser
from .naming import displayName_derive
from .program import Program
from .registry import TemplateRegistry
from .resolver import DependencyResolver, ModuleSystem


class Compiler:
    """
    Compiles template modules to component constructor programs

    Collaborators are passed in explicitly; the compiler holds no global
    parser or loader.

    Responsibilities:
    - Reject unsupported source types before parsing
    - Drive analysis, dependency resolution and code generation
    - Replace the module text only once generation has succeeded
    """

    def __init__(
        self,
        loader: Optional[ModuleSystem] = None,
        parser: Optional[MarkupParser] = None,
        signature_parser: SignatureParser = signature_parse,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            loader: Module system resolving custom tag references; may be
                    omitted for templates that use no custom tags
            parser: Markup parser (defaults to the lxml-backed parser)
            signature_parser: Parser for <meta accepts> declarations
            settings: Application settings (defaults to appsettings)
        """
        self.loader = loader
        self.parser = parser or MarkupParser()
        self.signature_parser = signature_parser
        self.settings = settings or appsettings

    async def translate(self, module: Module, mime_type: str) -> Module:
        """
        Compile a module in place

        Args:
            module: Module whose text holds the template source
            mime_type: "text/html" or "application/xml"

        Returns:
            The same module, with text replaced by the generated program and
            dependencies, needed_tags, parameter and redirect populated

        Raises:
            TranslationError: Unsupported type, bad declarations, or custom
                              tags without a loader
            SignatureError: Malformed accepts declaration
            Exception: Whatever the parser or loader raises
        """
        if mime_type not in MIME_TYPES:
            raise TranslationError(
                f"Can't translate type {mime_type!r}. Use text/html or application/xml"
            )

        display_name = displayName_derive(module.display, mime_type)
        LOG(f"Translating {module.id} as {display_name}", level=2)

        document = self.parser.parse(module.text, mime_type)
        template = TemplateRegistry()
        module.dependencies = []
        module.needed_tags = {}
        module.parameter = None
        module.redirect = None

        DocumentAnalyzer(template, module, self.signature_parser, self.settings).analyze(document)

        if module.needed_tags:
            if self.loader is None:
                raise TranslationError(f"{module.id}: custom tags {sorted(module.needed_tags)} need a module loader")
            await DependencyResolver(self.loader).resolve(module, template)

        program = Program(indent_unit=self.settings.indent_unit)
        CodeGenerator(template, module, self.settings).document_translate(document, program, display_name)
        module.text = program.digest()

        LOG(f"Translated {module.id}: {len(module.text.splitlines())} lines", level=2)
        return module
