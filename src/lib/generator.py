"""
Code generator for template documents

Translates a template body into a CommonJS module exporting one component
constructor. Generation is a recursive descent over the body that threads
an immutable CompileScope (namespace, whitespace mode) down the tree and
emits statements into a Program.

Generated constructors have the signature (body, caller): body is the
container node to build into, caller the runtime scope of the code that
instantiated the component. Custom tags become nested component
instantiations; when the tag has content for the target's parameter, the
content is compiled into a separate argument constructor emitted in its own
Program section.

Example output for <body><p id="greeting">Hi</p></body>:

    "use strict";
    var $THIS = function Hello(body, caller) {
        var document = body.ownerDocument;
        var scope = this.scope = caller.root.nest();
        ...
        node = document.createElement("p");
        parent.appendChild(node);
        component = node;
        scope.hookup("greeting", component);
        ...
        this.scope.hookup("this", this);
    };
    $THIS.exports = {};
    module.exports = $THIS;
"""

import json
import re
from typing import Optional, Set

from ..config import AppSettings, appsettings
from ..models.document import Document, Element, Text
from ..models.module import Module
from ..models.scope import CompileScope
from ..models.tags import TagBinding, TagKind
from .errors import TranslationError
from .log import LOG
from .naming import variable_make
from .program import Program
from .registry import TemplateRegistry


SEGMENT_HEADER = "var parent = body, parents = [], node, component, callee, id;"
PARENT_PUSH = "parents[parents.length] = parent; parent = node;"
PARENT_POP = "node = parent; parent = parents[parents.length - 1]; parents.length--;"


def js(value) -> str:
    """JavaScript literal for a string, number or dict of strings"""
    return json.dumps(value)


def text_normalize(value: str, significant_space: bool) -> str:
    """
    Collapse whitespace runs to one space; trim unless space is significant

    Example:
        >>> text_normalize("  a  b  ", False)
        'a b'
        >>> text_normalize("  a  b  ", True)
        ' a b '
    """
    collapsed = re.sub(r"\s+", " ", value)
    return collapsed if significant_space else collapsed.strip()


class CodeGenerator:
    """
    Emits the construction program for one template

    Args:
        template: Registry populated by the analyzer and resolver
        module: Module being compiled (for messages and the THIS parameter)
        settings: Application settings (whitespace wrapper tag)

    Attributes:
        labels: Ids referenced by a for= attribute seen so far
        ids_used: Whether any id or for attribute was translated
    """

    def __init__(self, template: TemplateRegistry, module: Module, settings: Optional[AppSettings] = None) -> None:
        self.template = template
        self.module = module
        self.settings = settings or appsettings
        self.labels: Set[str] = set()
        self.ids_used = False

    def document_translate(self, document: Document, program: Program, display_name: str) -> None:
        """
        Emit the whole module for a template

        A template that re-exports another module emits only the forwarding
        statement; its body is ignored.
        """
        program.line_add('"use strict";')

        if self.template.forward is not None:
            program.line_add(f"module.exports = require({js(self.template.forward)});")
            return

        self.requires_translate(program)
        body = document.body if document.body is not None else Element(tag_name="body")
        self.body_translate(body, program, "THIS", display_name)
        program.line_add(f"$THIS.exports = {js(self.template.exports)};")
        program.line_add("module.exports = $THIS;")

    def requires_translate(self, program: Program) -> None:
        """One require per parent, tag and attribute directive module"""
        for binding in self.template.tags.values():
            if binding.kind in (TagKind.SUPER, TagKind.EXTERNAL):
                program.line_add(f"var {self.constructor_get(binding)} = require({js(binding.ref)});")
        for binding in self.template.attributes.values():
            program.line_add(f"var {variable_make(binding.name, '$$')} = require({js(binding.ref)});")

    def body_translate(self, body: Element, program: Program, name: str, display_name: str) -> None:
        """
        Emit the component constructor

        Order inside the constructor: super constructor call, scope set-up,
        body statements, then the component announces itself to its own
        scope. Prototype linkage follows the declaration.
        """
        program.line_add(f"var ${name} = function {display_name}(body, caller) {{")
        with program.indented():
            if self.template.extends:
                program.line_add("$SUPER.apply(this, arguments);")
            program.line_add("var document = body.ownerDocument;")
            program.line_add("var scope = this.scope = caller.root.nest();")
            program.line_add("scope.caller = caller;")
            program.line_add("scope.this = this;")
            lookups = program.line_add("scope.ids = {};\nscope.componentsFor = {};")
            self.segment_translate(body, program, CompileScope(), name, display_name)
            if not self.ids_used:
                program.retract(lookups)
            program.line_add('this.scope.hookup("this", this);')
        program.line_add("};")

        if self.template.extends:
            program.line_add("$THIS.prototype = Object.create($SUPER.prototype);")
            program.line_add("$THIS.prototype.constructor = $THIS;")

    def argument_translate(self, node: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        """Emit a constructor for content passed to a component's parameter"""
        program.line_add(f"var ${name} = function {display_name}(body, caller) {{")
        with program.indented():
            program.line_add("var document = body.ownerDocument;")
            program.line_add("var scope = this.scope = caller;")
            self.segment_translate(node, program, scope, name, display_name)
        program.line_add("};")

    def segment_translate(self, node: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        """
        Emit the statements building a node's children into 'body'

        The bookkeeping declaration is emitted before the children are known
        and retracted if they produce no statements.
        """
        header = program.line_add(SEGMENT_HEADER)
        mark = len(program.lines)
        self.children_translate(node, program, scope, name, display_name)
        if program.lines_blankSince(mark):
            program.retract(header)

    def children_translate(self, node: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        for child in node.children:
            if isinstance(child, Element):
                self.element_translate(child, program, scope, name, display_name)
            else:
                self.text_translate(child, program, scope)

    def text_translate(self, text: Text, program: Program, scope: CompileScope) -> None:
        value = text_normalize(text.value, scope.significant_space)
        if value:
            program.line_add(f"parent.appendChild(document.createTextNode({js(value)}));")

    def element_translate(self, element: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        tag_name = element.tag_name.upper()
        LOG(f"{self.module.id}: <{element.tag_name}>", level=3)

        if tag_name == self.settings.whitespace_tag.upper():
            self.children_translate(element, program, scope.nest(significant_space=True), name, display_name)
            return

        binding = self.template.tag_get(tag_name)
        if binding is None:
            self.node_translate(element, program, scope, name, display_name)
        else:
            self.component_translate(element, binding, program, scope, name, display_name)

    def node_translate(self, element: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        """Plain element: create, append, hook up, attributes, children"""
        namespace = element.attributes.get("xmlns") or element.namespace or scope.namespace
        if namespace:
            program.line_add(f"node = document.createElementNS({js(namespace)}, {js(element.tag_name)});")
        else:
            program.line_add(f"node = document.createElement({js(element.tag_name)});")
        program.line_add("parent.appendChild(node);")
        program.line_add("component = node;")
        self.hookup_translate(element, program)
        self.attributes_translate(element, program)

        push = program.line_add(PARENT_PUSH)
        mark = len(program.lines)
        label = f"{display_name}${variable_make(element.tag_name.lower(), '')}"
        self.children_translate(element, program, scope.nest(namespace=namespace), name, label)
        if program.lines_blankSince(mark):
            program.retract(push)
        else:
            program.line_add(PARENT_POP)

    def component_translate(
        self,
        element: Element,
        binding: TagBinding,
        program: Program,
        scope: CompileScope,
        name: str,
        display_name: str,
    ) -> None:
        """Custom tag: container node plus parameter negotiation"""
        program.line_add("node = document.createBody();")
        program.line_add("parent.appendChild(node);")

        if binding.kind is TagKind.ARGUMENT:
            self.parameter_translate(element, program, scope, name, display_name)
        elif binding.kind in (TagKind.THIS, TagKind.SUPER, TagKind.EXTERNAL):
            self.instance_translate(element, binding, program, scope, name, display_name)
        elif binding.kind is TagKind.ATTRIBUTE:
            raise TranslationError(f"{self.module.id}: attribute directive {binding.name!r} used as a tag")
        else:
            raise TranslationError(f"{self.module.id}: unhandled tag binding kind {binding.kind!r}")

        self.hookup_translate(element, program)

    def instance_translate(
        self,
        element: Element,
        binding: TagBinding,
        program: Program,
        scope: CompileScope,
        name: str,
        display_name: str,
    ) -> None:
        """
        Instantiate another component

        The callee scope is nested off the local scope and carries the
        markup fragment: the argument constructor compiled from the
        element's children (or null), its tag name and its attributes.
        """
        if binding.kind is TagKind.EXTERNAL and binding.module is None:
            raise TranslationError(f"{self.module.id}: tag <{element.tag_name}> was not resolved before generation")

        argument = "null"
        if binding.parameter is not None and self.content_has(element, scope):
            argument = "$" + self.argument_compile(element, program, scope, name, display_name)

        attributes = {key: value for key, value in element.attributes.items() if key != "id"}
        program.line_add("callee = scope.nest();")
        program.line_add(
            f"callee.argument = {{component: {argument}, tagName: {js(element.tag_name)}, attributes: {js(attributes)}}};"
        )
        program.line_add(f"component = new {self.constructor_get(binding)}(node, callee);")

    def parameter_translate(self, element: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> None:
        """
        Instantiate this template's own parameter

        Prefers the argument constructor the caller supplied, instantiated in
        a scope nested from the caller's scope; otherwise falls back to the
        element's own children as default content.
        """
        fallback = None
        if self.content_has(element, scope):
            fallback = self.argument_compile(element, program, scope, name, display_name)

        program.line_add("if (scope.caller.argument && scope.caller.argument.component) {")
        with program.indented():
            program.line_add("callee = scope.caller.nest();")
            program.line_add("component = new scope.caller.argument.component(node, callee);")
        program.line_add("} else {")
        with program.indented():
            if fallback is None:
                program.line_add("component = node;")
            else:
                program.line_add("callee = scope.nest();")
                program.line_add(f"component = new ${fallback}(node, callee);")
        program.line_add("}")

    def argument_compile(self, element: Element, program: Program, scope: CompileScope, name: str, display_name: str) -> str:
        """
        Compile an element's children as a separate argument constructor

        Returns:
            Name of the emitted constructor variable, without '$'
        """
        index = self.template.argument_indexNext()
        argument_name = f"{name}${index}"
        section = program.section_add(element.tag_name)
        self.argument_translate(element, section, scope, argument_name, f"{display_name}${index}")
        return argument_name

    def content_has(self, element: Element, scope: CompileScope) -> bool:
        """Whether an element has children that would emit anything"""
        for child in element.children:
            if isinstance(child, Element):
                return True
            if text_normalize(child.value, scope.significant_space):
                return True
        return False

    def hookup_translate(self, element: Element, program: Program) -> None:
        element_id = element.attributes.get("id")
        if element_id is not None:
            program.line_add(f"scope.hookup({js(element_id)}, component);")

    def attributes_translate(self, element: Element, program: Program) -> None:
        for key, value in element.attributes.items():
            if key == "xmlns" or key.startswith("xmlns:"):
                continue
            directive = self.template.attribute_get(key)
            if directive is not None:
                program.line_add(f"{variable_make(directive.name, '$$')}(component, {js(key)}, {js(value)}, scope);")
            elif key == "id":
                self.id_translate(value, program)
            elif key == "for":
                self.for_translate(value, program)
            else:
                program.line_add("if (component.setAttribute) {")
                with program.indented():
                    program.line_add(f"component.setAttribute({js(key)}, {js(value)});")
                program.line_add("}")

    def id_translate(self, value: str, program: Program) -> None:
        """
        Give the element a unique runtime id

        Labels seen earlier in the document that refer to this id are
        patched once the id exists.
        """
        self.ids_used = True
        program.line_add(f"id = {js(value + '_')} + Math.random().toString(36).slice(2);")
        program.line_add("if (component.setAttribute) {")
        with program.indented():
            program.line_add('component.setAttribute("id", id);')
        program.line_add("}")
        program.line_add(f"scope.ids[{js(value)}] = id;")
        if value in self.labels:
            program.line_add(f"if (scope.componentsFor[{js(value)}]) {{")
            with program.indented():
                program.line_add(f'scope.componentsFor[{js(value)}].setAttribute("for", id);')
            program.line_add("}")

    def for_translate(self, value: str, program: Program) -> None:
        """
        Link a label to its target id

        Records the label for targets declared later and links immediately
        to a target declared earlier.
        """
        self.ids_used = True
        self.labels.add(value)
        program.line_add(f"scope.componentsFor[{js(value)}] = node;")
        program.line_add(f"if (scope.ids[{js(value)}]) {{")
        with program.indented():
            program.line_add(f'node.setAttribute("for", scope.ids[{js(value)}]);')
        program.line_add("}")

    def constructor_get(self, binding: TagBinding) -> str:
        """Variable holding the constructor a component binding instantiates"""
        if binding.kind is TagKind.THIS:
            return "$THIS"
        if binding.kind is TagKind.SUPER:
            return "$SUPER"
        return variable_make(binding.name)
