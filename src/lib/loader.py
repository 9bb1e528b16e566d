"""
Template module loader

A small module system for compiling template sets: it reads sources by
module id, compiles templates (recursively loading the tags they use) and
answers lookups for modules it has loaded.

Each module id is loaded at most once. Concurrent requests for the same id
share one compilation task. A template that, through its custom tags, ends up
waiting for itself is reported as a dependency cycle instead of hanging.

Usage:
    loader = TemplateLoader.from_directory(Path("components"))
    module = asyncio.run(loader.root_load("widgets/button.html"))
    print(module.text)
"""

import asyncio
import posixpath
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

from ..models.module import Module
from .compiler import Compiler
from .log import LOG, unit_connectToLogger
from .markup import MIME_HTML, MIME_XML


MIME_BY_SUFFIX = {
    ".html": MIME_HTML,
    ".htm": MIME_HTML,
    ".xhtml": MIME_XML,
    ".xml": MIME_XML,
}

# Suffix the display-name rule expects for each type
CANONICAL_SUFFIX = {
    MIME_HTML: ".html",
    MIME_XML: ".xml",
}


class ModuleLoadError(Exception):
    """Raised when a module cannot be read, loaded or looked up"""
    pass


def ref_resolve(ref: str, from_id: str) -> str:
    """
    Resolve a reference against the id of the requesting module

    Relative references ("./", "../") resolve against the requesting
    module's directory; anything else is already a module id.

    Example:
        >>> ref_resolve("./icon.html", "widgets/button.html")
        'widgets/icon.html'
        >>> ref_resolve("../base.html", "widgets/button.html")
        'base.html'
        >>> ref_resolve("shared/list.html", "widgets/button.html")
        'shared/list.html'
    """
    if ref.startswith("./") or ref.startswith("../"):
        return posixpath.normpath(posixpath.join(posixpath.dirname(from_id), ref))
    return ref


class TemplateLoader:
    """
    Memoizing module system backed by a source reader

    Args:
        source_read: Returns the source text for a module id
        compiler: Compiler to use; one bound to this loader is created
                  when omitted

    Attributes:
        tasks: Module id -> load task (memo)
        waits: Module id -> ids it is waiting on while compiling
        compiled: Ids of compiled templates, in completion order
    """

    def __init__(self, source_read: Callable[[str], str], compiler: Optional[Compiler] = None) -> None:
        self.source_read = source_read
        self.compiler = compiler or Compiler(loader=self)
        self.tasks: Dict[str, "asyncio.Future[Module]"] = {}
        self.waits: Dict[str, Set[str]] = {}
        self.compiled: List[str] = []

    @classmethod
    def from_directory(cls, root: Path, **kwargs) -> "TemplateLoader":
        """Loader reading module ids as paths below root"""
        def source_read(module_id: str) -> str:
            path = root / module_id
            if not path.is_file():
                raise ModuleLoadError(f"Module {module_id!r} not found in {root}")
            return path.read_text(encoding="utf-8")

        return cls(source_read, **kwargs)

    @classmethod
    def from_mapping(cls, sources: Dict[str, str], **kwargs) -> "TemplateLoader":
        """Loader reading module ids from an in-memory mapping"""
        def source_read(module_id: str) -> str:
            if module_id not in sources:
                raise ModuleLoadError(f"Module {module_id!r} not found")
            return sources[module_id]

        return cls(source_read, **kwargs)

    async def root_load(self, module_id: str) -> Module:
        """Load a top-level module and return it"""
        await self.load(module_id, "")
        return self.lookup(module_id, "")

    async def load(self, ref: str, from_id: str) -> None:
        """
        Load (and compile) the module a reference names

        Args:
            ref: Reference as written in the requesting template
            from_id: Id of the requesting module ("" for top-level loads)

        Raises:
            ModuleLoadError: Missing source or dependency cycle
            Exception: Whatever compiling the module raises
        """
        module_id = ref_resolve(ref, from_id)
        if from_id:
            if self.cycle_has(module_id, from_id):
                raise ModuleLoadError(f"Dependency cycle: {from_id!r} needs {module_id!r}, which needs {from_id!r}")
            self.waits.setdefault(from_id, set()).add(module_id)

        task = self.tasks.get(module_id)
        if task is None:
            task = asyncio.ensure_future(self.module_compile(module_id))
            self.tasks[module_id] = task

        # Shared by every requester; cancelling one waiter must not cancel it
        await asyncio.shield(task)

    def lookup(self, ref: str, from_id: str) -> Module:
        """
        Return a loaded module

        Raises:
            ModuleLoadError: If the module was never loaded or is still
                             loading
        """
        module_id = ref_resolve(ref, from_id)
        task = self.tasks.get(module_id)
        if task is None or not task.done():
            raise ModuleLoadError(f"Module {module_id!r} has not been loaded")
        return task.result()

    def cycle_has(self, module_id: str, from_id: str) -> bool:
        """Whether module_id already waits, directly or not, on from_id"""
        pending = [module_id]
        seen: Set[str] = set()
        while pending:
            current = pending.pop()
            if current == from_id:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(self.waits.get(current, ()))
        return False

    async def module_compile(self, module_id: str) -> Module:
        unit_connectToLogger(module_id)
        try:
            text = self.source_read(module_id)
        except OSError as e:
            raise ModuleLoadError(f"Failed to read {module_id!r}: {e}") from e

        stem, suffix = posixpath.splitext(module_id)
        mime_type = MIME_BY_SUFFIX.get(suffix.lower())
        if mime_type is None:
            LOG(f"Loaded {module_id} as plain script", level=2)
            return Module(id=module_id, filename=module_id, text=text)

        # page.htm is named like page.html, card.xhtml like card.xml
        module = Module(id=module_id, filename=stem + CANONICAL_SUFFIX[mime_type], text=text)

        await self.compiler.translate(module, mime_type)
        if module.redirect is not None:
            # A re-export takes on the parameter of the module it forwards to
            await self.load(module.redirect, module_id)
            module.parameter = self.lookup(module.redirect, module_id).parameter

        self.compiled.append(module_id)
        LOG(f"Compiled {module_id}", level=1)
        return module

    def modules_compiled(self) -> List[Module]:
        """Compiled template modules, in completion order"""
        return [self.tasks[module_id].result() for module_id in self.compiled]
