"""
Dependency resolver

Loads every module a template uses as a custom tag and attaches the loaded
module, with its parameter signature, to the tag binding. Loads run
concurrently; resolve() returns only once all of them have settled, so code
generation never sees a half-resolved registry.
"""

import asyncio
from typing import Awaitable, Protocol

from ..models.module import Module
from .errors import TranslationError
from .log import LOG
from .registry import TemplateRegistry


class ModuleSystem(Protocol):
    """What the compiler needs from a module loader"""

    def load(self, ref: str, from_id: str) -> Awaitable[None]:
        ...

    def lookup(self, ref: str, from_id: str) -> Module:
        ...


class DependencyResolver:
    """
    Resolves a template's needed tags through a module system

    Args:
        loader: Module system used to load and look up tag modules
    """

    def __init__(self, loader: ModuleSystem) -> None:
        self.loader = loader

    async def resolve(self, module: Module, template: TemplateRegistry) -> None:
        """
        Load all needed tags of a module and bind them

        Every load runs as its own task. If any load fails the others are
        cancelled and awaited, then the failure propagates.

        Args:
            module: Module whose needed_tags to resolve
            template: Registry holding the corresponding tag bindings

        Raises:
            Whatever the loader raises for a failed load
        """
        if not module.needed_tags:
            return

        LOG(f"{module.id}: resolving {len(module.needed_tags)} tag module(s)", level=2)
        tasks = [
            asyncio.ensure_future(self.tag_resolve(module, template, name, ref))
            for name, ref in module.needed_tags.items()
        ]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Settle every sibling so no failure goes unretrieved
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def tag_resolve(self, module: Module, template: TemplateRegistry, name: str, ref: str) -> None:
        await self.loader.load(ref, module.id)
        binding = template.tag_get(name)
        if binding is None:
            raise TranslationError(f"{module.id}: no tag binding for needed tag {name!r}")
        binding.module = self.loader.lookup(ref, module.id)
        binding.parameter = binding.module.parameter
        LOG(f"{module.id}: <{name.lower()}> resolved to {binding.module.id}", level=3)
