"""
Command line state bus

ProgramState carries the CLI options and everything the compile pipeline
stages add to it; pipeline() threads one state through a sequence of
stages. Every stage copies the state it receives before adding to it.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Callable, List, Optional, Type, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .module import Module


PS = TypeVar("PS", bound="ProgramState")
Stage = Callable[["ProgramState"], "ProgramState"]


@dataclass
class ProgramState:
    """
    Options and results of one tagwright run.

    Stage contributions:
        - options: inputdir, outputdir, inputFile, outputSubdir, highlight,
          verbosity
        - env_check: inputSourceFile, jsOutputdir, envOK
        - source_compile: rootModule, compiledModules
        - program_write: writtenFiles
        - results_report: nothing, it only prints

    Attributes:
        inputdir: Root of the template set; module ids are relative to it
        outputdir: Base directory for generated programs
        inputFile: Module id of the root template (e.g. "app.html")
        outputSubdir: Directory below outputdir receiving the programs
        highlight: Print the root program with syntax highlighting
        verbosity: LOG() threshold (1-3)
        envOK: Input exists and the output directory was created
        inputSourceFile: Absolute path of the root template
        jsOutputdir: outputdir / outputSubdir
        rootModule: The compiled root template
        compiledModules: Every compiled template, dependencies first
        writtenFiles: Generated .js files, in write order
    """

    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    inputFile: str = field(default="")
    outputSubdir: str = field(default=".")
    highlight: bool = field(default=False)
    verbosity: int = field(default=1)

    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    jsOutputdir: Path = field(default=Path("/"))
    rootModule: Optional["Module"] = field(default=None)
    compiledModules: List["Module"] = field(default_factory=list)
    writtenFiles: List[Path] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Build the initial state from parsed CLI options.

        Options the state has no field for (chris_plugin adds its own) are
        dropped.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        values = {key: value for key, value in vars(options).items() if key in known}
        return cls(**{**values, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy; list fields are shared until a stage replaces them"""
        return dataclasses.replace(self)


def pipeline(initial_state: ProgramState, *stages: Stage) -> ProgramState:
    """
    Run stages in order, each on the state the previous one returned.

    Example:
        final_state = pipeline(state, env_check, source_compile, program_write, results_report)
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
