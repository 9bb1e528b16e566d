#!/usr/bin/env python3
"""
tagwright - Component template compiler

Compiles declarative HTML/XML component templates into JavaScript modules.
Each generated module exports a constructor that builds the component's
node tree, instantiates nested custom components and hooks up id-labelled
descendants.

A template declares its vocabulary in <head>:
    <link rel="extends" href="./base.html">       inherit from a template
    <link rel="tag" href="./icon.html">            use <icon> as a component
    <link rel="attribute" href="./tip.js" as="tip">  handle tip="..." at runtime
    <link rel="exports" href="./other.html">       re-export another module
    <meta accepts="[body]" as="content">           accept caller content
    <meta exports="label" as="text">               rename an export

Usage:
    tagwright inputdir/ outputdir/ --inputFile widgets/button.html

    The root template and every template it uses as a custom tag are
    compiled to <module id>.js files below outputdir/.

Examples:
    # Basic compilation
    tagwright components/ build/ --inputFile app.html

    # Into a subdirectory, printing the highlighted root program
    tagwright components/ build/ --inputFile app.html --outputSubdir js/ --highlight

    # Verbose output
    tagwright components/ build/ --inputFile app.html -vv
"""

import asyncio
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import TemplateLoader, __version__, LOG, state_connectToLogger
from .lib.highlight import program_highlight
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _                            _       _     _
 | |_ __ _  __ ___      ___ __(_) __ _| |__ | |_
 | __/ _` |/ _` \ \ /\ / / '__| |/ _` | '_ \| __|
 | || (_| | (_| |\ V  V /| |  | | (_| | | | | |_
  \__\__,_|\__, | \_/\_/ |_|  |_|\__, |_| |_|\__|
           |___/                 |___/
  Component template compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="tagwright - compile component templates to JavaScript constructors",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Root template (relative to inputdir), e.g. app.html"
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the generated programs",
)

parser.add_argument(
    "--highlight",
    action="store_true",
    help="Print the generated root program with syntax highlighting",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the root template
            - jsOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the root template is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.jsOutputdir = state.outputdir / state.outputSubdir
    state.jsOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.jsOutputdir}", level=2)

    state.envOK = True
    return state


def source_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile the root template and every template it uses as a tag.

    Args:
        inputstate: Program state with inputdir and inputFile set

    Returns:
        ProgramState with added fields:
            - rootModule: Compiled root module
            - compiledModules: All compiled template modules

    Exits:
        1 if any template fails to load or compile
    """

    state = inputstate.copy()

    LOG("Compiling templates...", level=1)

    module_id = Path(state.inputFile).as_posix()
    loader = TemplateLoader.from_directory(state.inputdir)
    try:
        state.rootModule = asyncio.run(loader.root_load(module_id))
    except Exception as e:
        print(f"Compilation error: {e}", file=sys.stderr)
        if state.verbosity >= 3 or appsettings.debug_mode:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.compiledModules = loader.modules_compiled()
    LOG(f"Compiled {len(state.compiledModules)} template(s)", level=2)
    return state


def program_write(inputstate: ProgramState) -> ProgramState:
    """
    Write one <module id>.js file per compiled template.

    Args:
        inputstate: Program state with compiledModules

    Returns:
        ProgramState with added field:
            - writtenFiles: Paths of written programs

    Exits:
        1 if nothing was compiled or a write fails
    """

    state = inputstate.copy()

    if not state.compiledModules:
        print("Error: No compiled templates available", file=sys.stderr)
        sys.exit(1)

    written = []
    for module in state.compiledModules:
        output_file = state.jsOutputdir / f"{module.id}.js"
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(module.text, encoding="utf-8")
        except OSError as e:
            print(f"Error writing {output_file}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Wrote {output_file}", level=2)
        written.append(output_file)

    state.writtenFiles = written
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results to the user.

    Args:
        inputstate: Program state with writtenFiles populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if no programs were written
    """
    state: ProgramState = inputstate.copy()
    if not state.writtenFiles:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    if state.highlight:
        print(program_highlight(state.rootModule.text))

    LOG("\n✓ Compilation successful!", level=1)
    LOG(f"  Root:      {state.rootModule.id}", level=1)
    LOG(f"  Templates: {len(state.writtenFiles)}", level=1)
    LOG(f"  Output:    {state.jsOutputdir}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="tagwright - Component template compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile a template set to JavaScript modules.

    Orchestrates the full compilation pipeline:
        1. env_check: Validate paths and environment
        2. source_compile: Load and compile the root template and its tags
        3. program_write: Write one .js file per compiled template
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the template set
        outputdir: Directory where generated programs will be written
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_compile, program_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
