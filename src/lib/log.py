"""
Context-aware compiler logging on top of Loguru.

LOG() writes only while a ProgramState is connected to the current context
and its verbosity reaches the message level, so compiler internals can log
without having state passed to them. Used as a library, with no state
connected, the compiler stays silent.

Templates compile concurrently, one asyncio task per module. A task names
the module it compiles with unit_connectToLogger(); every line that task
logs carries the name. Tasks copy the context they are created in, so a
state connected before asyncio.run() reaches every task, while a unit set
inside one task stays with that task.

Usage:
    from tagwright.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)           # once, before asyncio.run()
    unit_connectToLogger("app.html")       # in the task compiling app.html
    LOG("3 dependencies", level=2)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

# Connected ProgramState and the module the current task compiles
_program_state: ContextVar[Optional[Any]] = ContextVar("program_state", default=None)
_unit: ContextVar[str] = ContextVar("compile_unit", default="-")

logger_format = (
    "<green>{time:HH:mm:ss.SSS}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[unit]: <20}</magenta> │ "
    "<cyan>{module}:{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"unit": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def unit_connectToLogger(module_id: str) -> None:
    """Label subsequent log lines of the current task with a module id"""
    _unit.set(module_id)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required
        **kwargs: Additional loguru format arguments

    Verbosity levels:
        1 = Stage progress, one line per compiled template
        2 = Per-module details (dependencies, resolved tags)
        3 = Per-element generation trace
    """
    state = _program_state.get()

    if state is not None and getattr(state, "verbosity", 0) >= level:
        logger.opt(depth=1).bind(unit=_unit.get()).debug(message, **kwargs)
