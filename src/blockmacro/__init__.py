"""blockmacro: compile visual macro blocks into an agent command program."""

__version__ = "0.1.0"

from blockmacro.commands import CommandKind, Program
from blockmacro.compiler import compile_chain, compile_program, compile_workspace
from blockmacro.converters import default_registry
from blockmacro.workspace import Node, Workspace, load_workspace, load_workspace_file

__all__ = [
    "__version__",
    "CommandKind",
    "Node",
    "Program",
    "Workspace",
    "compile_chain",
    "compile_program",
    "compile_workspace",
    "default_registry",
    "load_workspace",
    "load_workspace_file",
]
