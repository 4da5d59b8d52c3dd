"""Structured errors for blockmacro (workspace loading, config, transport)."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BlockMacroError(Exception):
    """Base for all blockmacro errors."""
    message: str
    block_id: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.path:
            loc = f"{self.path}: "
        if self.block_id is not None:
            loc += f"block {self.block_id!r}: "
        return f"{loc}{self.message}"


class WorkspaceError(BlockMacroError):
    """Workspace JSON is malformed (not a block tree the compiler can walk)."""
    pass


class ConfigError(BlockMacroError):
    """Settings file or environment holds an invalid value."""
    pass


class TransportError(BlockMacroError):
    """The macro agent could not be reached or answered with garbage."""
    pass
