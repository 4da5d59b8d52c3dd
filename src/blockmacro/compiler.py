"""Compile a block forest to a Program. Walks next-links in order; control blocks recurse via the context."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Optional

from blockmacro.commands import Command, Program
from blockmacro.registry import ConverterRegistry
from blockmacro.workspace import Node, Workspace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileContext:
    """Handed to every converter. Control blocks use it to compile their nested chains."""
    registry: ConverterRegistry

    def compile_chain(self, head: Optional[Node]) -> list[Command]:
        return compile_chain(head, self.registry)


def compile_chain(head: Optional[Node], registry: ConverterRegistry) -> list[Command]:
    """Commands for one next-linked chain, in order. Blocks without a converter contribute nothing."""
    ctx = CompileContext(registry)
    out: list[Command] = []
    node = head
    while node is not None:
        converter = registry.resolve(node.type)
        if converter is None:
            logger.debug("No converter for block type %r (id=%s); skipping", node.type, node.id)
        else:
            result = converter(node, ctx)
            if isinstance(result, Command):
                out.append(result)
            elif isinstance(result, Sequence):
                out.extend(result)
        node = node.next
    return out


def compile_program(roots: Iterable[Node], registry: Optional[ConverterRegistry] = None) -> Program:
    """Concatenate every root chain's commands in the order the roots are given."""
    if registry is None:
        from blockmacro.converters import default_registry
        registry = default_registry()
    steps: list[Command] = []
    for root in roots:
        steps.extend(compile_chain(root, registry))
    return Program(steps=tuple(steps))


def compile_workspace(
    workspace: Workspace,
    registry: Optional[ConverterRegistry] = None,
    ordered: bool = True,
) -> Program:
    return compile_program(workspace.top_blocks(ordered=ordered), registry)
