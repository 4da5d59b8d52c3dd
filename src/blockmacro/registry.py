"""Node-type registry: block type tag -> converter (plus the block's editor definition).

Resolution policy: tags are unique and the last registration for a tag wins.
Unknown tags resolve to None; the compiler skips such blocks.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Sequence, Union

from blockmacro.commands import Command
from blockmacro.fields import FieldSpec
from blockmacro.workspace import Node

if TYPE_CHECKING:
    from blockmacro.compiler import CompileContext

logger = logging.getLogger(__name__)

ConverterResult = Union[None, Command, Sequence[Command]]
Converter = Callable[[Node, "CompileContext"], ConverterResult]


@dataclass(frozen=True)
class BlockDefinition:
    """What an editor needs to draw the block: toolbox category, label, fields and sockets."""
    type: str
    category: str = "Actions"
    label: str = ""
    fields: tuple[FieldSpec, ...] = ()
    statements: tuple[str, ...] = ()
    values: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "category": self.category,
            "label": self.label or self.type,
            "fields": [f.describe() for f in self.fields],
            "statements": list(self.statements),
            "values": list(self.values),
        }


class ConverterRegistry:
    def __init__(self) -> None:
        self._converters: dict[str, Converter] = {}
        self._definitions: dict[str, BlockDefinition] = {}

    def register(self, type_tag: str, converter: Converter, definition: Optional[BlockDefinition] = None) -> None:
        if type_tag in self._converters:
            logger.debug("Converter for %r replaced (last registration wins)", type_tag)
        self._converters[type_tag] = converter
        if definition is not None:
            self._definitions[type_tag] = definition
        else:
            self._definitions.pop(type_tag, None)

    def converter(
        self,
        type_tag: str,
        category: str = "Actions",
        label: str = "",
        fields: Sequence[FieldSpec] = (),
        statements: Sequence[str] = (),
        values: Sequence[str] = (),
    ) -> Callable[[Converter], Converter]:
        """Decorator form of register() that also records the block definition."""
        definition = BlockDefinition(
            type=type_tag,
            category=category,
            label=label,
            fields=tuple(fields),
            statements=tuple(statements),
            values=tuple(values),
        )

        def decorate(fn: Converter) -> Converter:
            self.register(type_tag, fn, definition)
            return fn

        return decorate

    def resolve(self, type_tag: str) -> Optional[Converter]:
        return self._converters.get(type_tag)

    def definition(self, type_tag: str) -> Optional[BlockDefinition]:
        return self._definitions.get(type_tag)

    def definitions(self) -> list[BlockDefinition]:
        return list(self._definitions.values())

    def tags(self) -> list[str]:
        return list(self._converters)

    def copy(self) -> "ConverterRegistry":
        other = ConverterRegistry()
        other._converters = dict(self._converters)
        other._definitions = dict(self._definitions)
        return other

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._converters

    def __iter__(self) -> Iterator[str]:
        return iter(self._converters)

    def __len__(self) -> int:
        return len(self._converters)
