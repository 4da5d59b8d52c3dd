"""Declarative field reading. Each block declares its fields once; missing or bad values get defaults."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from blockmacro.workspace import Node

Number = Union[int, float]


class FieldKind(Enum):
    NUMBER = "number"
    TEXT = "text"
    DROPDOWN = "dropdown"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    default: Any = None
    options: tuple[str, ...] = ()
    integer: bool = False
    at_least: Optional[Number] = None

    def read(self, node: Node) -> Any:
        """Field value from ``node`` with the default substituted. Never raises."""
        return self.coerce(node.get_field(self.name))

    def coerce(self, raw: Any) -> Any:
        if self.kind is FieldKind.NUMBER:
            return self._read_number(raw)
        if self.kind is FieldKind.DROPDOWN:
            return self._read_option(raw)
        return self._read_text(raw)

    def _read_number(self, raw: Any) -> Number:
        value = to_number(raw, self.default)
        if self.integer:
            value = int(value)
        if self.at_least is not None and value < self.at_least:
            return self.default
        return value

    def _read_option(self, raw: Any) -> str:
        if not self.options:
            return self._read_text(raw)
        value = "" if raw is None else str(raw)
        return value if value in self.options else self.default

    def _read_text(self, raw: Any) -> str:
        if raw is None:
            return self.default
        return raw if isinstance(raw, str) else str(raw)

    def describe(self) -> dict[str, Any]:
        info: dict[str, Any] = {"name": self.name, "kind": self.kind.value, "default": self.default}
        if self.options:
            info["options"] = list(self.options)
        return info


def number_field(name: str, default: Number = 0, integer: bool = False, at_least: Optional[Number] = None) -> FieldSpec:
    return FieldSpec(name, FieldKind.NUMBER, default=default, integer=integer, at_least=at_least)


def text_field(name: str, default: str = "") -> FieldSpec:
    return FieldSpec(name, FieldKind.TEXT, default=default)


def dropdown_field(name: str, options: tuple[str, ...]) -> FieldSpec:
    """Dropdown whose default (and fallback for unknown values) is the first option."""
    return FieldSpec(name, FieldKind.DROPDOWN, default=options[0] if options else "", options=tuple(options))


def read_fields(node: Node, specs: tuple[FieldSpec, ...]) -> dict[str, Any]:
    return {spec.name: spec.read(node) for spec in specs}


def to_number(raw: Any, default: Number = 0) -> Number:
    """Parse a block field the way the editor's Number() does; integral values come back as int.

    An empty or blank string is 0, unparsable or non-finite input is ``default``.
    """
    if isinstance(raw, bool) or raw is None:
        return default
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return default
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(value):
        return default
    if value.is_integer():
        return int(value)
    return value
