"""Command IR. Blocks compile to these value objects; the agent consumes their JSON."""

import json
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Iterator, Optional, Union

Number = Union[int, float]


class CommandKind(str, Enum):
    ACTION = "ACTION"
    SETTING = "SETTING"
    CONTROL = "CONTROL"


@dataclass(frozen=True)
class Command:
    """Base for all instructions; subclasses fix ``kind``/``type`` and declare the payload."""
    kind: ClassVar[CommandKind]
    type: ClassVar[str]

    def payload(self) -> dict[str, Any]:
        return {f.name: _payload_value(getattr(self, f.name)) for f in fields(self)}

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "type": self.type, **self.payload()}


def _payload_value(value: Any) -> Any:
    if isinstance(value, Command):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_payload_value(v) for v in value]
    return value


# --- ACTION ---

@dataclass(frozen=True)
class CtrlKey(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "CTRL_KEY"
    key: str = ""


@dataclass(frozen=True)
class MouseMove(Command):
    """Relative pointer move."""
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "MOUSE_MOVE"
    dx: Number = 0
    dy: Number = 0


@dataclass(frozen=True)
class MouseMoveTo(Command):
    """Absolute pointer move (screen coordinates)."""
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "MOUSE_MOVE_TO"
    x: Number = 0
    y: Number = 0


@dataclass(frozen=True)
class MouseClick(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "MOUSE_CLICK"
    button: str = "LEFT"
    count: int = 1


@dataclass(frozen=True)
class TypeText(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "TYPE_TEXT"
    text: str = ""


@dataclass(frozen=True)
class WaitMs(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "WAIT_MS"
    ms: Number = 0


@dataclass(frozen=True)
class PressKey(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "PRESS_KEY"
    key: str = ""


@dataclass(frozen=True)
class OpenUrl(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "OPEN_URL"
    url: str = ""


@dataclass(frozen=True)
class PrintText(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "PRINT_TEXT"
    text: str = ""


@dataclass(frozen=True)
class PrintNumber(Command):
    kind: ClassVar[CommandKind] = CommandKind.ACTION
    type: ClassVar[str] = "PRINT_NUMBER"
    number: Number = 0


# --- SETTING ---

@dataclass(frozen=True)
class SetMode(Command):
    kind: ClassVar[CommandKind] = CommandKind.SETTING
    type: ClassVar[str] = "SET_MODE"
    mode: str = ""


@dataclass(frozen=True)
class Start(Command):
    """Program-start marker. Carries no payload and does not affect control flow."""
    kind: ClassVar[CommandKind] = CommandKind.SETTING
    type: ClassVar[str] = "START"


# --- CONTROL ---

@dataclass(frozen=True)
class Repeat(Command):
    """Run ``steps`` ``count`` times. The body stays nested, never flattened."""
    kind: ClassVar[CommandKind] = CommandKind.CONTROL
    type: ClassVar[str] = "REPEAT"
    count: int = 1
    steps: tuple[Command, ...] = ()


COMMAND_TYPES: dict[str, type[Command]] = {
    cls.type: cls
    for cls in (
        CtrlKey,
        MouseMove,
        MouseMoveTo,
        MouseClick,
        TypeText,
        WaitMs,
        PressKey,
        OpenUrl,
        PrintText,
        PrintNumber,
        SetMode,
        Start,
        Repeat,
    )
}


@dataclass(frozen=True)
class Program:
    """Compiled output: a flat top-level step list."""
    steps: tuple[Command, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"steps": [s.to_dict() for s in self.steps]}

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def walk(self) -> Iterator[Command]:
        """Every command depth-first, loop bodies included."""
        stack = list(reversed(self.steps))
        while stack:
            cmd = stack.pop()
            yield cmd
            if isinstance(cmd, Repeat):
                stack.extend(reversed(cmd.steps))

    def __len__(self) -> int:
        return len(self.steps)
