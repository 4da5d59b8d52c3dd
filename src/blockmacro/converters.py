"""Built-in block converters. Add a block by decorating a converter with @BUILTINS.converter(...)."""

from blockmacro.commands import (
    Command,
    CtrlKey,
    MouseClick,
    MouseMove,
    MouseMoveTo,
    OpenUrl,
    PressKey,
    PrintNumber,
    PrintText,
    Repeat,
    SetMode,
    Start,
    TypeText,
    WaitMs,
)
from blockmacro.compiler import CompileContext
from blockmacro.fields import dropdown_field, number_field, read_fields, text_field, to_number
from blockmacro.registry import ConverterRegistry
from blockmacro.workspace import Node

KEY_COMBO_OPTIONS = ("C", "V", "A")
PRESS_KEY_OPTIONS = ("ENTER", "ESCAPE", "CTRL_L")
MODE_OPTIONS = ("FAST", "NORMAL", "SLOW")
MOUSE_BUTTON_OPTIONS = ("LEFT", "RIGHT")

# Expression blocks that come with the editor; they only appear inside value sockets.
TEXT_LITERAL = "text"
NUMBER_LITERAL = "math_number"

BUILTINS = ConverterRegistry()


def default_registry() -> ConverterRegistry:
    """Fresh copy of the built-ins; register extra blocks on it without touching BUILTINS."""
    return BUILTINS.copy()


# --- Settings ---

@BUILTINS.converter("macro_start", category="Settings", label="start")
def convert_start(node: Node, ctx: CompileContext) -> Command:
    return Start()


SET_MODE_FIELDS = (dropdown_field("MODE", MODE_OPTIONS),)


@BUILTINS.converter("macro_set_mode", category="Settings", label="set mode", fields=SET_MODE_FIELDS)
def convert_set_mode(node: Node, ctx: CompileContext) -> Command:
    return SetMode(mode=read_fields(node, SET_MODE_FIELDS)["MODE"])


# --- Keyboard ---

CTRL_KEY_FIELDS = (dropdown_field("KEY", KEY_COMBO_OPTIONS),)


@BUILTINS.converter("macro_ctrl_key", label="ctrl +", fields=CTRL_KEY_FIELDS)
def convert_ctrl_key(node: Node, ctx: CompileContext) -> Command:
    return CtrlKey(key=read_fields(node, CTRL_KEY_FIELDS)["KEY"])


PRESS_KEY_FIELDS = (dropdown_field("KEY", PRESS_KEY_OPTIONS),)


@BUILTINS.converter("macro_press_key", label="press key", fields=PRESS_KEY_FIELDS)
def convert_press_key(node: Node, ctx: CompileContext) -> Command:
    return PressKey(key=read_fields(node, PRESS_KEY_FIELDS)["KEY"])


TYPE_TEXT_FIELDS = (text_field("TEXT"),)


@BUILTINS.converter("macro_type_text", label="type text", fields=TYPE_TEXT_FIELDS)
def convert_type_text(node: Node, ctx: CompileContext) -> Command:
    return TypeText(text=read_fields(node, TYPE_TEXT_FIELDS)["TEXT"])


# --- Mouse ---

MOUSE_MOVE_FIELDS = (number_field("DX"), number_field("DY"))


@BUILTINS.converter("macro_mouse_move", label="move mouse by", fields=MOUSE_MOVE_FIELDS)
def convert_mouse_move(node: Node, ctx: CompileContext) -> Command:
    values = read_fields(node, MOUSE_MOVE_FIELDS)
    return MouseMove(dx=values["DX"], dy=values["DY"])


MOUSE_MOVE_TO_FIELDS = (number_field("X"), number_field("Y"))


@BUILTINS.converter("macro_mouse_move_to", label="move mouse to", fields=MOUSE_MOVE_TO_FIELDS)
def convert_mouse_move_to(node: Node, ctx: CompileContext) -> Command:
    values = read_fields(node, MOUSE_MOVE_TO_FIELDS)
    return MouseMoveTo(x=values["X"], y=values["Y"])


MOUSE_CLICK_FIELDS = (
    dropdown_field("BUTTON", MOUSE_BUTTON_OPTIONS),
    number_field("COUNT", default=1, integer=True, at_least=1),
)


@BUILTINS.converter("macro_mouse_click", label="click", fields=MOUSE_CLICK_FIELDS)
def convert_mouse_click(node: Node, ctx: CompileContext) -> Command:
    values = read_fields(node, MOUSE_CLICK_FIELDS)
    return MouseClick(button=values["BUTTON"], count=values["COUNT"])


WIGGLE_FIELDS = (number_field("PIXELS"),)


@BUILTINS.converter("macro_wiggle", label="wiggle mouse", fields=WIGGLE_FIELDS)
def convert_wiggle(node: Node, ctx: CompileContext) -> list[Command]:
    """Left then right by the same distance; the pointer ends where it started."""
    pixels = read_fields(node, WIGGLE_FIELDS)["PIXELS"]
    return [MouseMove(dx=-pixels, dy=0), MouseMove(dx=pixels, dy=0)]


# --- Misc actions ---

WAIT_FIELDS = (number_field("MS"),)


@BUILTINS.converter("macro_wait_ms", label="wait ms", fields=WAIT_FIELDS)
def convert_wait(node: Node, ctx: CompileContext) -> Command:
    return WaitMs(ms=read_fields(node, WAIT_FIELDS)["MS"])


OPEN_URL_FIELDS = (text_field("URL"),)


@BUILTINS.converter("macro_open_url", label="open url", fields=OPEN_URL_FIELDS)
def convert_open_url(node: Node, ctx: CompileContext) -> Command:
    return OpenUrl(url=read_fields(node, OPEN_URL_FIELDS)["URL"])


@BUILTINS.converter("text_print", label="print", values=("TEXT",))
def convert_print(node: Node, ctx: CompileContext) -> Command:
    """Print the literal plugged into TEXT. Unknown expression blocks become a visible placeholder."""
    expr = node.get_input("TEXT")
    if expr is None:
        return PrintText(text="")
    if expr.type == TEXT_LITERAL:
        return PrintText(text=text_field("TEXT").read(expr))
    if expr.type == NUMBER_LITERAL:
        return PrintNumber(number=to_number(expr.get_field("NUM")))
    return PrintText(text=f"[UNSUPPORTED:{expr.type}]")


# --- Control ---

REPEAT_FIELDS = (number_field("TIMES", default=1, integer=True, at_least=1),)


@BUILTINS.converter("controls_repeat", category="Macros", label="repeat", fields=REPEAT_FIELDS, statements=("DO",))
def convert_repeat(node: Node, ctx: CompileContext) -> Command:
    count = read_fields(node, REPEAT_FIELDS)["TIMES"]
    return Repeat(count=count, steps=tuple(ctx.compile_chain(node.get_input("DO"))))


@BUILTINS.converter("controls_repeat_ext", category="Macros", label="repeat", values=("TIMES",), statements=("DO",))
def convert_repeat_ext(node: Node, ctx: CompileContext) -> Command:
    """Like controls_repeat, but the count comes from a number block in the TIMES socket."""
    times = node.get_input("TIMES")
    count = 1
    if times is not None and times.type == NUMBER_LITERAL:
        count = REPEAT_FIELDS[0].coerce(times.get_field("NUM"))
    return Repeat(count=count, steps=tuple(ctx.compile_chain(node.get_input("DO"))))
