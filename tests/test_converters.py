"""Tests for the built-in block converters (one block -> zero, one or many commands)."""

import pytest

from blockmacro.commands import (
    CommandKind,
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
from blockmacro.compiler import compile_chain
from blockmacro.converters import default_registry
from blockmacro.workspace import Node


def _one(node: Node):
    out = compile_chain(node, default_registry())
    assert len(out) == 1
    return out[0]


@pytest.mark.parametrize("node,expected", [
    (Node("macro_start"), Start()),
    (Node("macro_ctrl_key", fields={"KEY": "V"}), CtrlKey(key="V")),
    (Node("macro_press_key", fields={"KEY": "ESCAPE"}), PressKey(key="ESCAPE")),
    (Node("macro_type_text", fields={"TEXT": "hello"}), TypeText(text="hello")),
    (Node("macro_wait_ms", fields={"MS": "1500"}), WaitMs(ms=1500)),
    (Node("macro_open_url", fields={"URL": "https://example.com"}), OpenUrl(url="https://example.com")),
    (Node("macro_mouse_move", fields={"DX": 10, "DY": -3}), MouseMove(dx=10, dy=-3)),
    (Node("macro_mouse_move_to", fields={"X": 640, "Y": 480}), MouseMoveTo(x=640, y=480)),
    (Node("macro_mouse_click", fields={"BUTTON": "RIGHT", "COUNT": 2}), MouseClick(button="RIGHT", count=2)),
    (Node("macro_set_mode", fields={"MODE": "FAST"}), SetMode(mode="FAST")),
])
def test_fixed_field_blocks(node, expected):
    assert _one(node) == expected


@pytest.mark.parametrize("node,expected", [
    (Node("macro_ctrl_key"), CtrlKey(key="C")),
    (Node("macro_press_key", fields={"KEY": "F13"}), PressKey(key="ENTER")),
    (Node("macro_type_text"), TypeText(text="")),
    (Node("macro_wait_ms", fields={"MS": "soon"}), WaitMs(ms=0)),
    (Node("macro_open_url"), OpenUrl(url="")),
    (Node("macro_mouse_move"), MouseMove(dx=0, dy=0)),
    (Node("macro_mouse_move_to", fields={"X": "left"}), MouseMoveTo(x=0, y=0)),
    (Node("macro_mouse_click"), MouseClick(button="LEFT", count=1)),
    (Node("macro_mouse_click", fields={"COUNT": 0}), MouseClick(button="LEFT", count=1)),
    (Node("macro_set_mode"), SetMode(mode="FAST")),
])
def test_fixed_field_defaults(node, expected):
    assert _one(node) == expected


def test_kinds_on_the_wire():
    assert _one(Node("macro_start")).to_dict() == {"kind": "SETTING", "type": "START"}
    assert _one(Node("macro_set_mode", fields={"MODE": "SLOW"})).to_dict() == {
        "kind": "SETTING", "type": "SET_MODE", "mode": "SLOW",
    }
    assert _one(Node("macro_ctrl_key", fields={"KEY": "A"})).to_dict() == {
        "kind": "ACTION", "type": "CTRL_KEY", "key": "A",
    }


@pytest.mark.parametrize("pixels", [0, 5, 12.5])
def test_wiggle_expands_to_two_moves(pixels):
    out = compile_chain(Node("macro_wiggle", fields={"PIXELS": pixels}), default_registry())
    assert out == [MouseMove(dx=-pixels, dy=0), MouseMove(dx=pixels, dy=0)]


def test_wiggle_wire_format():
    out = compile_chain(Node("macro_wiggle", fields={"PIXELS": "8"}), default_registry())
    assert [c.to_dict() for c in out] == [
        {"kind": "ACTION", "type": "MOUSE_MOVE", "dx": -8, "dy": 0},
        {"kind": "ACTION", "type": "MOUSE_MOVE", "dx": 8, "dy": 0},
    ]


# --- print ---

def _print(expr: Node | None) -> Node:
    return Node("text_print", inputs={"TEXT": expr} if expr is not None else {})


def test_print_empty_socket():
    assert _one(_print(None)) == PrintText(text="")


def test_print_text_literal():
    assert _one(_print(Node("text", fields={"TEXT": "hi"}))) == PrintText(text="hi")


def test_print_number_literal():
    cmd = _one(_print(Node("math_number", fields={"NUM": "42"})))
    assert cmd == PrintNumber(number=42)
    assert cmd.to_dict() == {"kind": "ACTION", "type": "PRINT_NUMBER", "number": 42}


def test_print_unparsable_number_is_zero():
    assert _one(_print(Node("math_number", fields={"NUM": "forty"}))) == PrintNumber(number=0)
    assert _one(_print(Node("math_number"))) == PrintNumber(number=0)


def test_print_oversized_number_is_zero():
    assert _one(_print(Node("math_number", fields={"NUM": 10 ** 400}))) == PrintNumber(number=0)


def test_print_unsupported_expression():
    cmd = _one(_print(Node("foo_block")))
    assert cmd == PrintText(text="[UNSUPPORTED:foo_block]")
    assert cmd.kind is CommandKind.ACTION


# --- repeat ---

def test_repeat_compiles_body():
    body = Node("macro_wait_ms", fields={"MS": 100}, next=Node("macro_type_text", fields={"TEXT": "x"}))
    cmd = _one(Node("controls_repeat", fields={"TIMES": 3}, inputs={"DO": body}))
    assert cmd == Repeat(count=3, steps=(WaitMs(ms=100), TypeText(text="x")))


def test_repeat_empty_body():
    cmd = _one(Node("controls_repeat", fields={"TIMES": 2}))
    assert cmd == Repeat(count=2, steps=())
    assert cmd.to_dict() == {"kind": "CONTROL", "type": "REPEAT", "count": 2, "steps": []}


@pytest.mark.parametrize("times", [0, -3, "many", None])
def test_repeat_invalid_count_defaults_to_one(times):
    fields = {} if times is None else {"TIMES": times}
    assert _one(Node("controls_repeat", fields=fields)).count == 1


def test_repeat_nested():
    inner = Node("controls_repeat", fields={"TIMES": 2}, inputs={"DO": Node("macro_wiggle", fields={"PIXELS": 1})})
    outer = _one(Node("controls_repeat", fields={"TIMES": 4}, inputs={"DO": inner}))
    assert outer.count == 4
    assert outer.steps == (Repeat(count=2, steps=(MouseMove(dx=-1, dy=0), MouseMove(dx=1, dy=0))),)


def test_repeat_ext_reads_number_socket():
    node = Node(
        "controls_repeat_ext",
        inputs={"TIMES": Node("math_number", fields={"NUM": 5}), "DO": Node("macro_start")},
    )
    assert _one(node) == Repeat(count=5, steps=(Start(),))


@pytest.mark.parametrize("times", [None, Node("text", fields={"TEXT": "5"}), Node("math_number", fields={"NUM": 0})])
def test_repeat_ext_without_usable_count(times):
    inputs = {} if times is None else {"TIMES": times}
    assert _one(Node("controls_repeat_ext", inputs=inputs)).count == 1


def test_literal_blocks_have_no_converter():
    assert compile_chain(Node("text", fields={"TEXT": "a"}), default_registry()) == []
    assert compile_chain(Node("math_number", fields={"NUM": 1}), default_registry()) == []
