"""Tests for the node-type registry."""

import logging

from blockmacro.commands import PressKey, Start
from blockmacro.converters import BUILTINS, default_registry
from blockmacro.fields import number_field
from blockmacro.registry import ConverterRegistry


def test_resolve_unknown_is_none():
    assert ConverterRegistry().resolve("nothing") is None


def test_last_registration_wins(caplog):
    registry = ConverterRegistry()
    first = lambda node, ctx: Start()  # noqa: E731
    second = lambda node, ctx: PressKey(key="ENTER")  # noqa: E731
    registry.register("blk", first)
    with caplog.at_level(logging.DEBUG, logger="blockmacro.registry"):
        registry.register("blk", second)
    assert registry.resolve("blk") is second
    assert len(registry) == 1
    assert "replaced" in caplog.text


def test_decorator_records_definition():
    registry = ConverterRegistry()

    @registry.converter("macro_beep", category="Sounds", label="beep", fields=(number_field("HZ"),))
    def beep(node, ctx):
        return None

    assert registry.resolve("macro_beep") is beep
    definition = registry.definition("macro_beep")
    assert definition.category == "Sounds"
    assert definition.to_dict()["fields"] == [{"name": "HZ", "kind": "number", "default": 0}]


def test_plain_register_drops_stale_definition():
    registry = default_registry()
    registry.register("macro_wait_ms", lambda node, ctx: None)
    assert registry.definition("macro_wait_ms") is None


def test_copy_is_independent():
    registry = default_registry()
    registry.register("extra", lambda node, ctx: None)
    assert "extra" in registry
    assert "extra" not in BUILTINS
    assert "extra" not in default_registry()


def test_builtin_block_types():
    assert set(BUILTINS) == {
        "macro_start",
        "macro_set_mode",
        "macro_ctrl_key",
        "macro_press_key",
        "macro_type_text",
        "macro_mouse_move",
        "macro_mouse_move_to",
        "macro_mouse_click",
        "macro_wiggle",
        "macro_wait_ms",
        "macro_open_url",
        "text_print",
        "controls_repeat",
        "controls_repeat_ext",
    }
    assert len(BUILTINS.definitions()) == len(BUILTINS)
    assert BUILTINS.definition("controls_repeat").statements == ("DO",)
