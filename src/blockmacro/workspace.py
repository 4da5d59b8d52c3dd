"""Block tree model. A workspace is a forest of chains handed over by the visual editor.

Loads the Blockly JSON serialization:

    {"blocks": {"languageVersion": 0, "blocks": [
        {"type": "macro_start", "id": "a", "x": 20, "y": 20,
         "next": {"block": {"type": "macro_wait_ms", "fields": {"MS": 250}}}}
    ]}}

Nested chains hang off named sockets (``"inputs": {"DO": {"block": {...}}}``).
"""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from blockmacro.errors import WorkspaceError

# Blockly sorts top blocks by y, nudged by x along a 3 degree slope.
_TOP_BLOCK_SLOPE = math.sin(math.radians(3))


@dataclass(frozen=True)
class Node:
    type: str
    id: Optional[str] = None
    fields: dict[str, Any] = field(default_factory=dict)
    inputs: dict[str, "Node"] = field(default_factory=dict)
    next: Optional["Node"] = None
    x: float = 0.0
    y: float = 0.0

    def get_field(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def get_input(self, name: str) -> Optional["Node"]:
        """Block plugged into socket ``name``, or None when the socket is empty."""
        return self.inputs.get(name)

    def chain(self) -> Iterator["Node"]:
        """This node followed by every next-sibling."""
        node: Optional[Node] = self
        while node is not None:
            yield node
            node = node.next


@dataclass(frozen=True)
class Workspace:
    blocks: tuple[Node, ...] = ()
    path: Optional[str] = None

    def top_blocks(self, ordered: bool = True) -> list[Node]:
        """Chain heads. ``ordered`` mimics Blockly's getTopBlocks(true) layout order."""
        roots = list(self.blocks)
        if ordered:
            roots.sort(key=lambda n: n.y + _TOP_BLOCK_SLOPE * n.x)
        return roots

    def __len__(self) -> int:
        return len(self.blocks)


def load_workspace(data: Any, path: Optional[str] = None) -> Workspace:
    """Build a Workspace from Blockly JSON (dict, list or JSON text)."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise WorkspaceError(f"Invalid JSON: {e.msg} (line {e.lineno})", path=path) from e

    blocks = _top_level_blocks(data, path)
    return Workspace(blocks=tuple(_build_chain(b, path) for b in blocks), path=path)


def load_workspace_file(path: Path) -> Workspace:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise WorkspaceError(f"Cannot read workspace: {e.strerror}", path=str(path)) from e
    return load_workspace(text, path=str(path))


def _top_level_blocks(data: Any, path: Optional[str]) -> list[Any]:
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        raise WorkspaceError("Workspace must be a JSON object or list of blocks", path=path)
    blocks = data.get("blocks", [])
    # Blockly nests the list: {"blocks": {"languageVersion": 0, "blocks": [...]}}
    if isinstance(blocks, dict):
        blocks = blocks.get("blocks", [])
    if not isinstance(blocks, list):
        raise WorkspaceError("'blocks' must be a list", path=path)
    return blocks


def _build_chain(raw: Any, path: Optional[str]) -> Node:
    """Build a head node and its next-siblings; next-links are walked iteratively."""
    links: list[dict[str, Any]] = []
    current = raw
    while current is not None:
        if not isinstance(current, dict):
            raise WorkspaceError(f"Block must be an object, got {type(current).__name__}", path=path)
        links.append(current)
        current = _connection_raw(current.get("next"), current.get("id"), path)

    node: Optional[Node] = None
    for block in reversed(links):
        node = _build_node(block, node, path)
    assert node is not None
    return node


def _build_node(raw: dict[str, Any], next_node: Optional[Node], path: Optional[str]) -> Node:
    block_id = raw.get("id")
    block_type = raw.get("type")
    if not isinstance(block_type, str) or not block_type:
        raise WorkspaceError("Block is missing its 'type'", block_id=block_id, path=path)

    fields = raw.get("fields") or {}
    if not isinstance(fields, dict):
        raise WorkspaceError("'fields' must be an object", block_id=block_id, path=path)

    raw_inputs = raw.get("inputs") or {}
    if not isinstance(raw_inputs, dict):
        raise WorkspaceError("'inputs' must be an object", block_id=block_id, path=path)
    inputs: dict[str, Node] = {}
    for name, connection in raw_inputs.items():
        target = _connection_raw(connection, block_id, path)
        if target is not None:
            inputs[name] = _build_chain(target, path)

    return Node(
        type=block_type,
        id=block_id,
        fields=dict(fields),
        inputs=inputs,
        next=next_node,
        x=_coord(raw.get("x")),
        y=_coord(raw.get("y")),
    )


def _connection_raw(connection: Any, block_id: Optional[str], path: Optional[str]) -> Any:
    """Real block on a connection, falling back to its shadow (getInputTargetBlock)."""
    if connection is None:
        return None
    if not isinstance(connection, dict):
        raise WorkspaceError("Connection must be an object", block_id=block_id, path=path)
    return connection.get("block") or connection.get("shadow")


def _coord(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0
