"""Editor toolbox: categories of block types, loaded from YAML and rendered as Blockly toolbox XML."""

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Optional
from xml.sax.saxutils import quoteattr

import yaml

from blockmacro.errors import ConfigError


@dataclass(frozen=True)
class ToolboxCategory:
    name: str
    blocks: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "blocks": list(self.blocks)}


def load_toolbox(path: Optional[Path] = None) -> list[ToolboxCategory]:
    """Read toolbox categories from ``path`` (default: the bundled toolbox.yaml)."""
    if path is None:
        text = resources.files("blockmacro").joinpath("toolbox.yaml").read_text(encoding="utf-8")
        source = "toolbox.yaml"
    else:
        text = path.read_text(encoding="utf-8")
        source = str(path)
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path=source) from e
    categories = data.get("categories") if isinstance(data, dict) else None
    if not isinstance(categories, list):
        raise ConfigError("Toolbox needs a 'categories' list", path=source)

    out = []
    for entry in categories:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise ConfigError(f"Toolbox category needs a name: {entry!r}", path=source)
        blocks = entry.get("blocks") or []
        out.append(ToolboxCategory(name=entry["name"], blocks=tuple(str(b) for b in blocks)))
    return out


def toolbox_xml(categories: list[ToolboxCategory]) -> str:
    parts = ["<xml>"]
    for category in categories:
        parts.append(f"<category name={quoteattr(category.name)}>")
        for block_type in category.blocks:
            parts.append(f"<block type={quoteattr(block_type)}></block>")
        parts.append("</category>")
    parts.append("</xml>")
    return "".join(parts)
