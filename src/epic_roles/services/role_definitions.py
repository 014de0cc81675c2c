from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from .role_queue import RoleTask

log = logging.getLogger("epic_roles.role_definitions")

_HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")


def is_valid_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value.strip()))


def parse_hex_color(value: str) -> int:
    """``"#ff8800"`` -> ``0xFF8800``. Raises ``ValueError`` on anything else."""
    value = value.strip()
    if not is_valid_hex_color(value):
        raise ValueError(f"not a hex color: {value!r}")
    return int(value.lstrip("#"), 16)


@dataclass(frozen=True)
class RoleDefinition:
    name: str
    color: str
    emoji: Optional[str] = None

    @property
    def color_value(self) -> int:
        return parse_hex_color(self.color)

    def to_task(self) -> RoleTask:
        return RoleTask(name=self.name, color=self.color)


def _parse_entry(index: int, raw: Any) -> Optional[RoleDefinition]:
    if not isinstance(raw, dict):
        log.warning(f"roles entry {index} is not an object; skipping")
        return None

    name = str(raw.get("name") or "").strip()
    color = str(raw.get("color") or "").strip()
    emoji = raw.get("emoji") or None

    if not name:
        log.warning(f"roles entry {index} has no name; skipping")
        return None
    if not is_valid_hex_color(color):
        log.warning(f"Role {name!r} has invalid color {color!r}; skipping")
        return None
    if not color.startswith("#"):
        color = f"#{color}"
    return RoleDefinition(name=name, color=color, emoji=str(emoji) if emoji else None)


def parse_role_definitions(data: Any) -> List[RoleDefinition]:
    if not isinstance(data, list):
        log.error(f"Role definitions must be a JSON array, got {type(data).__name__}")
        return []

    definitions: List[RoleDefinition] = []
    seen: set[str] = set()
    for index, raw in enumerate(data):
        definition = _parse_entry(index, raw)
        if definition is None:
            continue
        if definition.name in seen:
            log.warning(f"Duplicate role {definition.name!r} in definitions; keeping the first")
            continue
        seen.add(definition.name)
        definitions.append(definition)
    return definitions


def load_role_definitions(path: str | Path) -> List[RoleDefinition]:
    """Read ``roles.json``. Any read or parse problem is logged and yields ``[]``."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        log.error(f"Failed to load {path}: file not found")
        return []
    except (OSError, json.JSONDecodeError) as e:
        log.error(f"Failed to load {path}: {e}")
        return []

    definitions = parse_role_definitions(data)
    log.info(f"Loaded {len(definitions)} role definitions from {path}")
    return definitions
