from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class RuntimeStats:
    started_at: float = field(default_factory=time.time)
    roles_created: int = 0
    roles_abandoned: int = 0
    roles_deleted: int = 0
    roles_assigned: int = 0
    roles_cleared: int = 0
    menus_posted: int = 0

    def uptime_seconds(self) -> int:
        return int(time.time() - self.started_at)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": self.uptime_seconds(),
            "roles_created": self.roles_created,
            "roles_abandoned": self.roles_abandoned,
            "roles_deleted": self.roles_deleted,
            "roles_assigned": self.roles_assigned,
            "roles_cleared": self.roles_cleared,
            "menus_posted": self.menus_posted,
        }
