from __future__ import annotations

from typing import Final

# Discord limits
MAX_SELECT_OPTIONS: Final[int] = 25

# Role creation queue
DEFAULT_QUEUE_CONCURRENCY: Final[int] = 3
DEFAULT_RATE_LIMIT_WAIT_SECONDS: Final[float] = 5.0
DEFAULT_CREATE_PACING_SECONDS: Final[float] = 0.3

# Also retried as rate limits. 30010: "Maximum number of guild roles reached".
RATE_LIMIT_ERROR_CODES: Final[frozenset[int]] = frozenset({30010})
RATE_LIMIT_MESSAGE: Final[str] = "Too Many Requests"

# Color menu
COLOR_MENU_CUSTOM_ID_PREFIX: Final[str] = "colorRoles_"
COLOR_MENU_PLACEHOLDER: Final[str] = "Pick your color"

AUDIT_REASON: Final[str] = "epic-roles color role setup"

ERROR_MESSAGES = {
    "missing_permissions": "❌ You need administrator permissions to use this.",
    "missing_channel_id": "❌ Please provide a channel ID.",
    "invalid_channel": "❌ Invalid channel ID.",
    "role_missing": "❌ That color role no longer exists.",
    "forbidden": "❌ I'm missing permissions to manage that role.",
    "api_error": "❌ Discord rejected the role update. Try again shortly.",
    "unexpected": "Something went wrong running that command.",
}

USAGE = (
    "Usage:\n"
    "`{prefix}epic-roles add` - create every role from `roles.json`\n"
    "`{prefix}epic-roles remove` - delete those roles\n"
    "`{prefix}epic-roles dropdown <channel-id>` - post the color picker"
)
