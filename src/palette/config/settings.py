"""Global defaults for the command palette core.

Values can be overridden through environment variables so that an embedding
application (or a test run) can tune limits without touching code.
"""

from __future__ import annotations

import os
from typing import Final

DEFAULT_HISTORY_LIMIT: Final = int(os.environ.get("PALETTE_HISTORY_LIMIT", "50"))
DEFAULT_SEARCH_LIMIT: Final = int(os.environ.get("PALETTE_SEARCH_LIMIT", "10"))
DEFAULT_SHORTCUT_PREFIX: Final = os.environ.get("PALETTE_SHORTCUT_PREFIX", ":")
# "replace" keeps last-write-wins registration, "reject" raises on collision
DEFAULT_COLLISION_POLICY: Final = os.environ.get("PALETTE_COLLISION_POLICY", "replace")
DEFAULT_SHORTCUT_ALIAS_PREFIX: Final = os.environ.get(
    "PALETTE_SHORTCUT_ALIAS_PREFIX", "0"
).lower() in ("1", "true", "yes", "on")
DEFAULT_LOG_CAPACITY: Final = int(os.environ.get("PALETTE_LOG_CAPACITY", "500"))

DEFAULT_CATEGORY: Final = "general"
DEFAULT_ICON: Final = "⚡"
