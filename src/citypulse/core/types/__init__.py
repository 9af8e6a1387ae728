from citypulse.core.types._dashboard_types import (
    DEFAULT_ICON,
    RawSnapshot,
    SeverityColor,
    SyncPhase,
    ViewMode,
)

__all__ = [
    "DEFAULT_ICON",
    "RawSnapshot",
    "SeverityColor",
    "SyncPhase",
    "ViewMode",
]
