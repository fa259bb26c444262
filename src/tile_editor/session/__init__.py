"""Edit sessions: configuration, the session facade and host sync types."""

from .config import AppConfig, GridProfile, SessionConfig, default_config_path
from .session import EditSession, SessionDelta, SessionView, Transaction
from .sync import SessionCursorError, TileMirror, TileSync

__all__ = [
    "AppConfig",
    "GridProfile",
    "SessionConfig",
    "default_config_path",
    "EditSession",
    "SessionDelta",
    "SessionView",
    "Transaction",
    "SessionCursorError",
    "TileMirror",
    "TileSync",
]
