from .app import create_app
from .presence import PresenceTracker

__all__ = ["PresenceTracker", "create_app"]
