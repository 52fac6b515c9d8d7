"""
Live session: frames in, annotated overlays out.

Recognition runs asynchronously; the newest finished annotation always wins
(see LatestResultSlot). Only the loop thread touches the rendering surface.
"""

from .config import LiveConfig
from .focus import focus_point_for_touch
from .session import LiveSession, SessionStats
from .slot import LatestResultSlot

__all__ = [
    "LatestResultSlot",
    "LiveConfig",
    "LiveSession",
    "SessionStats",
    "focus_point_for_touch",
]
