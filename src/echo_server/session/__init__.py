"""Session handling."""

from .handler import ConnectionHandler
from .models import CloseReason, Line, Session, SessionState

__all__ = ["ConnectionHandler", "CloseReason", "Line", "Session", "SessionState"]
