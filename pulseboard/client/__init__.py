"""Client-side helpers that consume the realtime stream and board API."""

from .kanban_board import KanbanBoard
from .live_state import LiveState
from .toast import ToastDebouncer

__all__ = ["KanbanBoard", "LiveState", "ToastDebouncer"]
