"""Business logic services.

Import the individual modules directly (``from ..services.task_service
import TaskService``); this package stays empty so the websocket layer can
import ``redis_service`` without pulling every service in.
"""
