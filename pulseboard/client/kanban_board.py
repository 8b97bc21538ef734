"""Local kanban board model.

Dragging a card between columns only rearranges the local board; it is not
saved. A re-fetch from ``GET /api/kanban/{project_id}`` shows every task in
the column its stored status maps to.
"""

from typing import Any, Iterable, Optional

from ..services.kanban_service import KANBAN_COLUMNS, column_for


class KanbanBoard:
    def __init__(self, tasks: Iterable[dict[str, Any]] = ()) -> None:
        self.columns: dict[str, list[dict[str, Any]]] = {column.value: [] for column in KANBAN_COLUMNS}
        for task in tasks:
            self.columns[column_for(task.get("status", "")).value].append(dict(task))

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> "KanbanBoard":
        """Build a board from the kanban endpoint's JSON body."""
        board = cls()
        for column, tasks in payload.get("columns", {}).items():
            board.columns.setdefault(column, []).extend(dict(task) for task in tasks)
        return board

    def column_of(self, task_id: str) -> Optional[str]:
        for column, tasks in self.columns.items():
            if any(str(task.get("id")) == str(task_id) for task in tasks):
                return column
        return None

    def move_task(self, task_id: str, to_column: str) -> str:
        """
        Move a card to another column and return the toast to show.

        Raises:
            KeyError: unknown column or task
        """
        if to_column not in self.columns:
            raise KeyError(f"Unknown column: {to_column}")

        source = self.column_of(task_id)
        if source is None:
            raise KeyError(f"Unknown task: {task_id}")

        tasks = self.columns[source]
        index = next(i for i, task in enumerate(tasks) if str(task.get("id")) == str(task_id))
        task = tasks.pop(index)
        self.columns[to_column].append(task)
        return "Task moved successfully"
