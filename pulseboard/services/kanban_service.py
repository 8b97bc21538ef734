"""Kanban grouping of a project's tasks."""

from collections import OrderedDict
from typing import Iterable

from ..models.task import Task
from ..schemas.task import TaskResponse, TaskStatus

KANBAN_COLUMNS = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.DONE)


def column_for(status: str) -> TaskStatus:
    """Board column for a task status; anything not started or done is PENDING."""
    if status == TaskStatus.IN_PROGRESS.value:
        return TaskStatus.IN_PROGRESS
    if status == TaskStatus.DONE.value:
        return TaskStatus.DONE
    return TaskStatus.PENDING


def group_tasks(tasks: Iterable[Task]) -> "OrderedDict[str, list[TaskResponse]]":
    columns: "OrderedDict[str, list[TaskResponse]]" = OrderedDict(
        (column.value, []) for column in KANBAN_COLUMNS
    )
    for task in tasks:
        columns[column_for(task.status).value].append(TaskResponse.model_validate(task))
    return columns
