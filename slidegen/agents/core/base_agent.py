from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from slidegen.agents.core.interfaces import IModelGateway
from slidegen.agents.core.task_log import AgentTask, TaskLog, TaskPriority, TaskStatus, TaskType


class BaseAgent:
    """Shared task bookkeeping for pipeline stages."""

    task_type: TaskType

    def __init__(self, gateway: Optional[IModelGateway] = None, task_history_limit: int = 1000):
        self.gateway = gateway
        self.task_log = TaskLog(max_entries=task_history_limit)

    @contextmanager
    def track(
        self,
        description: str,
        input: Optional[Dict[str, Any]] = None,
        priority: TaskPriority = TaskPriority.HIGH
    ) -> Iterator[AgentTask]:
        """Record a task around a stage operation.

        The task completes when the block exits normally unless the block
        already finished it; any exception marks it failed and propagates.
        """
        task = AgentTask(type=self.task_type, description=description, input=input or {}, priority=priority)
        task.start()
        self.task_log.append(task)
        try:
            yield task
        except BaseException as e:
            if not task.is_finished:
                task.fail(str(e) or type(e).__name__)
            raise
        if not task.is_finished:
            task.complete()

    def get_task_history(self) -> List[AgentTask]:
        return self.task_log.snapshot()

    def get_stats(self) -> Dict[str, Any]:
        tasks = self.task_log.snapshot()
        completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
        failed = sum(1 for t in tasks if t.status == TaskStatus.FAILED)
        return {
            "total_tasks": len(tasks),
            "completed": completed,
            "failed": failed,
            "success_rate": completed / max(len(tasks), 1),
        }

    def clear_history(self) -> None:
        self.task_log.clear()
