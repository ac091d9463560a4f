from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.interfaces import IAssetSource, IModelGateway
from slidegen.agents.core.task_log import AgentTask, TaskLog, TaskPriority, TaskStatus, TaskType

__all__ = [
    "BaseAgent",
    "IAssetSource",
    "IModelGateway",
    "AgentTask",
    "TaskLog",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
]
