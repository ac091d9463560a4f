"""
Audit records for pipeline stage invocations.

Each stage instance owns one TaskLog. Stage objects are shared by concurrent
requests, so appends go through a lock; retention is bounded by a deque.
"""

import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class TaskType(str, Enum):
    RESEARCH = "research"
    CONTENT = "content"
    DESIGN = "design"
    ASSET = "asset"
    GENERATOR = "generator"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class AgentTask:
    """One stage invocation. Frozen in practice once end_time is set."""
    type: TaskType
    description: str
    input: Dict[str, Any] = field(default_factory=dict)
    priority: TaskPriority = TaskPriority.MEDIUM
    id: str = field(default_factory=lambda: f"task-{uuid.uuid4().hex[:12]}")
    status: TaskStatus = TaskStatus.PENDING
    output: Optional[Any] = None
    error: Optional[str] = None
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    @property
    def duration_ms(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time).total_seconds() * 1000)

    def start(self) -> None:
        self._ensure_open()
        self.status = TaskStatus.IN_PROGRESS
        self.start_time = datetime.now()

    def complete(self, output: Any = None) -> None:
        self._ensure_open()
        self.status = TaskStatus.COMPLETED
        self.output = output
        self.end_time = datetime.now()

    def fail(self, error: str) -> None:
        self._ensure_open()
        self.status = TaskStatus.FAILED
        self.error = error
        self.end_time = datetime.now()

    def _ensure_open(self) -> None:
        if self.end_time is not None:
            raise RuntimeError(f"Task {self.id} already finished with status {self.status.value}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "input": self.input,
            "output": self.output,
            "error": self.error,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
        }


class TaskLog:
    """Append-only, thread-safe, bounded task history."""

    def __init__(self, max_entries: int = 1000):
        self._lock = threading.Lock()
        self._tasks = deque(maxlen=max_entries)

    @property
    def max_entries(self) -> int:
        return self._tasks.maxlen

    def append(self, task: AgentTask) -> AgentTask:
        with self._lock:
            self._tasks.append(task)
        return task

    def snapshot(self) -> List[AgentTask]:
        with self._lock:
            return list(self._tasks)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
