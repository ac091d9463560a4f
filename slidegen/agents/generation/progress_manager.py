"""
Progress reporting for presentation generation.

Checkpoints are fixed per phase. Reporting is observational only: a failing
callback is logged and never changes the outcome of a generation.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from slidegen.config.logging_config import get_logger, get_logging_config, should_log_progress

logger = get_logger(__name__)

ProgressCallback = Callable[[str, int, str], Any]


class GenerationPhase(Enum):
    """Phase names reported to progress callbacks."""
    RESEARCH = "research"
    CONTENT = "content"
    DESIGN = "design"
    ASSETS = "assets"
    GENERATION = "generation"


# Phase progress ranges (start, end percentages)
PHASE_PROGRESS = {
    GenerationPhase.RESEARCH: (10, 20),
    GenerationPhase.CONTENT: (30, 60),
    GenerationPhase.DESIGN: (70, 75),
    GenerationPhase.ASSETS: (80, 85),
    GenerationPhase.GENERATION: (90, 100),
}


class GenerationProgress:
    """Forwards checkpoints to an optional callback and keeps a record of them."""

    def __init__(self, on_progress: Optional[ProgressCallback] = None, logging_config: Optional[Dict[str, Any]] = None):
        self.on_progress = on_progress
        self.logging_config = logging_config or get_logging_config()
        self.current_phase: Optional[GenerationPhase] = None
        self.progress = 0
        self.events: List[Dict[str, Any]] = []

    def update(self, phase: GenerationPhase, percent: int, message: str) -> Dict[str, Any]:
        low, high = PHASE_PROGRESS[phase]
        if not low <= percent <= high:
            raise ValueError(f"{percent}% is outside the {phase.value} range {low}-{high}")

        self.current_phase = phase
        self.progress = percent
        event = {
            "phase": phase.value,
            "progress": percent,
            "message": message,
            "timestamp": datetime.now().isoformat(),
        }
        self.events.append(event)

        if should_log_progress(percent, self.logging_config):
            logger.info(f"[PIPELINE] [{percent}%] {phase.value}: {message}")

        if self.on_progress is not None:
            try:
                self.on_progress(phase.value, percent, message)
            except Exception as e:
                logger.warning(f"[PIPELINE] Progress callback failed at {percent}%: {e}")

        return event
