"""Topic-to-deck slide generation pipeline."""

from slidegen.agents.exceptions import AgentError, GenerationError, ModelError
from slidegen.agents.generation.orchestrator import SlideGenerator, create_slide_generator
from slidegen.models import SlideGenerationRequest, SlideGenerationResult

__version__ = "1.0.0"

__all__ = [
    "SlideGenerator",
    "create_slide_generator",
    "SlideGenerationRequest",
    "SlideGenerationResult",
    "GenerationError",
    "AgentError",
    "ModelError",
]
