from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from slidegen.models.outline import Outline
from slidegen.models.slide import Slide
from slidegen.models.theme import Theme


class GenerationMetadata(BaseModel):
    generated_at: datetime = Field(default_factory=datetime.now)
    total_slides: int
    total_assets: int
    processing_time_ms: int
    agent_tasks: List[Dict[str, Any]] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    version: str = "1.0.0"


class SlideGenerationResult(BaseModel):
    """Terminal artifact of a generation request."""
    model_config = ConfigDict(frozen=True)

    slides: List[Slide]
    outline: Outline
    theme: Theme
    metadata: GenerationMetadata
    html: str
